"""
Numerical Safeguards — Safe Math Primitives

Floating-point guards shared by the curve, the registry and the governor:
- NaN/Inf detection for caller-supplied amounts
- Clamping so reserve never drifts below zero
- Whole-token checks (fractional tokens are never minted or moved)

CRITICAL INVARIANTS:
1. NaN/Inf never enter curve state (rejected before any write)
2. Clamped results always respect the requested bounds
3. All operations are deterministic and side-effect free
"""

import math
from typing import Final

# =============================================================================
# EPSILON PARAMETERS
# =============================================================================

# General purpose epsilon for calculations
EPS_CALC: Final[float] = 1e-12


# =============================================================================
# NaN/Inf DETECTION
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Check that a number is finite (not NaN, not Inf).

    Booleans are rejected: ``True`` is an int in Python but never a valid amount.

    Args:
        value: Value to check

    Returns:
        True if the value is a finite int/float, False otherwise
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


# =============================================================================
# PREDICATES
# =============================================================================


def is_positive_finite(value: float) -> bool:
    """True if value is a finite number strictly greater than zero."""
    return is_valid_float(value) and value > 0


def is_whole_number(value: float) -> bool:
    """
    Check that a number carries no fractional part.

    Examples:
        >>> is_whole_number(3)
        True
        >>> is_whole_number(3.0)
        True
        >>> is_whole_number(2.5)
        False
    """
    if not is_valid_float(value):
        return False
    return float(value).is_integer()


# =============================================================================
# CLAMPING
# =============================================================================


def clamp(
    value: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """
    Restrict a value to [min_value, max_value].

    Args:
        value: Source value
        min_value: Lower bound (optional)
        max_value: Upper bound (optional)

    Returns:
        Value restricted to the given range

    Examples:
        >>> clamp(5.0, 0.0, 10.0)
        5.0
        >>> clamp(-1.0, 0.0, 10.0)
        0.0
        >>> clamp(15.0, 0.0, 10.0)
        10.0
    """
    result = value

    if min_value is not None:
        result = max(result, min_value)

    if max_value is not None:
        result = min(result, max_value)

    return result


def subtract_non_negative(value: float, amount: float) -> float:
    """
    value - amount, floored at zero.

    Used for reserve outflows: float drift must never leave a negative reserve.

    Examples:
        >>> subtract_non_negative(10.0, 4.0)
        6.0
        >>> subtract_non_negative(1.0, 1.0000000001)
        0.0
    """
    return clamp(value - amount, min_value=0.0)


# =============================================================================
# VALIDATION
# =============================================================================


def validate_positive(value: float, name: str, eps: float = EPS_CALC) -> None:
    """
    Validate that a value is positive.

    Args:
        value: Value to check
        name: Parameter name (for the error message)
        eps: Minimum threshold (default: EPS_CALC)

    Raises:
        ValueError: If value <= eps or NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value <= eps:
        raise ValueError(f"{name} must be positive (> {eps}), got {value}")


def validate_non_negative(value: float, name: str) -> None:
    """
    Validate that a value is non-negative.

    Args:
        value: Value to check
        name: Parameter name (for the error message)

    Raises:
        ValueError: If value < 0 or NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
