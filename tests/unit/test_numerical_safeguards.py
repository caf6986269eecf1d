"""
Tests for the Numerical Safeguards module

Checks:
1. NaN/Inf detection (bools are never amounts)
2. Positivity and whole-token detection
3. Clamping and non-negative subtraction
4. Parameter validation
"""

import math

import pytest

from src.core.math.numerical_safeguards import (
    EPS_CALC,
    clamp,
    is_positive_finite,
    is_valid_float,
    is_whole_number,
    subtract_non_negative,
    validate_non_negative,
    validate_positive,
)

# =============================================================================
# NaN/Inf
# =============================================================================


class TestIsValidFloat:
    """Tests for is_valid_float"""

    def test_finite_numbers_valid(self) -> None:
        assert is_valid_float(0.0)
        assert is_valid_float(-3.5)
        assert is_valid_float(42)

    def test_nan_and_inf_invalid(self) -> None:
        assert not is_valid_float(float("nan"))
        assert not is_valid_float(float("inf"))
        assert not is_valid_float(float("-inf"))

    def test_bool_invalid(self) -> None:
        """True is an int subclass but never a valid amount"""
        assert not is_valid_float(True)
        assert not is_valid_float(False)

    def test_non_numeric_invalid(self) -> None:
        assert not is_valid_float("10")  # type: ignore[arg-type]
        assert not is_valid_float(None)  # type: ignore[arg-type]


# =============================================================================
# PREDICATES
# =============================================================================


class TestPredicates:
    """Tests for is_positive_finite / is_whole_number"""

    def test_is_positive_finite(self) -> None:
        assert is_positive_finite(0.5)
        assert is_positive_finite(3)
        assert not is_positive_finite(0)
        assert not is_positive_finite(-1.0)
        assert not is_positive_finite(math.inf)
        assert not is_positive_finite(True)

    @pytest.mark.parametrize("value", [0, 3, 3.0, -2, 1e6])
    def test_whole_numbers(self, value: float) -> None:
        assert is_whole_number(value)

    @pytest.mark.parametrize("value", [2.5, 0.1, float("nan"), float("inf"), True, "3"])
    def test_not_whole_numbers(self, value) -> None:
        assert not is_whole_number(value)


# =============================================================================
# CLAMPING
# =============================================================================


class TestClamp:
    """Tests for clamp / subtract_non_negative"""

    def test_within_range(self) -> None:
        assert clamp(5.0, 0.0, 10.0) == 5.0

    def test_below_and_above(self) -> None:
        assert clamp(-1.0, 0.0, 10.0) == 0.0
        assert clamp(15.0, 0.0, 10.0) == 10.0

    def test_open_bounds(self) -> None:
        assert clamp(-7.0) == -7.0
        assert clamp(-7.0, min_value=0.0) == 0.0
        assert clamp(7.0, max_value=5.0) == 5.0

    def test_subtract_non_negative(self) -> None:
        assert subtract_non_negative(10.0, 4.0) == pytest.approx(6.0)

    def test_subtract_drift_floored_at_zero(self) -> None:
        assert subtract_non_negative(1.0, 1.0000000001) == 0.0


# =============================================================================
# VALIDATION
# =============================================================================


class TestValidation:
    """Tests for validate_positive / validate_non_negative"""

    def test_validate_positive_accepts(self) -> None:
        validate_positive(1.0, "x")

    @pytest.mark.parametrize("value", [0.0, EPS_CALC, -1.0, float("nan")])
    def test_validate_positive_rejects(self, value: float) -> None:
        with pytest.raises(ValueError, match="x"):
            validate_positive(value, "x")

    def test_validate_non_negative_accepts_zero(self) -> None:
        validate_non_negative(0.0, "y")

    @pytest.mark.parametrize("value", [-0.1, float("inf")])
    def test_validate_non_negative_rejects(self, value: float) -> None:
        with pytest.raises(ValueError, match="y"):
            validate_non_negative(value, "y")


class TestPublicSurface:
    """Only guards used by the engine are exported"""

    def test_exports(self) -> None:
        import src.core.math as core_math

        for name in ("is_valid_float", "is_positive_finite", "is_whole_number", "clamp",
                     "subtract_non_negative", "validate_positive", "validate_non_negative"):
            assert name in core_math.__all__
        for name in ("sanitize_float", "is_close", "EPS_FLOAT_COMPARE_REL"):
            assert not hasattr(core_math, name)
