"""
Core math modules

Pricing primitives and numerical guards with deterministic, side-effect free behaviour.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Epsilon constants
    EPS_CALC,
    # NaN/Inf detection
    is_valid_float,
    # Predicates
    is_positive_finite,
    is_whole_number,
    # Utilities
    clamp,
    subtract_non_negative,
    # Validation
    validate_non_negative,
    validate_positive,
)

# Bonding Curve
from src.core.math.bonding_curve import (
    DEFAULT_BASE_PRICE,
    DEFAULT_CURVE,
    DEFAULT_FOUNDER_ALLOCATION,
    DEFAULT_FUNDING_GOAL,
    DEFAULT_MAX_QUOTE_STEPS,
    DEFAULT_SLOPE,
    CurveConfig,
    buy_tokens_quote,
    cost_of_tokens,
    price_at_supply,
    sell_tokens_quote,
)

__all__ = [
    # Numerical Safeguards — Epsilon constants
    "EPS_CALC",
    # Numerical Safeguards — NaN/Inf detection
    "is_valid_float",
    # Numerical Safeguards — Predicates
    "is_positive_finite",
    "is_whole_number",
    # Numerical Safeguards — Utilities
    "clamp",
    "subtract_non_negative",
    # Numerical Safeguards — Validation
    "validate_non_negative",
    "validate_positive",
    # Bonding Curve — Constants
    "DEFAULT_BASE_PRICE",
    "DEFAULT_CURVE",
    "DEFAULT_FOUNDER_ALLOCATION",
    "DEFAULT_FUNDING_GOAL",
    "DEFAULT_MAX_QUOTE_STEPS",
    "DEFAULT_SLOPE",
    # Bonding Curve — Types
    "CurveConfig",
    # Bonding Curve — Functions
    "buy_tokens_quote",
    "cost_of_tokens",
    "price_at_supply",
    "sell_tokens_quote",
]
