"""
BondingCurve — Linear Price Curve and Discrete Quote Engine

Primary issuance is priced by a deterministic function of cumulative supply:

    price(supply) = base_price + slope * supply

Quotes walk the curve one whole token at a time:
- buy_tokens_quote: funds in → whole tokens out (remainder is forfeited, not refunded)
- sell_tokens_quote: tokens in → funds out, marginal (highest) token redeemed first

Both quotes are pure: they only read the supply value passed by the caller.
Under a linear curve sell is the exact inverse of buy over the same token range
(up to float rounding).
"""

from dataclasses import dataclass
from typing import Final

from src.core.math.numerical_safeguards import validate_non_negative, validate_positive


# =============================================================================
# DEFAULT CURVE PARAMETERS
# =============================================================================

# Price of the very first token (supply = 0)
DEFAULT_BASE_PRICE: Final[float] = 0.01

# Price increment per minted token
DEFAULT_SLOPE: Final[float] = 0.0001

# Iteration ceiling for both quote walks
DEFAULT_MAX_QUOTE_STEPS: Final[int] = 5000

# Tokens credited to the founder when a project is created
DEFAULT_FOUNDER_ALLOCATION: Final[int] = 100

# Reserve level at which primary buys close
DEFAULT_FUNDING_GOAL: Final[float] = 100_000.0


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class CurveConfig:
    """Curve and issuance parameters.

    - base_price: price at supply 0
    - slope: price increase per token
    - max_quote_steps: ceiling on tokens walked by a single quote
    - founder_allocation: tokens minted to the founder on project creation
    - default_funding_goal: goal used when the founder does not supply one
    """
    base_price: float = DEFAULT_BASE_PRICE
    slope: float = DEFAULT_SLOPE
    max_quote_steps: int = DEFAULT_MAX_QUOTE_STEPS
    founder_allocation: int = DEFAULT_FOUNDER_ALLOCATION
    default_funding_goal: float = DEFAULT_FUNDING_GOAL

    def __post_init__(self):
        validate_positive(self.base_price, "base_price")
        validate_non_negative(self.slope, "slope")
        if self.max_quote_steps < 1:
            raise ValueError(f"max_quote_steps must be >= 1, got {self.max_quote_steps}")
        if self.founder_allocation < 0:
            raise ValueError(
                f"founder_allocation must be non-negative, got {self.founder_allocation}"
            )
        validate_positive(self.default_funding_goal, "default_funding_goal")

    @classmethod
    def from_settings(cls, settings) -> "CurveConfig":
        """Build from application Settings (see src.config)."""
        return cls(
            base_price=settings.base_price,
            slope=settings.slope,
            max_quote_steps=settings.max_quote_steps,
            founder_allocation=settings.founder_allocation,
            default_funding_goal=settings.default_funding_goal,
        )


DEFAULT_CURVE: Final[CurveConfig] = CurveConfig()


# =============================================================================
# PRICING
# =============================================================================


def price_at_supply(supply: int, config: CurveConfig = DEFAULT_CURVE) -> float:
    """
    Instantaneous unit price at a given supply.

    Args:
        supply: Tokens currently in existence (>= 0)
        config: Curve parameters

    Returns:
        base_price + slope * supply

    Examples:
        >>> price_at_supply(0)
        0.01
        >>> price_at_supply(100)
        0.02
    """
    return config.base_price + config.slope * supply


# =============================================================================
# QUOTES
# =============================================================================


def buy_tokens_quote(
    current_supply: int,
    funds_in: float,
    config: CurveConfig = DEFAULT_CURVE,
) -> int:
    """
    Whole tokens purchasable with funds_in starting at current_supply.

    Each step pays the marginal price at the running supply, then advances the
    supply by one. Stops when the remaining budget cannot cover the next token
    or after max_quote_steps tokens. Any unspent remainder is not returned.

    Args:
        current_supply: Supply before the purchase
        funds_in: Budget (> 0 for a meaningful quote)
        config: Curve parameters

    Returns:
        tokens_out (0 if the budget cannot cover even one token)
    """
    tokens = 0
    budget = funds_in

    while budget > 0 and tokens < config.max_quote_steps:
        price = price_at_supply(current_supply + tokens, config)
        if budget < price:
            break
        budget -= price
        tokens += 1

    return tokens


def sell_tokens_quote(
    current_supply: int,
    tokens_in: int,
    config: CurveConfig = DEFAULT_CURVE,
) -> float:
    """
    Funds returned for redeeming tokens_in at current_supply.

    Walks down from supply - 1, summing the price of each level. Stops early
    when supply is exhausted or after max_quote_steps tokens.

    Args:
        current_supply: Supply before the sale
        tokens_in: Tokens to redeem
        config: Curve parameters

    Returns:
        amount_out (>= 0)
    """
    amount_out = 0.0
    supply_level = current_supply - 1
    limit = min(tokens_in, config.max_quote_steps)
    redeemed = 0

    while redeemed < limit and supply_level >= 0:
        amount_out += price_at_supply(supply_level, config)
        supply_level -= 1
        redeemed += 1

    return amount_out


def cost_of_tokens(
    current_supply: int,
    tokens: int,
    config: CurveConfig = DEFAULT_CURVE,
) -> float:
    """
    Exact cost of buying `tokens` starting at current_supply (closed form).

    sum_{k=0}^{tokens-1} price(current_supply + k)
        = tokens * price(current_supply) + slope * tokens * (tokens - 1) / 2
    """
    if tokens <= 0:
        return 0.0
    return (
        tokens * price_at_supply(current_supply, config)
        + config.slope * tokens * (tokens - 1) / 2.0
    )
