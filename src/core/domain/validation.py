"""
Argument guards shared by the registry, offer book and governor.

Each guard raises the typed domain error so that validation always happens
before any write.
"""

from src.core.domain.errors import InvalidAmountError, InvalidInputError
from src.core.math.numerical_safeguards import is_positive_finite, is_whole_number


def require_positive_funds(value: float, name: str) -> float:
    """Finite amount of funds > 0."""
    if not is_positive_finite(value):
        raise InvalidAmountError(f"{name} > 0 required", {name: repr(value)})
    return float(value)


def require_positive_tokens(value: int, name: str) -> int:
    """Whole number of tokens > 0."""
    if not is_positive_finite(value) or not is_whole_number(value):
        raise InvalidAmountError(f"{name} must be a whole number > 0", {name: repr(value)})
    return int(value)


def require_text(value: str | None, name: str) -> str:
    """Non-empty text after stripping whitespace."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{name} required", {"field": name})
    return value.strip()


def optional_text(value: str | None) -> str | None:
    """Stripped text, or None when blank."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def require_caller(caller_id: str) -> str:
    """Opaque caller id: any non-empty string, not verified further."""
    if not isinstance(caller_id, str) or not caller_id:
        raise InvalidInputError("caller id required", {"field": "caller_id"})
    return caller_id
