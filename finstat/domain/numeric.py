# finstat/domain/numeric.py

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, TypeVar

# Real-number parameter shared by every period-indexed container.
T = TypeVar("T", float, Decimal)

NUMERIC_TYPES: dict[str, type] = {
    "float": float,
    "decimal": Decimal,
}


def numeric_type_name(numeric_type: type) -> str:
    for name, candidate in NUMERIC_TYPES.items():
        if candidate is numeric_type:
            return name
    raise ValueError(f"Unsupported numeric type: {numeric_type!r}")


def resolve_numeric_type(name: str) -> type:
    try:
        return NUMERIC_TYPES[name.lower()]
    except KeyError:
        raise ValueError(
            f"numeric_type must be one of {sorted(NUMERIC_TYPES)} (got {name!r})"
        ) from None


def coerce(value: Any, numeric_type: type) -> Any:
    """
    Convert a raw observation (int, float, str, Decimal) to numeric_type.

    Floats go through str() on the way to Decimal so 0.1 stays 0.1
    instead of its binary expansion.
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not numeric observations")
    if numeric_type is Decimal:
        if isinstance(value, Decimal):
            return value
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    if numeric_type is float:
        return float(value)
    raise ValueError(f"Unsupported numeric type: {numeric_type!r}")


def encode_number(value: Any) -> Any:
    """Keyed-format encoding: Decimal as string, everything else as float."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return str(value)
    return float(value)


def safe_divide(numerator: Optional[T], denominator: Optional[T]) -> Optional[T]:
    """numerator / denominator, or None when either is missing or the denominator is zero."""
    if numerator is None or denominator is None or denominator == 0:
        return None
    return numerator / denominator


def growth_rate(prior: Optional[T], current: Optional[T]) -> Optional[T]:
    """
    (current - prior) / prior.

    Undefined (None) when the prior value is zero or missing. Every growth
    computation in the package goes through here so the zero-prior rule
    cannot drift between call sites.
    """
    if prior is None or current is None or prior == 0:
        return None
    return (current - prior) / prior
