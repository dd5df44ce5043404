from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..engine.errors import InvalidInputError

D = Decimal


def as_decimal(
    value: Any,
    *,
    line_id: Optional[str],
    kind: Optional[str],
    field: str,
    allow_negative: bool = False,
) -> D:
    """
    Coerce a caller-supplied number to Decimal.

    Floats go through str() so 0.1 stays 0.1. Booleans, NaN and
    infinities are rejected, and so is anything negative unless
    allow_negative is set. Never clamps.
    """
    where = f"line {line_id} ({kind})" if line_id is not None else "quote"

    if value is None:
        raise InvalidInputError(
            f"{where}: {field} is required", line_id=line_id, kind=kind, field=field
        )
    if isinstance(value, bool):
        raise InvalidInputError(
            f"{where}: {field} must be numeric, got bool",
            line_id=line_id,
            kind=kind,
            field=field,
            value=value,
        )

    try:
        x = value if isinstance(value, D) else D(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidInputError(
            f"{where}: {field} is not a number: {value!r}",
            line_id=line_id,
            kind=kind,
            field=field,
            value=value,
        ) from e

    if not x.is_finite():
        raise InvalidInputError(
            f"{where}: {field} must be finite",
            line_id=line_id,
            kind=kind,
            field=field,
            value=value,
        )
    if x < 0 and not allow_negative:
        raise InvalidInputError(
            f"{where}: {field} may not be negative ({x})",
            line_id=line_id,
            kind=kind,
            field=field,
            value=value,
        )
    return x


def as_optional_decimal(
    value: Any, *, line_id: Optional[str], kind: Optional[str], field: str
) -> Optional[D]:
    if value is None:
        return None
    return as_decimal(value, line_id=line_id, kind=kind, field=field)
