from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

# Error / warning codes (avoid string typos)
CODE_INVALID_INPUT = "INVALID_INPUT"
CODE_INVALID_MODE = "INVALID_MODE"
CODE_NO_CHARGE_OUT_RATE = "NO_CHARGE_OUT_RATE"


class PricingError(Exception):
    """
    Fatal calculator error. Aborts the computation; no partial totals.
    """

    code: str = "PRICING_ERROR"

    def __init__(self, message: str, meta: Optional[Dict[str, Any]] = None):
        self.message = str(message)
        self.meta = meta or {}
        super().__init__(f"{self.code}: {self.message}")

    def as_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "meta": dict(self.meta)}


class InvalidInputError(PricingError):
    """Negative, non-numeric or missing quantity/hours/rate on a line item."""

    code = CODE_INVALID_INPUT

    def __init__(
        self,
        message: str,
        *,
        line_id: Optional[str] = None,
        kind: Optional[str] = None,
        field: Optional[str] = None,
        value: Any = None,
    ):
        self.line_id = line_id
        self.kind = kind
        self.field = field
        meta: Dict[str, Any] = {}
        if line_id is not None:
            meta["lineId"] = line_id
        if kind is not None:
            meta["kind"] = kind
        if field is not None:
            meta["field"] = field
        if value is not None:
            meta["value"] = str(value)
        super().__init__(message, meta)


class InvalidModeError(PricingError):
    """Bottom-up and target-margin signals disagree (or a mode is missing its input)."""

    code = CODE_INVALID_MODE


@dataclass(frozen=True)
class MissingRateWarning:
    """
    Non-fatal: staff/equipment line without a charge-out rate.
    Revenue falls back to cost; the line breakdown is flagged.
    """

    line_id: str
    kind: str
    message: str = "no charge-out rate configured"
    code: str = CODE_NO_CHARGE_OUT_RATE
    meta: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "meta": {"lineId": self.line_id, "kind": self.kind, **self.meta},
        }
