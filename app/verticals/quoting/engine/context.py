from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

D = Decimal
ZERO = D("0")


class LineKind(str, Enum):
    NODE = "node"
    STAFF = "staff"
    EQUIPMENT = "equipment"


class RevenueMode(str, Enum):
    BOTTOM_UP = "bottom_up"
    TARGET_MARGIN = "target_margin"


class Tier(str, Enum):
    BASE = "base"
    OT1 = "ot1"
    OT2 = "ot2"


# -----------------------------
# Input models (resolved by the caller, no foreign keys)
# -----------------------------


@dataclass(frozen=True)
class TierHours:
    base: Any = ZERO
    ot1: Any = ZERO
    ot2: Any = ZERO

    def get(self, tier: Tier) -> Any:
        return getattr(self, tier.value)


@dataclass(frozen=True)
class TierRates:
    """
    Rates per hour bucket. None = not configured (OT tiers may fall back to base).
    """

    base: Any = None
    ot1: Any = None
    ot2: Any = None

    def get(self, tier: Tier) -> Any:
        return getattr(self, tier.value)

    @property
    def is_configured(self) -> bool:
        return any(v is not None for v in (self.base, self.ot1, self.ot2))


@dataclass(frozen=True)
class NodeLine:
    """Catalog material usage: quantity × pricePerUnit."""

    line_id: str
    quantity: Any
    price_per_unit: Any
    name: str = ""
    category: Optional[str] = None
    unit: Optional[str] = None

    kind = LineKind.NODE


@dataclass(frozen=True)
class StaffLine:
    line_id: str
    hours: TierHours
    pay_rates: TierRates
    charge_out_rates: TierRates = field(default_factory=TierRates)
    name: str = ""
    role: Optional[str] = None

    kind = LineKind.STAFF

    @property
    def cost_rates(self) -> TierRates:
        return self.pay_rates


@dataclass(frozen=True)
class EquipmentLine:
    line_id: str
    hours: TierHours
    cost_rates: TierRates
    # Equipment has no charge-out rate in the current catalog schema.
    charge_out_rates: TierRates = field(default_factory=TierRates)
    name: str = ""
    category: Optional[str] = None

    kind = LineKind.EQUIPMENT


LineItem = Union[NodeLine, StaffLine, EquipmentLine]
TieredLine = Union[StaffLine, EquipmentLine]


@dataclass
class QuoteSnapshot:
    """
    Snapshot van een offerte zoals de caller hem aanlevert.
    De calculator leest dit alleen; hij muteert niets.
    """

    nodes: List[NodeLine] = field(default_factory=list)
    staff: List[StaffLine] = field(default_factory=list)
    equipment: List[EquipmentLine] = field(default_factory=list)

    # Target margin (percent). None = not supplied.
    margin_pct: Any = None
    # None = let the calculator pick (bottom-up when charge-out rates exist)
    mode: Optional[Union[RevenueMode, str]] = None
    # None = the policy currency
    currency: Optional[str] = None
    quote_id: Optional[str] = None
    name: Optional[str] = None

    def line_items(self) -> Iterator[LineItem]:
        yield from self.nodes
        yield from self.staff
        yield from self.equipment


# -----------------------------
# Output models
# -----------------------------


@dataclass(frozen=True)
class TierBreakdown:
    tier: Tier
    hours: D
    cost_rate: D
    charge_rate: D
    cost: D
    revenue: D
    cost_rate_fallback: bool = False
    charge_rate_fallback: bool = False


@dataclass(frozen=True)
class LineBreakdown:
    """
    Per-line audit record. Amounts are exact (not rounded); rounding
    happens once on the quote totals.
    """

    line_id: str
    kind: LineKind
    name: str
    quantity: D
    cost: D
    revenue: D
    charge_out_configured: bool
    tiers: Tuple[TierBreakdown, ...] = ()
    flags: Tuple[str, ...] = ()
    steps: Tuple[str, ...] = ()

    @property
    def margin(self) -> D:
        return self.revenue - self.cost


@dataclass(frozen=True)
class QuoteTotals:
    version: str
    policy_version: str
    currency: str
    mode: RevenueMode
    total_cost: D
    total_revenue: D
    margin_pct: D
    target_margin_pct: Optional[D] = None
    quote_id: Optional[str] = None
    lines: Tuple[LineBreakdown, ...] = ()
    warnings: Tuple[Dict[str, Any], ...] = ()

    @property
    def margin_amount(self) -> D:
        return self.total_revenue - self.total_cost

    def as_payload(self) -> Dict[str, Any]:
        """JSON-safe dict; decimals as strings so output is byte-stable."""
        return {
            "version": self.version,
            "policyVersion": self.policy_version,
            "quoteId": self.quote_id,
            "currency": self.currency,
            "mode": self.mode.value,
            "totalCost": _money_str(self.total_cost),
            "totalRevenue": _money_str(self.total_revenue),
            "marginAmount": _money_str(self.margin_amount),
            "marginPct": _money_str(self.margin_pct),
            "targetMarginPct": (
                None if self.target_margin_pct is None else str(self.target_margin_pct)
            ),
            "lines": [_line_payload(ls) for ls in self.lines],
            "warnings": [dict(w) for w in self.warnings],
            "blocking": [],
        }


def _money_str(x: D) -> str:
    return f"{x:.2f}"


def _line_payload(ls: LineBreakdown) -> Dict[str, Any]:
    return {
        "lineId": ls.line_id,
        "kind": ls.kind.value,
        "name": ls.name,
        "quantity": str(ls.quantity),
        "cost": str(ls.cost),
        "revenue": str(ls.revenue),
        "margin": str(ls.margin),
        "chargeOutConfigured": ls.charge_out_configured,
        "tiers": [
            {
                "tier": t.tier.value,
                "hours": str(t.hours),
                "costRate": str(t.cost_rate),
                "chargeRate": str(t.charge_rate),
                "cost": str(t.cost),
                "revenue": str(t.revenue),
                "costRateFallback": t.cost_rate_fallback,
                "chargeRateFallback": t.charge_rate_fallback,
            }
            for t in ls.tiers
        ],
        "flags": list(ls.flags),
        "steps": list(ls.steps),
    }
