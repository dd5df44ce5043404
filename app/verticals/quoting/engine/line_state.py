from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from app.verticals.quoting.explain.breakdown_builder import Breakdown

from .context import LineBreakdown, LineKind, TierBreakdown

D = Decimal


@dataclass
class LineState:
    """
    Mutable working state for one line while the calculators run.
    Frozen into a LineBreakdown once the line is done.
    """

    line_id: str
    kind: LineKind
    name: str = ""

    # Explainability (always present)
    breakdown: Breakdown = field(default_factory=Breakdown)

    quantity: D = D("0")
    cost: D = D("0")
    revenue: D = D("0")
    charge_out_configured: bool = False
    tiers: List[TierBreakdown] = field(default_factory=list)
    flags: List[str] = field(default_factory=list)

    @property
    def margin(self) -> D:
        return self.revenue - self.cost

    def flag(self, code: str) -> None:
        if code not in self.flags:
            self.flags.append(code)

    def freeze(self) -> LineBreakdown:
        return LineBreakdown(
            line_id=self.line_id,
            kind=self.kind,
            name=self.name,
            quantity=self.quantity,
            cost=self.cost,
            revenue=self.revenue,
            charge_out_configured=self.charge_out_configured,
            tiers=tuple(self.tiers),
            flags=tuple(self.flags),
            steps=tuple(self.breakdown.as_strings()),
        )
