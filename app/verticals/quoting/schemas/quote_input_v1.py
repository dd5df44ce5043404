# app/verticals/quoting/schemas/quote_input_v1.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, constr, field_validator, model_validator

from ..engine.context import (
    EquipmentLine,
    NodeLine,
    QuoteSnapshot,
    RevenueMode,
    StaffLine,
    TierHours,
    TierRates,
)

# UI bookkeeping entries in the nodes[] blob; never priced.
METADATA_NODE_ID = "METADATA"

# Numbers stay loose here (Decimal | str); sign and range checks are the
# calculator's job so the error names the offending line.
Number = Decimal

LineId = constr(strip_whitespace=True, min_length=1)  # type: ignore


def _is_metadata_node(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    return item.get("type") == "metadata" or item.get("nodeId") == METADATA_NODE_ID


class _Strict(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class RatesV1(_Strict):
    base: Optional[Number] = None
    ot1: Optional[Number] = None
    ot2: Optional[Number] = None

    def to_rates(self) -> TierRates:
        return TierRates(base=self.base, ot1=self.ot1, ot2=self.ot2)


class NodeItemV1(_Strict):
    node_id: LineId = Field(alias="nodeId")
    # Optional explicit line identity; defaults to the catalog id.
    line_id: Optional[LineId] = Field(default=None, alias="lineId")
    quantity: Number
    price_per_unit: Optional[Number] = Field(default=None, alias="pricePerUnit")
    name: str = ""
    category: Optional[str] = None
    unit: Optional[str] = None

    def to_line(self) -> NodeLine:
        return NodeLine(
            line_id=self.line_id or self.node_id,
            quantity=self.quantity,
            price_per_unit=self.price_per_unit,
            name=self.name,
            category=self.category,
            unit=self.unit,
        )


class _HoursItemV1(_Strict):
    """
    Either tiered hours or one `hours` value (all base, as the quote
    builder sends it). Not both.
    """

    line_id: Optional[LineId] = Field(default=None, alias="lineId")
    hours: Optional[Number] = None
    base_hours: Optional[Number] = Field(default=None, alias="baseHours")
    ot1_hours: Optional[Number] = Field(default=None, alias="ot1Hours")
    ot2_hours: Optional[Number] = Field(default=None, alias="ot2Hours")
    name: str = ""

    @model_validator(mode="after")
    def _one_hours_shape(self):
        tiered = any(
            v is not None for v in (self.base_hours, self.ot1_hours, self.ot2_hours)
        )
        if self.hours is not None and tiered:
            raise ValueError("use either hours or baseHours/ot1Hours/ot2Hours, not both")
        return self

    def tier_hours(self) -> TierHours:
        if self.hours is not None:
            return TierHours(base=self.hours)
        return TierHours(
            base=self.base_hours if self.base_hours is not None else Decimal("0"),
            ot1=self.ot1_hours if self.ot1_hours is not None else Decimal("0"),
            ot2=self.ot2_hours if self.ot2_hours is not None else Decimal("0"),
        )


class StaffItemV1(_HoursItemV1):
    staff_id: LineId = Field(alias="staffId")
    role: Optional[str] = None
    pay_rates: RatesV1 = Field(alias="payRates")
    charge_out_rates: Optional[RatesV1] = Field(default=None, alias="chargeOutRates")

    def to_line(self) -> StaffLine:
        return StaffLine(
            line_id=self.line_id or self.staff_id,
            hours=self.tier_hours(),
            pay_rates=self.pay_rates.to_rates(),
            charge_out_rates=(
                self.charge_out_rates.to_rates() if self.charge_out_rates else TierRates()
            ),
            name=self.name,
            role=self.role,
        )


class EquipmentItemV1(_HoursItemV1):
    equipment_id: LineId = Field(alias="equipmentId")
    category: Optional[str] = None
    cost_rates: RatesV1 = Field(alias="costRates")
    charge_out_rates: Optional[RatesV1] = Field(default=None, alias="chargeOutRates")

    def to_line(self) -> EquipmentLine:
        return EquipmentLine(
            line_id=self.line_id or self.equipment_id,
            hours=self.tier_hours(),
            cost_rates=self.cost_rates.to_rates(),
            charge_out_rates=(
                self.charge_out_rates.to_rates() if self.charge_out_rates else TierRates()
            ),
            name=self.name,
            category=self.category,
        )


class QuoteCalculateInputV1(_Strict):
    """
    Payload van de API-laag: rates zijn al opgezocht (geen foreign keys).
    """

    version: Literal["v1"] = "v1"
    quote_id: Optional[str] = Field(default=None, alias="quoteId")
    name: Optional[str] = None
    currency: Optional[constr(pattern=r"^[A-Z]{3}$")] = None  # type: ignore
    margin_pct: Optional[Number] = Field(default=None, alias="marginPct")
    mode: Optional[RevenueMode] = None

    nodes: List[NodeItemV1] = Field(default_factory=list)
    staff: List[StaffItemV1] = Field(default_factory=list)
    equipment: List[EquipmentItemV1] = Field(default_factory=list)

    @field_validator("nodes", mode="before")
    @classmethod
    def _drop_metadata_nodes(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return v
        return [item for item in v if not _is_metadata_node(item)]

    def to_snapshot(self, default_currency: Optional[str] = None) -> QuoteSnapshot:
        return QuoteSnapshot(
            nodes=[n.to_line() for n in self.nodes],
            staff=[s.to_line() for s in self.staff],
            equipment=[e.to_line() for e in self.equipment],
            margin_pct=self.margin_pct,
            mode=self.mode,
            currency=self.currency or default_currency,
            quote_id=self.quote_id,
            name=self.name,
        )
