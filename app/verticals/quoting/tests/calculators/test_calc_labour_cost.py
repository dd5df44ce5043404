from dataclasses import replace
from decimal import Decimal

import pytest

from app.verticals.quoting.calculators.labour_cost import calc_tiered_line
from app.verticals.quoting.engine.context import Tier, TierHours, TierRates
from app.verticals.quoting.engine.errors import InvalidInputError
from app.verticals.quoting.engine.policy import CalculatorPolicy

D = Decimal


def test_staff_base_hours(staff_line, policy):
    ls, warning = calc_tiered_line(staff_line, policy, "NZD")

    assert warning is None
    assert ls.cost == D("240.00")
    assert ls.revenue == D("360.00")
    assert ls.quantity == D("8")
    assert [t.tier for t in ls.tiers] == [Tier.BASE]
    assert ls.breakdown.codes == ["TIER_BASE", "CHARGE_OUT_RATE"]


def test_staff_overtime_tiers(staff_line, policy):
    line = replace(
        staff_line,
        hours=TierHours(base=D("8"), ot1=D("2"), ot2=D("1")),
        pay_rates=TierRates(base=D("30.00"), ot1=D("45.00"), ot2=D("60.00")),
        charge_out_rates=TierRates(base=D("45.00"), ot1=D("67.50"), ot2=D("90.00")),
    )
    ls, _ = calc_tiered_line(line, policy, "NZD")

    # 8*30 + 2*45 + 1*60 = 390 ; 8*45 + 2*67.5 + 1*90 = 585
    assert ls.cost == D("390.00")
    assert ls.revenue == D("585.00")
    assert ls.quantity == D("11")
    assert [t.tier for t in ls.tiers] == [Tier.BASE, Tier.OT1, Tier.OT2]
    assert "OT_RATE_FALLBACK" not in ls.flags


def test_missing_ot_rate_falls_back_to_base(staff_line, policy):
    line = replace(staff_line, hours=TierHours(base=D("8"), ot1=D("2")))
    ls, _ = calc_tiered_line(line, policy, "NZD")

    ot1 = ls.tiers[1]
    assert ot1.cost_rate == D("30.00")
    assert ot1.charge_rate == D("45.00")
    assert ot1.cost_rate_fallback and ot1.charge_rate_fallback
    assert "OT_RATE_FALLBACK" in ls.flags
    assert ls.cost == D("300.00")


def test_missing_ot_rate_without_fallback_is_invalid(staff_line):
    strict = CalculatorPolicy(overtime_fallback_to_base=False)
    line = replace(staff_line, hours=TierHours(base=D("8"), ot2=D("1")))

    with pytest.raises(InvalidInputError) as exc:
        calc_tiered_line(line, strict, "NZD")

    assert exc.value.field == "payRateOT2"
    assert exc.value.line_id == "s1"


def test_equipment_without_charge_out_warns(equipment_line, policy):
    ls, warning = calc_tiered_line(equipment_line, policy, "NZD")

    assert ls.cost == D("320.00")
    assert ls.revenue == ls.cost
    assert not ls.charge_out_configured
    assert warning is not None
    assert warning.code == "NO_CHARGE_OUT_RATE"
    assert warning.line_id == "e1"
    assert "NO_CHARGE_OUT_RATE" in ls.flags
    assert any(s.startswith("WARNING:") for s in ls.breakdown)


def test_equipment_with_charge_out_rate(equipment_line, policy):
    line = replace(equipment_line, charge_out_rates=TierRates(base=D("120.00")))
    ls, warning = calc_tiered_line(line, policy, "NZD")

    assert warning is None
    assert ls.revenue == D("480.00")


def test_zero_charge_out_rate_is_configured(staff_line, policy):
    line = replace(staff_line, charge_out_rates=TierRates(base=D("0")))
    ls, warning = calc_tiered_line(line, policy, "NZD")

    assert warning is None
    assert ls.revenue == D("0")


def test_missing_base_cost_rate_is_invalid(staff_line, policy):
    line = replace(staff_line, pay_rates=TierRates(ot1=D("45.00")))

    with pytest.raises(InvalidInputError) as exc:
        calc_tiered_line(line, policy, "NZD")

    assert exc.value.field == "payRateBase"


def test_charge_out_overtime_without_base_is_invalid(staff_line, policy):
    line = replace(staff_line, charge_out_rates=TierRates(ot1=D("60.00")))

    with pytest.raises(InvalidInputError) as exc:
        calc_tiered_line(line, policy, "NZD")

    assert exc.value.field == "chargeOutBase"


@pytest.mark.parametrize(
    "changes,field",
    [
        ({"hours": TierHours(base=D("-1"))}, "baseHours"),
        ({"hours": TierHours(base=D("8"), ot1=D("-0.5"))}, "ot1Hours"),
        ({"pay_rates": TierRates(base=D("-30.00"))}, "payRateBase"),
        # unused tier rates are still validated
        ({"charge_out_rates": TierRates(base=D("45.00"), ot2=D("-1"))}, "chargeOutOT2"),
    ],
)
def test_negative_values_are_rejected(staff_line, policy, changes, field):
    line = replace(staff_line, **changes)

    with pytest.raises(InvalidInputError) as exc:
        calc_tiered_line(line, policy, "NZD")

    assert exc.value.field == field
    assert exc.value.line_id == "s1"


def test_equipment_field_names_use_cost_rate(equipment_line, policy):
    line = replace(equipment_line, cost_rates=TierRates(base="abc"))

    with pytest.raises(InvalidInputError) as exc:
        calc_tiered_line(line, policy, "NZD")

    assert exc.value.field == "costRateBase"
    assert exc.value.kind == "equipment"
