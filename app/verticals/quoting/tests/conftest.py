from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

import pytest

from app.verticals.quoting.engine.context import (
    EquipmentLine,
    NodeLine,
    QuoteSnapshot,
    StaffLine,
    TierHours,
    TierRates,
)
from app.verticals.quoting.engine.policy import CalculatorPolicy
from app.verticals.quoting.engine.quote_engine import PricingCalculator

D = Decimal

VERTICAL_ROOT = Path(__file__).resolve().parents[1]
POLICY_PATH = VERTICAL_ROOT / "policies" / "v1.yaml"
FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def policy():
    return CalculatorPolicy.from_yaml_file(POLICY_PATH)


@pytest.fixture
def calculator(policy):
    return PricingCalculator(policy)


@pytest.fixture
def node_line():
    # 10 × 5.00 = 50.00
    return NodeLine(
        line_id="n1",
        quantity=D("10"),
        price_per_unit=D("5.00"),
        name="Concrete",
        unit="m3",
    )


@pytest.fixture
def staff_line():
    # 8h base @ pay 30.00 / charge 45.00 -> cost 240.00, revenue 360.00
    return StaffLine(
        line_id="s1",
        hours=TierHours(base=D("8")),
        pay_rates=TierRates(base=D("30.00")),
        charge_out_rates=TierRates(base=D("45.00")),
        name="Site lead",
    )


@pytest.fixture
def equipment_line():
    # 4h @ 80.00, no charge-out rate in the catalog
    return EquipmentLine(
        line_id="e1",
        hours=TierHours(base=D("4")),
        cost_rates=TierRates(base=D("80.00")),
        name="Excavator",
    )


@pytest.fixture
def sample_snapshot(node_line, staff_line):
    return QuoteSnapshot(
        nodes=[node_line],
        staff=[staff_line],
        currency="NZD",
        quote_id="Q-1001",
    )


@pytest.fixture
def sample_payload():
    return json.loads((FIXTURES / "input.v1.sample.json").read_text(encoding="utf-8"))
