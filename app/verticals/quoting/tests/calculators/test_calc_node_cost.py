from decimal import Decimal
from dataclasses import replace

import pytest

from app.verticals.quoting.calculators.node_cost import calc_node_line
from app.verticals.quoting.engine.errors import InvalidInputError


def test_node_cost_happy(node_line):
    ls = calc_node_line(node_line, "NZD")

    assert ls.cost == Decimal("50.00")
    assert ls.revenue == ls.cost
    assert ls.margin == Decimal("0")
    assert ls.breakdown.codes == ["NODE_COST"]
    assert any("NZD 50.00" in s for s in ls.breakdown)


def test_node_cost_keeps_sub_cent_precision(node_line):
    line = replace(node_line, quantity=Decimal("0.333"), price_per_unit=Decimal("1.10"))
    ls = calc_node_line(line, "NZD")

    # niet per regel afronden
    assert ls.cost == Decimal("0.36630")


def test_node_cost_accepts_plain_numbers(node_line):
    line = replace(node_line, quantity=3, price_per_unit=0.1)
    ls = calc_node_line(line, "NZD")

    assert ls.cost == Decimal("0.3")


@pytest.mark.parametrize(
    "field,value",
    [("quantity", Decimal("-1")), ("price_per_unit", Decimal("-0.01"))],
)
def test_node_cost_rejects_negative(node_line, field, value):
    line = replace(node_line, **{field: value})

    with pytest.raises(InvalidInputError) as exc:
        calc_node_line(line, "NZD")

    assert exc.value.line_id == "n1"
    assert exc.value.kind == "node"


def test_node_cost_missing_price_is_invalid(node_line):
    line = replace(node_line, price_per_unit=None)

    with pytest.raises(InvalidInputError) as exc:
        calc_node_line(line, "NZD")

    assert exc.value.field == "pricePerUnit"
