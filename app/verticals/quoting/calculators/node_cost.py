from __future__ import annotations

from ..engine.context import NodeLine
from ..engine.line_state import LineState
from .inputs import as_decimal


def calc_node_line(line: NodeLine, currency: str) -> LineState:
    """
    Materiaal (node) regel: cost = revenue = quantity × pricePerUnit.

    Catalog items carry one rate, so margin is applied at quote level,
    never per node.
    """
    kind = line.kind.value
    qty = as_decimal(line.quantity, line_id=line.line_id, kind=kind, field="quantity")
    price = as_decimal(
        line.price_per_unit, line_id=line.line_id, kind=kind, field="pricePerUnit"
    )

    ls = LineState(line_id=line.line_id, kind=line.kind, name=line.name or "")
    ls.quantity = qty
    ls.cost = qty * price
    ls.revenue = ls.cost

    unit = f" {line.unit}" if line.unit else ""
    ls.breakdown.add_step(
        "NODE_COST",
        f"Material: {qty}{unit} x {currency} {price} = {currency} {ls.cost}",
    )
    return ls
