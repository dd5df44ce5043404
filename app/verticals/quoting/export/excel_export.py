from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from openpyxl import Workbook
from openpyxl.styles import Font

from app.verticals.quoting.engine.context import QuoteTotals
from app.verticals.quoting.explain.formatter import (
    format_notices_header,
    format_steps_newlines,
)

LINE_HEADER = [
    "Line ID",
    "Kind",
    "Name",
    "Qty / hours",
    "Cost",
    "Revenue",
    "Margin",
    "Flags",
    "Breakdown",
]


def _num(value: Any) -> Any:
    # Excel wil getallen, geen strings
    if value is None or value == "":
        return None
    return Decimal(str(value))


def export_quote_to_excel(quote_output: QuoteTotals | Dict[str, Any], path: str) -> None:
    """
    Audit export: sheet "Quote" with totals, sheet "Lines" with one row
    per line item. Step text comes from explain.formatter only.
    """
    p = quote_output.as_payload() if isinstance(quote_output, QuoteTotals) else quote_output

    wb = Workbook()
    ws = wb.active
    ws.title = "Quote"

    currency = p.get("currency") or ""
    rows = [
        ("Quote ID", p.get("quoteId")),
        ("Currency", currency),
        ("Mode", p.get("mode")),
        ("Total cost", _num(p.get("totalCost"))),
        ("Total revenue", _num(p.get("totalRevenue"))),
        ("Margin", _num(p.get("marginAmount"))),
        ("Margin %", _num(p.get("marginPct"))),
        ("Target margin %", _num(p.get("targetMarginPct"))),
        ("Policy", p.get("policyVersion")),
    ]
    for label, value in rows:
        ws.append([label, value])
        ws.cell(row=ws.max_row, column=1).font = Font(bold=True)

    notices = format_notices_header("Warnings", p.get("warnings") or [])
    if notices:
        ws.append([])
        ws.append(["Warnings", notices])

    lines_ws = wb.create_sheet("Lines")
    lines_ws.append(LINE_HEADER)
    for cell in lines_ws[1]:
        cell.font = Font(bold=True)

    for line in p.get("lines") or []:
        lines_ws.append(
            [
                line.get("lineId"),
                line.get("kind"),
                line.get("name"),
                _num(line.get("quantity")),
                _num(line.get("cost")),
                _num(line.get("revenue")),
                _num(line.get("margin")),
                ", ".join(line.get("flags") or []),
                format_steps_newlines(line.get("steps") or []),
            ]
        )

    wb.save(path)
