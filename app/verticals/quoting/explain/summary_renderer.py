from __future__ import annotations

from typing import Any, Dict, Tuple

from app.verticals.quoting.engine.context import QuoteTotals
from app.verticals.quoting.explain.formatter import (
    format_notices_header,
    format_steps_bullets_text,
)


def _as_payload(out: Any) -> Dict[str, Any]:
    if isinstance(out, dict):
        return out
    if isinstance(out, QuoteTotals):
        return out.as_payload()
    raise TypeError("render_quote_summary expects QuoteTotals or a payload dict")


def render_quote_summary(out: Any) -> Tuple[str, str]:
    """
    Returns (subject, body_text) for a computed quote.

    - blocking[] not empty: subject says BLOCKED, body lists why, no totals
    - else: totals, warnings header, per-line bullets with steps
    """
    p = _as_payload(out)

    quote_id = p.get("quoteId") or ""
    currency = p.get("currency") or ""
    blocking = p.get("blocking") or []
    warnings = p.get("warnings") or []

    label = f"Quote {quote_id}".strip()

    if blocking:
        subject = f"{label}: BLOCKED"
        body = format_notices_header("Calculation blocked:", blocking)
        return subject, body

    subject = f"{label}: {currency} {p.get('totalRevenue')} ({p.get('marginPct')}% margin)"

    parts = [
        f"Mode: {p.get('mode')}",
        f"Total cost: {currency} {p.get('totalCost')}",
        f"Total revenue: {currency} {p.get('totalRevenue')}",
        f"Margin: {currency} {p.get('marginAmount')} ({p.get('marginPct')}%)",
    ]

    header = format_notices_header("Warnings:", warnings)
    if header:
        parts.extend(["", header])

    for line in p.get("lines") or []:
        name = line.get("name") or line.get("lineId")
        parts.extend(["", f"{line.get('kind')} {name}:"])
        steps_text = format_steps_bullets_text(line.get("steps") or [])
        if steps_text:
            parts.append(steps_text)

    return subject, "\n".join(parts)
