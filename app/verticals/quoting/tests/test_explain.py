import pytest

from app.verticals.quoting.explain import (
    Breakdown,
    format_notices_header,
    format_steps_bullets_text,
    format_steps_newlines,
)
from app.verticals.quoting.explain.summary_renderer import render_quote_summary


def test_breakdown_renders_in_insertion_order():
    b = Breakdown()
    b.add_step("TIER_BASE", "base: 8h")
    b.add_meta("OT_RATE_FALLBACK", "OT1: base rate used")
    b.add_check("CHARGE_OUT_RATE", "Charge-out: NZD 360.00")
    b.add_warning("NO_CHARGE_OUT_RATE", "revenue = cost")

    assert b.as_strings() == [
        "base: 8h",
        "META: OT1: base rate used",
        "OK: Charge-out: NZD 360.00",
        "WARNING: revenue = cost",
    ]
    assert len(b) == 4
    assert b.codes == ["TIER_BASE", "OT_RATE_FALLBACK", "CHARGE_OUT_RATE", "NO_CHARGE_OUT_RATE"]
    assert list(b) == b.as_strings()


@pytest.mark.parametrize(
    "code,message",
    [
        ("tier_base", "lowercase code"),
        ("AB", "too short"),
        ("NODE_COST", ""),
        ("NODE_COST", "line1\nline2"),
        ("NODE_COST", "x" * 241),
    ],
)
def test_breakdown_rejects_unsafe_entries(code, message):
    with pytest.raises(ValueError):
        Breakdown().add_step(code, message)


def test_formatters():
    steps = ["A", "", "B"]

    assert format_steps_newlines(steps) == "A\nB"
    assert format_steps_bullets_text(steps).splitlines() == ["• A", "• B"]


def test_notices_header():
    notices = [
        {"code": "NO_CHARGE_OUT_RATE", "message": "no charge-out rate configured", "meta": {"lineId": "e1"}}
    ]

    assert format_notices_header("Warnings:", notices) == (
        "Warnings:\n• [NO_CHARGE_OUT_RATE] no charge-out rate configured (line e1)"
    )
    assert format_notices_header("Warnings:", []) == ""


def test_summary_for_computed_quote(calculator, sample_snapshot):
    subject, body = render_quote_summary(calculator.compute(sample_snapshot))

    assert subject == "Quote Q-1001: NZD 410.00 (29.27% margin)"
    assert "Total cost: NZD 290.00" in body
    assert "• Material: 10 m3 x NZD 5.00 = NZD 50.00" in body
    assert "Warnings:" not in body


def test_summary_for_blocked_payload():
    payload = {
        "quoteId": "Q-9",
        "blocking": [{"code": "INVALID_INPUT", "message": "hours may not be negative", "meta": {}}],
        "warnings": [],
    }

    subject, body = render_quote_summary(payload)

    assert subject == "Quote Q-9: BLOCKED"
    assert "[INVALID_INPUT]" in body
    assert "Total" not in body


def test_summary_rejects_unknown_type():
    with pytest.raises(TypeError):
        render_quote_summary(["not", "a", "quote"])
