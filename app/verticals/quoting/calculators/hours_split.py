from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from ..engine.context import TierHours
from ..engine.policy import CalculatorPolicy
from .inputs import as_decimal

D = Decimal
ZERO = D("0")


def split_worked_hours(
    total_hours: Any,
    policy: Optional[CalculatorPolicy] = None,
    *,
    break_minutes: Any = 0,
) -> TierHours:
    """
    Diary/timesheet helper: verdeel gewerkte uren over base/OT1/OT2.

    Default policy: first 8h base, next 4h OT1, rest OT2. Caller-side
    only; the calculator itself never infers overtime.
    """
    p = policy or CalculatorPolicy()
    hours = as_decimal(total_hours, line_id=None, kind=None, field="hours")
    breaks = as_decimal(break_minutes, line_id=None, kind=None, field="breakMinutes")

    worked = max(hours - breaks / D("60"), ZERO)
    base_cap = p.base_hours_per_day
    ot1_cap = base_cap + p.ot1_hours_per_day

    return TierHours(
        base=min(worked, base_cap),
        ot1=min(max(worked - base_cap, ZERO), p.ot1_hours_per_day),
        ot2=max(worked - ot1_cap, ZERO),
    )
