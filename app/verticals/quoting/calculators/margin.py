from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from ..engine.context import RevenueMode
from ..engine.errors import InvalidModeError
from ..engine.policy import CalculatorPolicy

D = Decimal
ZERO = D("0")
HUNDRED = D("100")


def parse_mode(value: Any) -> Optional[RevenueMode]:
    if value is None or isinstance(value, RevenueMode):
        return value
    try:
        return RevenueMode(str(value).strip().lower())
    except ValueError as e:
        known = [m.value for m in RevenueMode]
        raise InvalidModeError(
            f"Unknown revenue mode: {value!r}", {"mode": str(value), "known": known}
        ) from e


def resolve_mode(
    declared: Optional[RevenueMode], *, has_charge_out: bool, target_margin_pct: Optional[D]
) -> RevenueMode:
    """
    Explicit mode wins. Otherwise bottom-up when any line has its own
    charge-out rate, target-margin when only a margin was supplied.
    """
    if declared is RevenueMode.TARGET_MARGIN and target_margin_pct is None:
        raise InvalidModeError(
            "target_margin mode requires marginPct", {"mode": declared.value}
        )
    if declared is not None:
        return declared
    if has_charge_out:
        return RevenueMode.BOTTOM_UP
    if target_margin_pct is not None:
        return RevenueMode.TARGET_MARGIN
    return RevenueMode.BOTTOM_UP


def target_revenue(total_cost: D, margin_pct: D, policy: CalculatorPolicy) -> D:
    """revenue = round(totalCost × (1 + marginPct / 100), 2)"""
    return policy.money(total_cost * (D("1") + margin_pct / HUNDRED))


def actual_margin_pct(total_cost: D, total_revenue: D, policy: CalculatorPolicy) -> D:
    """
    (revenue - cost) / revenue × 100, only defined for a quote with cost.
    Cost 0 or revenue 0 -> 0, never a division error.
    """
    if total_cost <= ZERO or total_revenue == ZERO:
        return policy.pct(ZERO)
    return policy.pct((total_revenue - total_cost) / total_revenue * HUNDRED)


def markup_pct(total_cost: D, total_revenue: D) -> Optional[D]:
    """(revenue - cost) / cost × 100; the unit marginPct is applied in. None without cost."""
    if total_cost <= ZERO:
        return None
    return (total_revenue - total_cost) / total_cost * HUNDRED


def check_mode_conflict(
    *, target_margin_pct: D, total_cost: D, bottom_up_revenue: D, policy: CalculatorPolicy
) -> None:
    """
    A target marginPct next to charge-out rates must land on the bottom-up
    revenue: its markup on cost may differ by at most marginTolerancePct.
    Without cost every markup gives revenue 0, so only revenue 0 agrees.
    """
    bottom_up_markup = markup_pct(total_cost, bottom_up_revenue)
    if bottom_up_markup is None:
        conflict = bottom_up_revenue != ZERO
    else:
        conflict = abs(target_margin_pct - bottom_up_markup) > policy.margin_tolerance_pct
    if not conflict:
        return

    raise InvalidModeError(
        "Target marginPct conflicts with charge-out (bottom-up) revenue",
        {
            "targetMarginPct": str(target_margin_pct),
            "bottomUpMarkupPct": (
                None if bottom_up_markup is None else str(policy.pct(bottom_up_markup))
            ),
            "targetRevenue": str(target_revenue(total_cost, target_margin_pct, policy)),
            "bottomUpRevenue": str(bottom_up_revenue),
            "tolerancePct": str(policy.margin_tolerance_pct),
        },
    )
