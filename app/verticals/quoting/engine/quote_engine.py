from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from app.config import get_settings
from app.logging_config import get_logger

from ..calculators.inputs import as_decimal
from ..calculators.labour_cost import calc_tiered_line
from ..calculators.margin import (
    actual_margin_pct,
    check_mode_conflict,
    parse_mode,
    resolve_mode,
    target_revenue,
)
from ..calculators.node_cost import calc_node_line
from .context import NodeLine, QuoteSnapshot, QuoteTotals, RevenueMode
from .errors import InvalidInputError, MissingRateWarning
from .line_state import LineState
from .policy import CalculatorPolicy

D = Decimal
ZERO = D("0")
CONTRACT_VERSION = "v1"


class PricingCalculator:
    """
    Deterministic quote calculator.

    - pure: reads the snapshot, never mutates it, no I/O
    - line-by-line cost/revenue, exact Decimal sums
    - rounding only on the quote totals (policy.rounding)
    - fatal input problems raise PricingError subclasses; no partial totals
    """

    def __init__(self, policy: Optional[CalculatorPolicy] = None):
        self.policy = policy or CalculatorPolicy()

    @classmethod
    def from_yaml_file(cls, path: str | Path) -> "PricingCalculator":
        return cls(CalculatorPolicy.from_yaml_file(path))

    def _build_lines(
        self, snapshot: QuoteSnapshot, currency: str
    ) -> Tuple[List[LineState], List[MissingRateWarning]]:
        line_states: List[LineState] = []
        warnings: List[MissingRateWarning] = []
        seen: Dict[str, str] = {}

        for line in snapshot.line_items():
            lid = str(line.line_id or "").strip()
            if not lid:
                raise InvalidInputError(
                    f"{line.kind.value} line without lineId",
                    kind=line.kind.value,
                    field="lineId",
                )
            if lid in seen:
                raise InvalidInputError(
                    f"Duplicate lineId {lid} ({seen[lid]} and {line.kind.value})",
                    line_id=lid,
                    kind=line.kind.value,
                    field="lineId",
                )
            seen[lid] = line.kind.value

            if isinstance(line, NodeLine):
                line_states.append(calc_node_line(line, currency))
                continue

            ls, warning = calc_tiered_line(line, self.policy, currency)
            line_states.append(ls)
            if warning is not None:
                warnings.append(warning)

        return line_states, warnings

    def compute(self, snapshot: QuoteSnapshot) -> QuoteTotals:
        log = get_logger(__name__)
        policy = self.policy
        currency = snapshot.currency or policy.currency

        declared_mode = parse_mode(snapshot.mode)
        target: Optional[D] = None
        if snapshot.margin_pct is not None:
            target = as_decimal(
                snapshot.margin_pct,
                line_id=None,
                kind=None,
                field="marginPct",
                allow_negative=True,
            )
            if target <= D("-100"):
                raise InvalidInputError(
                    f"quote: marginPct must be > -100 ({target})",
                    field="marginPct",
                    value=target,
                )

        line_states, missing_rates = self._build_lines(snapshot, currency)

        total_cost = policy.money(sum((ls.cost for ls in line_states), ZERO))
        bottom_up_revenue = policy.money(sum((ls.revenue for ls in line_states), ZERO))
        has_charge_out = any(ls.charge_out_configured for ls in line_states)

        mode = resolve_mode(
            declared_mode, has_charge_out=has_charge_out, target_margin_pct=target
        )

        # Bottom-up en target-margin mogen niet stilletjes verschillen.
        if target is not None and (has_charge_out or mode is RevenueMode.BOTTOM_UP):
            check_mode_conflict(
                target_margin_pct=target,
                total_cost=total_cost,
                bottom_up_revenue=bottom_up_revenue,
                policy=policy,
            )

        if mode is RevenueMode.TARGET_MARGIN:
            total_revenue = target_revenue(total_cost, target, policy)
        else:
            total_revenue = bottom_up_revenue

        margin_pct = actual_margin_pct(total_cost, total_revenue, policy)

        for w in missing_rates:
            log.warning(
                "No charge-out rate for {} line {}; revenue defaults to cost", w.kind, w.line_id
            )
        log.debug(
            "Quote computed: mode={} lines={} cost={} revenue={} margin={}%",
            mode.value,
            len(line_states),
            total_cost,
            total_revenue,
            margin_pct,
        )

        return QuoteTotals(
            version=CONTRACT_VERSION,
            policy_version=policy.policy_version,
            currency=currency,
            mode=mode,
            total_cost=total_cost,
            total_revenue=total_revenue,
            margin_pct=margin_pct,
            target_margin_pct=target,
            quote_id=snapshot.quote_id,
            lines=tuple(ls.freeze() for ls in line_states),
            warnings=tuple(w.as_dict() for w in missing_rates),
        )


@lru_cache(maxsize=1)
def default_calculator() -> PricingCalculator:
    return PricingCalculator.from_yaml_file(get_settings().pricing_policy_path)


def compute(
    snapshot: QuoteSnapshot, calculator: Optional[PricingCalculator] = None
) -> QuoteTotals:
    return (calculator or default_calculator()).compute(snapshot)
