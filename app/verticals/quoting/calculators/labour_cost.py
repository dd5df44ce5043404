from __future__ import annotations

from decimal import Decimal
from typing import Dict, Optional, Tuple

from ..engine.context import LineKind, Tier, TierBreakdown, TieredLine, TierRates
from ..engine.errors import InvalidInputError, MissingRateWarning
from ..engine.line_state import LineState
from ..engine.policy import CalculatorPolicy
from .inputs import as_decimal, as_optional_decimal

D = Decimal
ZERO = D("0")

_TIER_SUFFIX = {Tier.BASE: "Base", Tier.OT1: "OT1", Tier.OT2: "OT2"}
_TIER_LABEL = {Tier.BASE: "base", Tier.OT1: "OT1", Tier.OT2: "OT2"}

# Field prefix for the cost side, per line kind (matches the catalog columns)
_COST_PREFIX = {LineKind.STAFF: "payRate", LineKind.EQUIPMENT: "costRate"}
_CHARGE_PREFIX = "chargeOut"

Rates = Dict[Tier, Optional[D]]


def _read_rates(rates: TierRates, *, line_id: str, kind: str, prefix: str) -> Rates:
    # Validate every supplied rate, even for tiers without hours.
    return {
        tier: as_optional_decimal(
            rates.get(tier), line_id=line_id, kind=kind, field=prefix + _TIER_SUFFIX[tier]
        )
        for tier in Tier
    }


def _tier_rate(
    rates: Rates,
    tier: Tier,
    *,
    policy: CalculatorPolicy,
    line_id: str,
    kind: str,
    prefix: str,
) -> Tuple[D, bool]:
    """Returns (rate, fell_back_to_base)."""
    rate = rates[tier]
    if rate is not None:
        return rate, False

    base = rates[Tier.BASE]
    if tier != Tier.BASE and policy.overtime_fallback_to_base and base is not None:
        return base, True

    raise InvalidInputError(
        f"line {line_id} ({kind}): {prefix}{_TIER_SUFFIX[tier]} is required for {_TIER_LABEL[tier]} hours",
        line_id=line_id,
        kind=kind,
        field=prefix + _TIER_SUFFIX[tier],
    )


def calc_tiered_line(
    line: TieredLine, policy: CalculatorPolicy, currency: str
) -> Tuple[LineState, Optional[MissingRateWarning]]:
    """
    Staff / equipment regel.

    cost    = Σ_tier hours_tier × costRate_tier
    revenue = Σ_tier hours_tier × chargeRate_tier   (charge-out rates present)
            = cost                                  (no charge-out rate -> warning)

    The hours split is the caller's; overtime is never inferred here.
    """
    kind = line.kind.value
    lid = line.line_id
    cost_prefix = _COST_PREFIX[line.kind]

    cost_rates = _read_rates(line.cost_rates, line_id=lid, kind=kind, prefix=cost_prefix)
    charge_rates = _read_rates(
        line.charge_out_rates, line_id=lid, kind=kind, prefix=_CHARGE_PREFIX
    )

    if cost_rates[Tier.BASE] is None:
        raise InvalidInputError(
            f"line {lid} ({kind}): {cost_prefix}Base is required",
            line_id=lid,
            kind=kind,
            field=cost_prefix + "Base",
        )

    charge_configured = any(v is not None for v in charge_rates.values())
    if charge_configured and charge_rates[Tier.BASE] is None:
        raise InvalidInputError(
            f"line {lid} ({kind}): overtime charge-out rate without {_CHARGE_PREFIX}Base",
            line_id=lid,
            kind=kind,
            field=_CHARGE_PREFIX + "Base",
        )

    ls = LineState(line_id=lid, kind=line.kind, name=line.name or "")
    ls.charge_out_configured = charge_configured

    hours_by_tier = {
        tier: as_decimal(
            line.hours.get(tier) if line.hours.get(tier) is not None else ZERO,
            line_id=lid,
            kind=kind,
            field=f"{tier.value}Hours",
        )
        for tier in Tier
    }

    for tier in Tier:
        hours = hours_by_tier[tier]
        if hours == ZERO and tier != Tier.BASE:
            continue

        common = dict(policy=policy, line_id=lid, kind=kind)
        cost_rate, cost_fb = _tier_rate(cost_rates, tier, prefix=cost_prefix, **common)
        if charge_configured:
            charge_rate, charge_fb = _tier_rate(
                charge_rates, tier, prefix=_CHARGE_PREFIX, **common
            )
        else:
            charge_rate, charge_fb = cost_rate, False

        tier_cost = hours * cost_rate
        tier_revenue = hours * charge_rate

        ls.quantity += hours
        ls.cost += tier_cost
        ls.revenue += tier_revenue
        ls.tiers.append(
            TierBreakdown(
                tier=tier,
                hours=hours,
                cost_rate=cost_rate,
                charge_rate=charge_rate,
                cost=tier_cost,
                revenue=tier_revenue,
                cost_rate_fallback=cost_fb,
                charge_rate_fallback=charge_fb,
            )
        )

        label = _TIER_LABEL[tier]
        if cost_fb or charge_fb:
            ls.flag("OT_RATE_FALLBACK")
            ls.breakdown.add_meta(
                "OT_RATE_FALLBACK", f"{label}: no {label} rate configured, base rate used"
            )
        ls.breakdown.add_step(
            f"TIER_{tier.value.upper()}",
            f"{label}: {hours}h x {currency} {cost_rate} = {currency} {tier_cost}"
            f" (charge {currency} {charge_rate} = {currency} {tier_revenue})",
        )

    warning: Optional[MissingRateWarning] = None
    if charge_configured:
        ls.breakdown.add_check("CHARGE_OUT_RATE", f"Charge-out: {currency} {ls.revenue}")
    else:
        warning = MissingRateWarning(line_id=lid, kind=kind)
        ls.flag(warning.code)
        ls.breakdown.add_warning(
            warning.code, "No charge-out rate configured: revenue = cost"
        )

    return ls, warning
