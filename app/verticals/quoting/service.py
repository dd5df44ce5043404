from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, Optional

from app.config import get_settings
from app.logging_config import LoggingContext, get_logger

from .engine.errors import PricingError
from .engine.quote_engine import PricingCalculator, default_calculator
from .schemas.quote_input_v1 import QuoteCalculateInputV1
from .schemas.quote_output_v1 import QuoteOutputV1


def canonical_json(obj: Any) -> str:
    """Deterministic JSON string: sorted keys, no whitespace."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def compute_calculation_id(payload: QuoteCalculateInputV1) -> str:
    material = payload.model_dump(mode="json", by_alias=True)
    digest = hashlib.sha256(canonical_json(material).encode("utf-8")).hexdigest()
    return "calc_" + digest[:16]


def classify_result(engine_payload: Dict[str, Any]) -> str:
    if engine_payload.get("blocking"):
        return "blocking"
    if engine_payload.get("warnings"):
        return "warning"
    return "ok"


def calculate_quote_v1(
    payload: QuoteCalculateInputV1 | Dict[str, Any],
    calculator: Optional[PricingCalculator] = None,
) -> QuoteOutputV1:
    """
    Entry point for the surrounding API.

    Malformed shapes raise pydantic.ValidationError (caller maps to 400).
    Calculator errors become a `blocking` envelope without totals.
    """
    settings = get_settings()
    qin = (
        payload
        if isinstance(payload, QuoteCalculateInputV1)
        else QuoteCalculateInputV1.model_validate(payload)
    )
    calc = calculator or default_calculator()
    calculation_id = compute_calculation_id(qin)

    with LoggingContext(quote_id=qin.quote_id):
        log = get_logger(__name__)
        snapshot = qin.to_snapshot(default_currency=calc.policy.currency)
        try:
            totals = calc.compute(snapshot)
        except PricingError as e:
            log.info("Quote calculation blocked: {} {}", e.code, e.message)
            engine_payload: Dict[str, Any] = {
                "version": "v1",
                "quoteId": qin.quote_id,
                "currency": snapshot.currency,
                "warnings": [],
                "blocking": [e.as_dict()],
            }
        else:
            engine_payload = totals.as_payload()

    return QuoteOutputV1(
        calculation_id=calculation_id,
        engine_version=settings.engine_version,
        status=classify_result(engine_payload),
        payload=engine_payload,
    )
