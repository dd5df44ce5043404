# app/verticals/quoting/schemas/quote_output_v1.py
from __future__ import annotations

from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict


class QuoteOutputV1(BaseModel):
    """
    Envelope around the calculator payload:
    - top-level velden zijn strikt
    - the payload (totals, lines, warnings, blocking) goes through 1-op-1
    """

    model_config = ConfigDict(extra="forbid")

    version: Literal["v1"] = "v1"
    calculation_id: str
    engine_version: str
    status: Literal["ok", "warning", "blocking"]

    payload: Dict[str, Any]
