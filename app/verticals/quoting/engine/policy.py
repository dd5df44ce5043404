from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict

import yaml
from jsonschema import ValidationError, validate

D = Decimal

ROUNDING_MODES: Dict[str, str] = {
    "HALF_UP": ROUND_HALF_UP,
    "HALF_EVEN": ROUND_HALF_EVEN,
}

CENT = D("0.01")


class PolicyError(ValueError):
    """Policy file is missing, malformed or inconsistent."""


@dataclass(frozen=True)
class CalculatorPolicy:
    """
    Knobs van de calculator. Immutable, dus veilig te delen tussen threads.
    """

    policy_version: str = "v1"
    currency: str = "NZD"
    rounding: str = "HALF_UP"
    margin_tolerance_pct: D = D("0.01")
    overtime_fallback_to_base: bool = True
    base_hours_per_day: D = D("8")
    ot1_hours_per_day: D = D("4")

    @property
    def rounding_mode(self) -> str:
        return ROUNDING_MODES[self.rounding]

    def money(self, x: D) -> D:
        return x.quantize(CENT, rounding=self.rounding_mode)

    def pct(self, x: D) -> D:
        return x.quantize(CENT, rounding=self.rounding_mode)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "CalculatorPolicy":
        rounding = str(d.get("rounding") or "HALF_UP").upper()
        if rounding not in ROUNDING_MODES:
            raise PolicyError(
                f"Unknown rounding mode: {rounding}. Known: {sorted(ROUNDING_MODES)}"
            )

        tolerance = _decimal_field(d, "marginTolerancePct", "0.01")
        if tolerance < 0:
            raise PolicyError("marginTolerancePct must be >= 0")

        base_hours = _decimal_field(d, "baseHoursPerDay", "8")
        ot1_hours = _decimal_field(d, "ot1HoursPerDay", "4")
        if base_hours <= 0:
            raise PolicyError("baseHoursPerDay must be > 0")
        if ot1_hours < 0:
            raise PolicyError("ot1HoursPerDay must be >= 0")

        return CalculatorPolicy(
            policy_version=str(d.get("policyVersion") or d.get("version") or "v1"),
            currency=str(d.get("currency") or "NZD"),
            rounding=rounding,
            margin_tolerance_pct=tolerance,
            overtime_fallback_to_base=bool(d.get("overtimeFallbackToBase", True)),
            base_hours_per_day=base_hours,
            ot1_hours_per_day=ot1_hours,
        )

    @classmethod
    def from_yaml_file(cls, path: str | Path) -> "CalculatorPolicy":
        policy_path = Path(path)

        try:
            with policy_path.open("r", encoding="utf-8") as f:
                d = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise PolicyError(f"Policy file not found: {policy_path}") from e
        except yaml.YAMLError as e:
            raise PolicyError(f"Policy file is not valid YAML: {policy_path}: {e}") from e

        schema_path = policy_path.parents[1] / "schemas" / "pricing_policy.schema.json"
        with schema_path.open("r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            validate(instance=d, schema=schema)
        except ValidationError as e:
            raise PolicyError(f"Policy file {policy_path.name} failed schema: {e.message}") from e

        return cls.from_dict(d)


def _decimal_field(d: Dict[str, Any], key: str, default: str) -> D:
    raw = d.get(key, default)
    try:
        value = D(str(raw))
    except InvalidOperation as e:
        raise PolicyError(f"{key} is not a number: {raw!r}") from e
    if not value.is_finite():
        raise PolicyError(f"{key} must be finite")
    return value
