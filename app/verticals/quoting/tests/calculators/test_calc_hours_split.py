from decimal import Decimal

import pytest

from app.verticals.quoting.calculators.hours_split import split_worked_hours
from app.verticals.quoting.engine.errors import InvalidInputError
from app.verticals.quoting.engine.policy import CalculatorPolicy

D = Decimal


@pytest.mark.parametrize(
    "hours,base,ot1,ot2",
    [
        ("6", "6", "0", "0"),
        ("8", "8", "0", "0"),
        ("10.5", "8", "2.5", "0"),
        ("12", "8", "4", "0"),
        ("14", "8", "4", "2"),
    ],
)
def test_split_worked_hours(hours, base, ot1, ot2):
    split = split_worked_hours(D(hours))

    assert (split.base, split.ot1, split.ot2) == (D(base), D(ot1), D(ot2))


def test_split_subtracts_break():
    split = split_worked_hours(D("9"), break_minutes=30)

    assert split.base == D("8")
    assert split.ot1 == D("0.5")


def test_split_break_longer_than_shift():
    split = split_worked_hours(D("0.25"), break_minutes=30)

    assert (split.base, split.ot1, split.ot2) == (D("0"), D("0"), D("0"))


def test_split_uses_policy_thresholds():
    p = CalculatorPolicy(base_hours_per_day=D("7.5"), ot1_hours_per_day=D("2"))
    split = split_worked_hours(D("10"), p)

    assert (split.base, split.ot1, split.ot2) == (D("7.5"), D("2"), D("0.5"))


def test_split_rejects_negative_hours():
    with pytest.raises(InvalidInputError):
        split_worked_hours(D("-1"))
