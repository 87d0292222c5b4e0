"""Mini README: Tests for the generous and standard rounding rules."""

from __future__ import annotations

import math

import pytest

from droneflow.finance.rounding import generous_round, standard_round


@pytest.mark.parametrize(
    "value, expected",
    [
        (49.96, 50.0),
        (49.95, 49.95),
        (12.345, 12.35),
        (0.955, 1.0),
        (2.999, 3.0),
        (10.0, 10.0),
        (-49.96, -50.0),
        (-3.2, -3.2),
    ],
)
def test_generous_round_nudges_fractions_above_threshold(value: float, expected: float) -> None:
    """Only fractions strictly above .95 are pushed to the next whole unit."""

    assert generous_round(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (1.005, 1.01),
        (0.1 + 0.2, 0.3),
        (2.675, 2.68),
        (-2.675, -2.68),
        (49.96, 49.96),
        (1234.5649, 1234.56),
    ],
)
def test_standard_round_is_half_up_without_float_artifacts(value: float, expected: float) -> None:
    assert standard_round(value) == expected


def test_standard_round_never_returns_negative_zero() -> None:
    """A balance that lands on zero must print as 0.00, never -0.00."""

    for value in (-0.001, -0.0, -250.0 + 250.0, -0.004999):
        result = standard_round(value)
        assert result == 0.0
        assert math.copysign(1.0, result) == 1.0


def test_generous_round_never_returns_negative_zero() -> None:
    result = generous_round(-0.001)
    assert result == 0.0
    assert math.copysign(1.0, result) == 1.0


def test_rounding_is_total_for_non_finite_values() -> None:
    assert math.isnan(standard_round(float("nan")))
    assert math.isnan(generous_round(float("nan")))
    assert standard_round(float("inf")) == float("inf")
    assert generous_round(float("-inf")) == float("-inf")


def test_rounding_accepts_huge_values() -> None:
    assert standard_round(1e30) == 1e30
    assert generous_round(1e30) == 1e30
