"""Tests for the Weight/Measurement chargeable-measure rules."""

from decimal import Decimal

import pytest

from app.services.chargeable_measure import (
    air_chargeable_weight,
    air_volumetric_weight,
    lcl_chargeable_volume,
)


def test_air_volumetric_weight_uses_167_kg_per_cbm():
    assert air_volumetric_weight(Decimal("0.2")) == Decimal("33.4")


def test_air_chargeable_weight_takes_volumetric_when_larger():
    assert air_chargeable_weight(Decimal("10"), Decimal("0.2")) == Decimal("33.4")


def test_air_chargeable_weight_takes_gross_when_larger():
    assert air_chargeable_weight(Decimal("100"), Decimal("0.2")) == Decimal("100")


@pytest.mark.parametrize(
    "gross, volume",
    [
        (Decimal("0"), Decimal("0")),
        (Decimal("12.5"), Decimal("0.01")),
        (Decimal("1"), Decimal("3")),
        (Decimal("5000"), Decimal("1.5")),
    ],
)
def test_air_chargeable_weight_never_below_either_measure(gross, volume):
    chargeable = air_chargeable_weight(gross, volume)
    assert chargeable >= gross
    assert chargeable >= volume * 167


def test_missing_or_negative_inputs_count_as_zero():
    assert air_chargeable_weight(None, None) == Decimal("0")
    assert air_chargeable_weight(Decimal("-5"), None) == Decimal("0")
    assert lcl_chargeable_volume(None, Decimal("-100")) == Decimal("0")


def test_float_inputs_do_not_leak_binary_rounding():
    assert air_chargeable_weight(0, 0.1) == Decimal("16.7")


def test_lcl_chargeable_volume_takes_volume_when_larger():
    assert lcl_chargeable_volume(Decimal("2"), Decimal("500")) == Decimal("2")


def test_lcl_chargeable_volume_converts_weight_at_1000_kg_per_cbm():
    assert lcl_chargeable_volume(Decimal("1"), Decimal("2500")) == Decimal("2.5")
