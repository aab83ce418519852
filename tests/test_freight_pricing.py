"""Tests for per-mode pricing and tag/payload dispatch, on transient ORM objects."""

from decimal import Decimal

import pytest

from app.core.exceptions import RateIntegrityError
from app.models.courier_rate import CourierRate, AirFreightRate, LCLFreightRate, FCLFreightRate
from app.schemas.quote import ShippingRequirement
from app.services.quote_service import QuoteService
from app.services.freight_pricing import (
    PricingModel,
    chargeable_quantity,
    price_rate,
    quote_fcl_line,
    quote_rate,
    resolve_pricing_model,
)

CT_20GP = 1
CT_40GP = 2
CT_40HC = 3


def make_air_rate(**overrides) -> CourierRate:
    details = {
        "base_rate_per_kg": Decimal("500"),
        "minimum_charge": Decimal("5000"),
        "fuel_surcharge_rate": Decimal("0.1"),
        "security_surcharge": Decimal("200"),
    }
    details.update(overrides)
    return CourierRate(
        id=1,
        courier_name="SkyCargo",
        shipping_type="AIR",
        sea_freight_mode=None,
        air_freight_details=AirFreightRate(**details),
    )


def make_lcl_rate() -> CourierRate:
    return CourierRate(
        id=2,
        courier_name="OceanLine",
        shipping_type="WATER",
        sea_freight_mode="LCL",
        lcl_freight_details=LCLFreightRate(
            base_rate_per_cbm=Decimal("8000"),
            documentation_fee=Decimal("500"),
            bunker_adjustment_rate=Decimal("0.05"),
            lcl_service_charge=Decimal("300"),
        ),
    )


def make_fcl_rate() -> CourierRate:
    return CourierRate(
        id=3,
        courier_name="OceanLine",
        shipping_type="WATER",
        sea_freight_mode="FCL",
        fcl_freight_details={
            CT_20GP: FCLFreightRate(
                container_type_id=CT_20GP,
                base_rate_per_container=Decimal("40000"),
                documentation_fee=Decimal("1000"),
                terminal_handling_charge=Decimal("2000"),
                bunker_adjustment_rate=Decimal("0.02"),
            ),
            CT_40GP: FCLFreightRate(
                container_type_id=CT_40GP,
                base_rate_per_container=Decimal("70000"),
                documentation_fee=Decimal("1200"),
                terminal_handling_charge=Decimal("3000"),
                bunker_adjustment_rate=Decimal("0.02"),
            ),
        },
    )


# ── Air ────────────────────────────────────────────────────────────────


def test_air_quote_bills_volumetric_weight_with_surcharges():
    requirement = ShippingRequirement(gross_weight_kg=Decimal("10"), volume_cbm=Decimal("0.2"))
    assert quote_rate(make_air_rate(), requirement) == Decimal("18570.00")


def test_air_quote_applies_minimum_charge_before_surcharges():
    requirement = ShippingRequirement(gross_weight_kg=Decimal("1"))
    # 500 -> floor 5000 -> +500 fuel -> +200 security
    assert quote_rate(make_air_rate(), requirement) == Decimal("5700.00")


def test_air_quote_without_optional_surcharges():
    rate = make_air_rate(minimum_charge=None, fuel_surcharge_rate=None, security_surcharge=None)
    requirement = ShippingRequirement(gross_weight_kg=Decimal("2"))
    assert quote_rate(rate, requirement) == Decimal("1000.00")


# ── LCL ────────────────────────────────────────────────────────────────


def test_lcl_quote_applies_bunker_to_running_total():
    requirement = ShippingRequirement(volume_cbm=Decimal("2"), gross_weight_kg=Decimal("500"))
    assert quote_rate(make_lcl_rate(), requirement) == Decimal("17640.00")


def test_lcl_quote_with_no_cargo_still_charges_fixed_fees():
    # (0 + 500 + 300) * 1.05
    assert quote_rate(make_lcl_rate(), ShippingRequirement()) == Decimal("840.00")


# ── FCL ────────────────────────────────────────────────────────────────


def test_fcl_quote_sums_requested_container_lines():
    requirement = ShippingRequirement(container_count={CT_20GP: 2, CT_40GP: 1})
    assert quote_rate(make_fcl_rate(), requirement) == Decimal("162200.00")


def test_fcl_line_charges_documentation_fee_once_per_line():
    line = make_fcl_rate().fcl_freight_details[CT_20GP]
    assert quote_fcl_line(line, 2) == Decimal("86600")
    assert quote_fcl_line(line, 1) == Decimal("43800")


def test_fcl_lines_not_requested_contribute_nothing():
    requirement = ShippingRequirement(container_count={CT_40GP: 1, CT_40HC: 5})
    assert quote_rate(make_fcl_rate(), requirement) == Decimal("75600.00")


@pytest.mark.parametrize("container_count", [None, {}, {CT_40HC: 2}, {CT_20GP: 0}])
def test_fcl_quote_is_not_applicable_when_nothing_priced(container_count):
    requirement = ShippingRequirement(container_count=container_count)
    assert quote_rate(make_fcl_rate(), requirement) is None


def test_fcl_chargeable_quantity_counts_only_offered_containers():
    requirement = ShippingRequirement(container_count={CT_20GP: 2, CT_40HC: 3})
    rate = make_fcl_rate()
    assert chargeable_quantity(PricingModel.WATER_FCL_PER_CONTAINER, rate, requirement) == Decimal("2")


# ── Dispatch / integrity ───────────────────────────────────────────────


def test_pricing_model_follows_tags():
    assert resolve_pricing_model(make_air_rate()) == PricingModel.AIR_PER_KG
    assert resolve_pricing_model(make_lcl_rate()) == PricingModel.WATER_LCL_PER_CBM
    assert resolve_pricing_model(make_fcl_rate()) == PricingModel.WATER_FCL_PER_CONTAINER


def test_water_rate_without_sea_mode_is_an_integrity_violation():
    rate = make_lcl_rate()
    rate.sea_freight_mode = None
    with pytest.raises(RateIntegrityError):
        resolve_pricing_model(rate)
    assert quote_rate(rate, ShippingRequirement(volume_cbm=Decimal("1"))) is None


def test_payload_that_disagrees_with_tag_is_not_quoted():
    rate = make_lcl_rate()
    rate.sea_freight_mode = "FCL"
    with pytest.raises(RateIntegrityError):
        resolve_pricing_model(rate)
    assert quote_rate(rate, ShippingRequirement(container_count={CT_20GP: 1})) is None


def test_air_rate_carrying_sea_payload_is_not_quoted():
    rate = make_air_rate()
    rate.lcl_freight_details = LCLFreightRate(base_rate_per_cbm=Decimal("1"))
    assert quote_rate(rate, ShippingRequirement(gross_weight_kg=Decimal("10"))) is None


def test_price_rate_returns_model_with_amount():
    requirement = ShippingRequirement(gross_weight_kg=Decimal("10"), volume_cbm=Decimal("0.2"))
    assert price_rate(make_air_rate(), requirement) == (PricingModel.AIR_PER_KG, Decimal("18570.00"))
    assert price_rate(make_fcl_rate(), ShippingRequirement()) == (
        PricingModel.WATER_FCL_PER_CONTAINER, None,
    )


def test_inconsistent_rate_is_resolved_and_logged_once(caplog):
    rate = make_lcl_rate()
    rate.sea_freight_mode = None

    with caplog.at_level("WARNING", logger="app.services.freight_pricing"):
        quotation = QuoteService.quote(rate, ShippingRequirement(volume_cbm=Decimal("1")))

    assert quotation.amount is None
    assert quotation.pricing_model is None
    assert quotation.chargeable_quantity is None
    warnings = [r for r in caplog.records if r.name == "app.services.freight_pricing"]
    assert len(warnings) == 1
