"""Tests for quote matching against stored rates."""

from datetime import date
from decimal import Decimal

import pytest

from app.schemas.courier_rate import CourierRateCreate
from app.schemas.quote import ShippingRequirement
from app.services.courier_rate_service import CourierRateService
from app.services.freight_pricing import PricingModel
from app.services.quote_service import QuoteService
from tests.factories import air_rate_payload, fcl_rate_payload, lcl_rate_payload


async def create(db, payload):
    return await CourierRateService(db).create_rate(CourierRateCreate(**payload))


def sea_requirement(ids, **fields) -> ShippingRequirement:
    return ShippingRequirement(
        origin_id=ids["SHP_INMUN"],
        destination_id=ids["SHP_NLRTM"],
        shipping_date=date(2025, 2, 10),
        **fields,
    )


@pytest.mark.asyncio
async def test_requirement_without_mode_matches_every_mode_on_the_route(db, reference_data):
    lcl = await create(db, lcl_rate_payload(reference_data))
    fcl = await create(db, fcl_rate_payload(reference_data))
    await create(db, air_rate_payload(reference_data))  # other route

    quotes = await QuoteService(db).compute_quotes(sea_requirement(
        reference_data,
        volume_cbm=Decimal("2"),
        gross_weight_kg=Decimal("500"),
    ))

    assert [q.rate.id for q in quotes] == [lcl.id, fcl.id]
    assert quotes[0].amount == Decimal("17640.00")
    assert quotes[0].pricing_model == PricingModel.WATER_LCL_PER_CBM
    # FCL matched structurally but has no container counts to price
    assert quotes[1].amount is None


@pytest.mark.asyncio
async def test_fcl_requirement_matches_any_rate_offering_a_requested_container(db, reference_data):
    mixed = await create(db, fcl_rate_payload(reference_data, container_codes=("20GP", "40HC")))
    await create(db, fcl_rate_payload(
        reference_data, container_codes=("40GP",), courier_name="BlueWave",
    ))

    quotes = await QuoteService(db).compute_quotes(sea_requirement(
        reference_data,
        shipping_type="WATER",
        sea_freight_mode="FCL",
        container_count={reference_data["40HC"]: 1},
    ))

    assert [q.rate.id for q in quotes] == [mixed.id]
    # 75000 + 1200 + 3000 + 1500
    assert quotes[0].amount == Decimal("80700.00")
    assert quotes[0].chargeable_quantity == Decimal("1")


@pytest.mark.asyncio
async def test_fcl_quote_for_two_container_types(db, reference_data):
    await create(db, fcl_rate_payload(reference_data))

    quotes = await QuoteService(db).compute_quotes(sea_requirement(
        reference_data,
        shipping_type="WATER",
        sea_freight_mode="FCL",
        container_count={reference_data["20GP"]: 2, reference_data["40GP"]: 1},
    ))

    assert len(quotes) == 1
    assert quotes[0].amount == Decimal("162200.00")
    assert quotes[0].pricing_model == PricingModel.WATER_FCL_PER_CONTAINER


@pytest.mark.asyncio
async def test_quotes_are_ordered_cheapest_first(db, reference_data):
    await create(db, air_rate_payload(reference_data))
    cheaper = await create(db, air_rate_payload(
        reference_data,
        courier_name="BudgetAir",
        air_freight={"base_rate_per_kg": "300"},
    ))

    quotes = await QuoteService(db).compute_quotes(ShippingRequirement(
        origin_id=reference_data["AIR_INDEL"],
        destination_id=reference_data["AIR_AEDXB"],
        shipping_type="air",
        shipping_date=date(2025, 1, 10),
        gross_weight_kg=Decimal("10"),
        volume_cbm=Decimal("0.2"),
    ))

    assert quotes[0].rate.id == cheaper.id
    assert quotes[0].amount == Decimal("10020.00")
    assert quotes[1].amount == Decimal("18570.00")


@pytest.mark.asyncio
async def test_rates_outside_date_or_inactive_are_not_quoted(db, reference_data):
    await create(db, air_rate_payload(reference_data))
    await create(db, air_rate_payload(reference_data, courier_name="Dormant", is_active=False))

    requirement = ShippingRequirement(
        origin_id=reference_data["AIR_INDEL"],
        destination_id=reference_data["AIR_AEDXB"],
        shipping_date=date(2025, 1, 31),
        gross_weight_kg=Decimal("10"),
    )
    quotes = await QuoteService(db).compute_quotes(requirement)
    assert [q.rate.courier_name for q in quotes] == ["SkyCargo"]

    requirement.shipping_date = date(2025, 2, 1)
    assert await QuoteService(db).compute_quotes(requirement) == []


@pytest.mark.asyncio
async def test_max_transit_days_excludes_slower_and_unknown(db, reference_data):
    await create(db, lcl_rate_payload(reference_data, transit_days=30))
    fast = await create(db, lcl_rate_payload(reference_data, courier_name="QuickSea", transit_days=18))
    await create(db, lcl_rate_payload(reference_data, courier_name="Unknown", transit_days=None))

    quotes = await QuoteService(db).compute_quotes(sea_requirement(
        reference_data,
        volume_cbm=Decimal("1"),
        max_transit_days=20,
    ))
    assert [q.rate.id for q in quotes] == [fast.id]
