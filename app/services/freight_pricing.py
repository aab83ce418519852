"""
Freight pricing for courier rates.

A CourierRate is a tagged variant: shipping_type (and sea_freight_mode for
WATER) names the pricing model, and exactly one payload must be populated to
match it. resolve_pricing_model() enforces that pairing; quote_rate() then
dispatches to the per-mode calculation.

Calculation order per mode:
- AIR_PER_KG:  base x chargeable kg -> minimum charge floor -> +fuel% -> +security
- WATER_LCL_PER_CBM: base x chargeable cbm -> +doc fee -> +LCL service -> +bunker% of running total
- WATER_FCL_PER_CONTAINER: per requested container type
  base x count + doc fee (once per line) + THC x count + base x bunker% x count
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from app.config import settings
from app.core.exceptions import RateIntegrityError
from app.models.courier_rate import (
    CourierRate, AirFreightRate, LCLFreightRate, FCLFreightRate,
    ShippingType, SeaFreightMode,
)
from app.services.chargeable_measure import (
    ZERO, to_decimal, air_chargeable_weight, lcl_chargeable_volume,
)


logger = logging.getLogger(__name__)


class PricingModel(str, Enum):
    """How a rate turns a shipment into an amount."""
    AIR_PER_KG = "AIR_PER_KG"
    WATER_FCL_PER_CONTAINER = "WATER_FCL_PER_CONTAINER"
    WATER_LCL_PER_CBM = "WATER_LCL_PER_CBM"


# ============================================
# TAG / PAYLOAD RESOLUTION
# ============================================

def resolve_pricing_model(rate: CourierRate) -> PricingModel:
    """
    Return the pricing model named by the rate's tags.

    Raises:
        RateIntegrityError: tags are incomplete, or the populated payload
            does not match them.
    """
    has_air = rate.air_freight_details is not None
    has_lcl = rate.lcl_freight_details is not None
    has_fcl = bool(rate.fcl_freight_details)

    if rate.shipping_type == ShippingType.AIR.value:
        model = PricingModel.AIR_PER_KG
        consistent = rate.sea_freight_mode is None and has_air and not (has_lcl or has_fcl)
    elif rate.shipping_type == ShippingType.WATER.value:
        if rate.sea_freight_mode == SeaFreightMode.FCL.value:
            model = PricingModel.WATER_FCL_PER_CONTAINER
            consistent = has_fcl and not (has_air or has_lcl)
        elif rate.sea_freight_mode == SeaFreightMode.LCL.value:
            model = PricingModel.WATER_LCL_PER_CBM
            consistent = has_lcl and not (has_air or has_fcl)
        else:
            raise RateIntegrityError(
                f"Rate {rate.id} is WATER without a valid sea freight mode",
                details={"rate_id": rate.id, "sea_freight_mode": rate.sea_freight_mode},
            )
    else:
        raise RateIntegrityError(
            f"Rate {rate.id} has unknown shipping type {rate.shipping_type!r}",
            details={"rate_id": rate.id, "shipping_type": rate.shipping_type},
        )

    if not consistent:
        raise RateIntegrityError(
            f"Rate {rate.id} payload does not match {rate.shipping_type}/{rate.sea_freight_mode}",
            details={
                "rate_id": rate.id,
                "shipping_type": rate.shipping_type,
                "sea_freight_mode": rate.sea_freight_mode,
                "has_air": has_air,
                "has_lcl": has_lcl,
                "has_fcl": has_fcl,
            },
        )
    return model


# ============================================
# PER-MODE CALCULATIONS
# ============================================

def quote_air(details: Optional[AirFreightRate], requirement: Any) -> Decimal:
    if details is None or details.base_rate_per_kg is None or requirement is None:
        return ZERO

    weight = air_chargeable_weight(requirement.gross_weight_kg, requirement.volume_cbm)
    amount = to_decimal(details.base_rate_per_kg) * weight

    if details.minimum_charge is not None:
        minimum = to_decimal(details.minimum_charge)
        if amount < minimum:
            amount = minimum

    amount += amount * to_decimal(details.fuel_surcharge_rate)
    amount += to_decimal(details.security_surcharge)
    return amount


def quote_lcl(details: Optional[LCLFreightRate], requirement: Any) -> Decimal:
    if details is None or details.base_rate_per_cbm is None or requirement is None:
        return ZERO

    volume = lcl_chargeable_volume(requirement.volume_cbm, requirement.gross_weight_kg)
    amount = to_decimal(details.base_rate_per_cbm) * volume
    amount += to_decimal(details.documentation_fee)
    amount += to_decimal(details.lcl_service_charge)
    amount += amount * to_decimal(details.bunker_adjustment_rate)
    return amount


def quote_fcl_line(line: FCLFreightRate, count: Optional[int]) -> Decimal:
    """Amount for one container type; zero when none of that type is requested."""
    if line is None or line.base_rate_per_container is None or not count or count <= 0:
        return ZERO

    containers = Decimal(count)
    base = to_decimal(line.base_rate_per_container)

    amount = base * containers
    amount += to_decimal(line.documentation_fee)
    amount += to_decimal(line.terminal_handling_charge) * containers
    amount += base * to_decimal(line.bunker_adjustment_rate) * containers
    return amount


def quote_fcl(lines: Dict[int, FCLFreightRate], requirement: Any) -> Optional[Decimal]:
    """Sum of line amounts, or None when no requested container type is priced."""
    container_count = getattr(requirement, "container_count", None) if requirement else None
    if not lines or not container_count:
        return None

    total = ZERO
    for container_type_id, line in lines.items():
        total += quote_fcl_line(line, container_count.get(container_type_id))

    return total if total != ZERO else None


def chargeable_quantity(model: PricingModel, rate: CourierRate, requirement: Any) -> Decimal:
    """Billable kg, cbm or container count for the rate's pricing model."""
    if model == PricingModel.AIR_PER_KG:
        return air_chargeable_weight(requirement.gross_weight_kg, requirement.volume_cbm)
    if model == PricingModel.WATER_LCL_PER_CBM:
        return lcl_chargeable_volume(requirement.volume_cbm, requirement.gross_weight_kg)

    container_count = requirement.container_count or {}
    return Decimal(sum(
        count for container_type_id, count in container_count.items()
        if count and count > 0 and container_type_id in rate.fcl_freight_details
    ))


def round_amount(amount: Decimal) -> Decimal:
    exponent = Decimal(1).scaleb(-settings.QUOTE_AMOUNT_DECIMALS)
    return amount.quantize(exponent, rounding=ROUND_HALF_UP)


# ============================================
# DISPATCH
# ============================================

def price_rate(
    rate: CourierRate,
    requirement: Any
) -> Tuple[Optional[PricingModel], Optional[Decimal]]:
    """
    Price a shipment against one rate, resolving its pricing model once.

    Returns (model, amount). amount is None when the rate is not applicable:
    an FCL rate with no requested container type priced. A rate whose tags
    and payload disagree gives (None, None); it is logged, never raised.
    """
    try:
        model = resolve_pricing_model(rate)
    except RateIntegrityError as e:
        logger.warning(f"Skipping quote for inconsistent rate: {e.message} {e.details}")
        return None, None

    if model == PricingModel.AIR_PER_KG:
        amount = quote_air(rate.air_freight_details, requirement)
    elif model == PricingModel.WATER_LCL_PER_CBM:
        amount = quote_lcl(rate.lcl_freight_details, requirement)
    else:
        amount = quote_fcl(rate.fcl_freight_details, requirement)

    if amount is None:
        return model, None
    return model, round_amount(amount)


def quote_rate(rate: CourierRate, requirement: Any) -> Optional[Decimal]:
    """Amount only; see price_rate."""
    return price_rate(rate, requirement)[1]
