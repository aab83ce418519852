"""
Chargeable measure (Weight/Measurement rule).

Billing uses whichever of actual weight or volumetric equivalent is larger:
- Air bills kilograms, with 1 cbm counted as 167 kg.
- LCL bills cubic meters, with 1000 kg counted as 1 cbm.

Missing or non-positive inputs count as zero; nothing here raises.
"""
from decimal import Decimal
from typing import Any, Optional


AIR_VOLUMETRIC_FACTOR = Decimal("167")
SEA_WEIGHT_TO_VOLUME_DIVISOR = Decimal("1000")

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Convert to Decimal via str so floats don't leak binary rounding."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _non_negative(value: Optional[Any]) -> Decimal:
    amount = to_decimal(value)
    return amount if amount > ZERO else ZERO


def air_volumetric_weight(volume_cbm: Optional[Any]) -> Decimal:
    return _non_negative(volume_cbm) * AIR_VOLUMETRIC_FACTOR


def air_chargeable_weight(gross_weight_kg: Optional[Any], volume_cbm: Optional[Any]) -> Decimal:
    """Chargeable kilograms for an air shipment."""
    return max(_non_negative(gross_weight_kg), air_volumetric_weight(volume_cbm))


def lcl_chargeable_volume(volume_cbm: Optional[Any], gross_weight_kg: Optional[Any]) -> Decimal:
    """Chargeable cubic meters for a shared-container sea shipment."""
    volumetric_equivalent = _non_negative(gross_weight_kg) / SEA_WEIGHT_TO_VOLUME_DIVISOR
    return max(_non_negative(volume_cbm), volumetric_equivalent)
