"""Request payload factories shared by the API and service tests."""
from datetime import date
from typing import Dict


def air_rate_payload(ids: Dict[str, int], **overrides) -> dict:
    payload = {
        "courier_name": "SkyCargo",
        "origin_id": ids["AIR_INDEL"],
        "destination_id": ids["AIR_AEDXB"],
        "shipping_type": "AIR",
        "effective_from": date(2025, 1, 1).isoformat(),
        "effective_to": date(2025, 1, 31).isoformat(),
        "transit_days": 2,
        "air_freight": {
            "base_rate_per_kg": "500",
            "minimum_charge": "5000",
            "fuel_surcharge_rate": "0.1",
            "security_surcharge": "200",
        },
    }
    payload.update(overrides)
    return payload


def lcl_rate_payload(ids: Dict[str, int], **overrides) -> dict:
    payload = {
        "courier_name": "OceanLine",
        "origin_id": ids["SHP_INMUN"],
        "destination_id": ids["SHP_NLRTM"],
        "shipping_type": "WATER",
        "sea_freight_mode": "LCL",
        "effective_from": date(2025, 1, 1).isoformat(),
        "effective_to": date(2025, 3, 31).isoformat(),
        "transit_days": 24,
        "lcl_freight": {
            "base_rate_per_cbm": "8000",
            "documentation_fee": "500",
            "bunker_adjustment_rate": "0.05",
            "lcl_service_charge": "300",
        },
    }
    payload.update(overrides)
    return payload


def fcl_rate_payload(ids: Dict[str, int], container_codes=("20GP", "40GP"), **overrides) -> dict:
    lines = {
        "20GP": {
            "base_rate_per_container": "40000",
            "documentation_fee": "1000",
            "terminal_handling_charge": "2000",
            "bunker_adjustment_rate": "0.02",
        },
        "40GP": {
            "base_rate_per_container": "70000",
            "documentation_fee": "1200",
            "terminal_handling_charge": "3000",
            "bunker_adjustment_rate": "0.02",
        },
        "40HC": {
            "base_rate_per_container": "75000",
            "documentation_fee": "1200",
            "terminal_handling_charge": "3000",
            "bunker_adjustment_rate": "0.02",
        },
    }
    payload = {
        "courier_name": "OceanLine",
        "origin_id": ids["SHP_INMUN"],
        "destination_id": ids["SHP_NLRTM"],
        "shipping_type": "WATER",
        "sea_freight_mode": "FCL",
        "effective_from": date(2025, 1, 1).isoformat(),
        "effective_to": date(2025, 3, 31).isoformat(),
        "transit_days": 22,
        "fcl_freight": [
            {"container_type_id": ids[code], **lines[code]} for code in container_codes
        ],
    }
    payload.update(overrides)
    return payload
