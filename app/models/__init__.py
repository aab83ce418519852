# Models module
from app.models.location import Location, LocationType
from app.models.container_type import ContainerType
from app.models.courier_rate import (
    ShippingType,
    SeaFreightMode,
    CourierRate,
    AirFreightRate,
    LCLFreightRate,
    FCLFreightRate,
)

__all__ = [
    "Location",
    "LocationType",
    "ContainerType",
    "ShippingType",
    "SeaFreightMode",
    "CourierRate",
    "AirFreightRate",
    "LCLFreightRate",
    "FCLFreightRate",
]
