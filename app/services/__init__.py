# Services module
from app.services.location_service import LocationService
from app.services.container_type_service import ContainerTypeService
from app.services.rate_conflict_service import RateConflictService
from app.services.courier_rate_service import CourierRateService
from app.services.quote_service import QuoteService, RateQuotation

__all__ = [
    "LocationService",
    "ContainerTypeService",
    # Rates / quoting
    "RateConflictService",
    "CourierRateService",
    "QuoteService",
    "RateQuotation",
]
