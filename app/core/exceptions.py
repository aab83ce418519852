"""Errors raised by the rate quotation and rate management services."""
from datetime import date
from typing import Any, Dict, Optional


class FreightQuoteError(Exception):
    """Base exception for freight quote errors."""
    def __init__(self, message: str, details: Dict[str, Any] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class RateConflictError(FreightQuoteError):
    """An existing rate overlaps the one being written."""
    def __init__(
        self,
        message: str,
        conflicting_rate_id: int,
        effective_from: date,
        effective_to: date,
        container_type_id: Optional[int] = None,
        container_type_name: Optional[str] = None,
    ):
        self.conflicting_rate_id = conflicting_rate_id
        self.effective_from = effective_from
        self.effective_to = effective_to
        self.container_type_id = container_type_id
        self.container_type_name = container_type_name
        super().__init__(
            message,
            details={
                "conflicting_rate_id": conflicting_rate_id,
                "conflicting_effective_from": effective_from.isoformat(),
                "conflicting_effective_to": effective_to.isoformat(),
                "container_type_id": container_type_id,
            },
        )

    @property
    def suggestion(self) -> str:
        return (
            "Please check the existing rate or adjust the effective dates to avoid overlap. "
            f"You can update the existing rate with ID: {self.conflicting_rate_id}"
        )


class InvalidRateError(FreightQuoteError):
    """Rate identity, dates or payload are missing or malformed."""


class NotFoundError(FreightQuoteError):
    """Requested record does not exist."""


class RateIntegrityError(FreightQuoteError):
    """Stored rate has a mode tag that disagrees with its populated payload."""
