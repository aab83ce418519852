"""
Composable filters over courier rates.

Every builder returns a SQLAlchemy boolean clause for one optional criterion.
An absent criterion yields true(), so callers can collect builders in a list
and combine them without branching.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Optional

from sqlalchemy import and_, or_, not_, true, func
from sqlalchemy.sql.elements import ColumnElement

from app.core.enum_utils import get_enum_value
from app.models.courier_rate import (
    CourierRate, FCLFreightRate, ShippingType, SeaFreightMode, courier_name_key,
)


@dataclass(frozen=True)
class RateIdentity:
    """Fields that make two rates compete for the same quote."""
    courier_name: str
    origin_id: int
    destination_id: int
    shipping_type: str
    sea_freight_mode: Optional[str] = None
    container_type_id: Optional[int] = None


# ============================================
# SINGLE-CRITERION BUILDERS
# ============================================

def has_active_status(is_active: Optional[bool]) -> ColumnElement:
    if is_active is None:
        return true()
    return CourierRate.is_active.is_(is_active)


def has_origin_id(origin_id: Optional[int]) -> ColumnElement:
    if origin_id is None:
        return true()
    return CourierRate.origin_id == origin_id


def has_destination_id(destination_id: Optional[int]) -> ColumnElement:
    if destination_id is None:
        return true()
    return CourierRate.destination_id == destination_id


def is_active_on_date(on_date: Optional[date]) -> ColumnElement:
    """effective_from <= on_date <= effective_to."""
    if on_date is None:
        return true()
    return and_(CourierRate.effective_from <= on_date, CourierRate.effective_to >= on_date)


def overlaps_period(effective_from: Optional[date], effective_to: Optional[date]) -> ColumnElement:
    """Inclusive interval overlap; ranges touching at a boundary overlap."""
    if effective_from is None or effective_to is None:
        return true()
    return not_(or_(
        CourierRate.effective_to < effective_from,
        CourierRate.effective_from > effective_to,
    ))


def has_shipping_type(shipping_type: Any) -> ColumnElement:
    value = get_enum_value(shipping_type)
    if value is None:
        return true()
    return CourierRate.shipping_type == value


def has_sea_freight_mode(sea_freight_mode: Any) -> ColumnElement:
    value = get_enum_value(sea_freight_mode)
    if value is None:
        return true()
    return CourierRate.sea_freight_mode == value


def has_container_type(container_type_id: Optional[int]) -> ColumnElement:
    """Rate carries an FCL line item for the container type."""
    if container_type_id is None:
        return true()
    return CourierRate.fcl_freight_details.any(FCLFreightRate.container_type_id == container_type_id)


def has_max_transit_days(max_transit_days: Optional[int]) -> ColumnElement:
    """Unknown transit days never satisfy a transit limit."""
    if max_transit_days is None:
        return true()
    return and_(
        CourierRate.transit_days.is_not(None),
        CourierRate.transit_days <= max_transit_days,
    )


def has_courier_name(courier_name: Optional[str]) -> ColumnElement:
    """Exact match on the casefolded name."""
    if not courier_name:
        return true()
    return CourierRate.courier_name_key == courier_name_key(courier_name)


def has_courier_name_containing(fragment: Optional[str]) -> ColumnElement:
    if not fragment:
        return true()
    return CourierRate.courier_name_key.contains(courier_name_key(fragment), autoescape=True)


def has_description_containing(fragment: Optional[str]) -> ColumnElement:
    if not fragment:
        return true()
    return func.lower(CourierRate.description).contains(fragment.strip().lower(), autoescape=True)


def has_effective_from_after(start: Optional[date]) -> ColumnElement:
    if start is None:
        return true()
    return CourierRate.effective_from >= start


def has_effective_to_before(end: Optional[date]) -> ColumnElement:
    if end is None:
        return true()
    return CourierRate.effective_to <= end


def is_currently_active(flag: Optional[bool], today: Optional[date] = None) -> ColumnElement:
    if not flag:
        return true()
    return and_(has_active_status(True), is_active_on_date(today or date.today()))


# ============================================
# COMPOSITION
# ============================================

def combine_with_and(predicates: Iterable[ColumnElement]) -> ColumnElement:
    predicates = list(predicates)
    return and_(*predicates) if predicates else true()


def combine_with_or(predicates: Iterable[ColumnElement]) -> ColumnElement:
    predicates = list(predicates)
    return or_(*predicates) if predicates else true()


# ============================================
# COMPOSITE PREDICATES
# ============================================

def build_conflict_predicate(
    identity: RateIdentity,
    effective_from: date,
    effective_to: date,
) -> ColumnElement:
    """
    Any stored rate that competes with the given identity over the period.

    Matches regardless of is_active: a deactivated rate still owns its period.
    """
    return combine_with_and([
        has_courier_name(identity.courier_name),
        CourierRate.origin_id == identity.origin_id,
        CourierRate.destination_id == identity.destination_id,
        CourierRate.shipping_type == get_enum_value(identity.shipping_type),
        has_sea_freight_mode(identity.sea_freight_mode),
        has_container_type(identity.container_type_id),
        overlaps_period(effective_from, effective_to),
    ])


def build_quote_predicate(requirement: Any) -> ColumnElement:
    """Active rates that could serve the shipping requirement."""
    shipping_type = get_enum_value(requirement.shipping_type)
    sea_freight_mode = get_enum_value(requirement.sea_freight_mode)

    predicates = [
        has_active_status(True),
        has_origin_id(requirement.origin_id),
        has_destination_id(requirement.destination_id),
        is_active_on_date(requirement.shipping_date),
        has_shipping_type(shipping_type),
        has_max_transit_days(getattr(requirement, "max_transit_days", None)),
    ]

    if shipping_type == ShippingType.WATER.value:
        predicates.append(has_sea_freight_mode(sea_freight_mode))

        container_count = requirement.container_count
        if sea_freight_mode == SeaFreightMode.FCL.value and container_count:
            predicates.append(combine_with_or(
                has_container_type(container_type_id) for container_type_id in container_count
            ))

    return combine_with_and(predicates)


def build_search_predicate(criteria: Any) -> ColumnElement:
    """Advanced rate search; every criterion is optional."""
    return combine_with_and([
        has_courier_name_containing(criteria.courier_name),
        has_shipping_type(criteria.shipping_type),
        has_sea_freight_mode(criteria.sea_freight_mode),
        has_origin_id(criteria.origin_id),
        has_destination_id(criteria.destination_id),
        is_active_on_date(criteria.active_on_date),
        has_effective_from_after(criteria.effective_from_after),
        has_effective_to_before(criteria.effective_to_before),
        has_container_type(criteria.container_type_id),
        has_max_transit_days(criteria.max_transit_days),
        has_description_containing(criteria.description),
        has_active_status(criteria.is_active),
        is_currently_active(criteria.currently_active),
    ])
