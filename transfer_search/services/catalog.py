"""
Catalog Repository
Read-only access to routes, tariffs, tariff rules and supplier status.

The search engine only depends on CatalogRepository; SqlCatalogRepository is
the SQLAlchemy implementation used by the API.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import List, Optional
import logging

from sqlalchemy import select, and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from ..errors import CatalogUnavailable
from ..models import Airport, Route, Supplier, Tariff, TariffRule, RouteDirection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteRecord:
    id: int
    airport_id: int
    zone_id: int
    direction: str
    approx_duration_min: Optional[int] = None
    airport_timezone: Optional[str] = None


@dataclass(frozen=True)
class SupplierRecord:
    id: int
    name: str
    rating_avg: Decimal = Decimal("0")
    rating_count: int = 0
    is_verified: bool = True
    is_active: bool = True


@dataclass(frozen=True)
class TariffRecord:
    """A tariff joined with its supplier and its route's duration."""
    id: int
    route_id: int
    supplier: SupplierRecord
    vehicle_type: str
    currency: str
    base_price: Decimal
    price_per_pax: Optional[Decimal] = None
    min_pax: Optional[int] = 1
    max_pax: Optional[int] = None
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    is_active: bool = True
    route_duration_min: Optional[int] = None


@dataclass(frozen=True)
class TariffRuleRecord:
    """A stored tariff rule, exactly as persisted (every condition nullable)."""
    id: int
    tariff_id: int
    rule_type: str
    rule_name: Optional[str] = None
    day_of_week: Optional[int] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    season_from: Optional[date] = None
    season_to: Optional[date] = None
    hours_before: Optional[int] = None
    perc_adjustment: Optional[Decimal] = None
    fixed_adjustment: Optional[Decimal] = None
    is_active: bool = True


class CatalogRepository(ABC):
    """
    Read contract the search engine needs from the data layer.

    Implementations must never write, and must raise CatalogUnavailable
    when the underlying store fails.
    """

    @abstractmethod
    async def find_route(self, airport_id: int, zone_id: int, direction: str) -> List[RouteRecord]:
        """Active routes for the pair whose direction is `direction` or BOTH, in a stable order."""
        ...

    @abstractmethod
    async def find_tariffs(self, route_id: int, total_pax: int, pickup_date: date) -> List[TariffRecord]:
        """Eligible tariffs of verified, active suppliers for the route."""
        ...

    @abstractmethod
    async def find_active_rules(self, tariff_id: int) -> List[TariffRuleRecord]:
        """Active rules of one tariff, id ascending."""
        ...


class SqlCatalogRepository(CatalogRepository):
    """Catalog reads over SQLAlchemy; one short-lived session per query."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def _execute(self, query):
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                return result.all()
        except SQLAlchemyError as e:
            logger.error(f"Catalog query failed: {e}")
            raise CatalogUnavailable("Transfer catalog is unavailable") from e

    async def find_route(self, airport_id: int, zone_id: int, direction: str) -> List[RouteRecord]:
        query = (
            select(Route, Airport.timezone)
            .join(Airport, Airport.id == Route.airport_id)
            .where(
                and_(
                    Route.airport_id == airport_id,
                    Route.zone_id == zone_id,
                    or_(
                        Route.direction == RouteDirection(direction),
                        Route.direction == RouteDirection.BOTH
                    ),
                    Route.is_active.is_(True)
                )
            )
            .order_by(Route.id)
        )

        rows = await self._execute(query)
        return [
            RouteRecord(
                id=route.id,
                airport_id=route.airport_id,
                zone_id=route.zone_id,
                direction=route.direction.value,
                approx_duration_min=route.approx_duration_min,
                airport_timezone=airport_tz
            )
            for route, airport_tz in rows
        ]

    async def find_tariffs(self, route_id: int, total_pax: int, pickup_date: date) -> List[TariffRecord]:
        query = (
            select(Tariff, Supplier, Route.approx_duration_min)
            .join(Supplier, Supplier.id == Tariff.supplier_id)
            .join(Route, Route.id == Tariff.route_id)
            .where(
                and_(
                    Tariff.route_id == route_id,
                    Tariff.is_active.is_(True),
                    Supplier.is_verified.is_(True),
                    Supplier.is_active.is_(True),
                    or_(Tariff.min_pax.is_(None), Tariff.min_pax <= total_pax),
                    or_(Tariff.max_pax.is_(None), Tariff.max_pax >= total_pax),
                    or_(Tariff.valid_from.is_(None), Tariff.valid_from <= pickup_date),
                    or_(Tariff.valid_to.is_(None), Tariff.valid_to >= pickup_date)
                )
            )
            .order_by(Tariff.base_price, Tariff.id)
        )

        rows = await self._execute(query)
        return [
            TariffRecord(
                id=tariff.id,
                route_id=tariff.route_id,
                supplier=SupplierRecord(
                    id=supplier.id,
                    name=supplier.name,
                    rating_avg=Decimal(str(supplier.rating_avg or 0)),
                    rating_count=supplier.rating_count or 0,
                    is_verified=supplier.is_verified,
                    is_active=supplier.is_active
                ),
                vehicle_type=tariff.vehicle_type.value,
                currency=tariff.currency,
                base_price=Decimal(str(tariff.base_price)),
                price_per_pax=_to_decimal(tariff.price_per_pax),
                min_pax=tariff.min_pax,
                max_pax=tariff.max_pax,
                valid_from=tariff.valid_from,
                valid_to=tariff.valid_to,
                is_active=tariff.is_active,
                route_duration_min=route_duration
            )
            for tariff, supplier, route_duration in rows
        ]

    async def find_active_rules(self, tariff_id: int) -> List[TariffRuleRecord]:
        query = (
            select(TariffRule)
            .where(
                and_(
                    TariffRule.tariff_id == tariff_id,
                    TariffRule.is_active.is_(True)
                )
            )
            .order_by(TariffRule.id)
        )

        rows = await self._execute(query)
        return [
            TariffRuleRecord(
                id=rule.id,
                tariff_id=rule.tariff_id,
                rule_type=rule.rule_type,
                rule_name=rule.rule_name,
                day_of_week=rule.day_of_week,
                start_time=rule.start_time,
                end_time=rule.end_time,
                season_from=rule.season_from,
                season_to=rule.season_to,
                hours_before=rule.hours_before,
                perc_adjustment=_to_decimal(rule.perc_adjustment),
                fixed_adjustment=_to_decimal(rule.fixed_adjustment),
                is_active=rule.is_active
            )
            for (rule,) in rows
        ]


def _to_decimal(value) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None
