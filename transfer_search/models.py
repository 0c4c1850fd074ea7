"""
SQLAlchemy models for the transfer catalog
Airports, zones, routes, suppliers, tariffs and tariff pricing rules
"""

from sqlalchemy import Column, Integer, String, DateTime, Date, Time, Float, Numeric, Boolean, ForeignKey, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum

from .database import Base


# Enums
class RouteDirection(str, enum.Enum):
    FROM_AIRPORT = "FROM_AIRPORT"
    TO_AIRPORT = "TO_AIRPORT"
    BOTH = "BOTH"

class VehicleType(str, enum.Enum):
    SEDAN = "SEDAN"
    VAN = "VAN"
    MINIBUS = "MINIBUS"
    BUS = "BUS"
    VIP = "VIP"

class TariffRuleType(str, enum.Enum):
    TIME_OF_DAY = "TIME_OF_DAY"
    DAY_OF_WEEK = "DAY_OF_WEEK"
    SEASON = "SEASON"
    LAST_MINUTE = "LAST_MINUTE"


# Models
class Airport(Base):
    __tablename__ = "airports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(10), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    city = Column(String(100), nullable=True)
    country = Column(String(2), nullable=True)
    timezone = Column(String(64), nullable=True)  # IANA name, e.g. "Europe/Zagreb"
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    routes = relationship("Route", back_populates="airport")


class Zone(Base):
    __tablename__ = "zones"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    city = Column(String(100), nullable=True)
    country = Column(String(2), nullable=True)
    center_lat = Column(Float, nullable=True)
    center_lng = Column(Float, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    routes = relationship("Route", back_populates="zone")


class Route(Base):
    __tablename__ = "routes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    airport_id = Column(Integer, ForeignKey("airports.id"), nullable=False)
    zone_id = Column(Integer, ForeignKey("zones.id"), nullable=False)
    direction = Column(SQLEnum(RouteDirection), default=RouteDirection.BOTH, nullable=False)
    approx_distance_km = Column(Float, nullable=True)
    approx_duration_min = Column(Integer, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    airport = relationship("Airport", back_populates="routes")
    zone = relationship("Zone", back_populates="routes")
    tariffs = relationship("Tariff", back_populates="route")

    __table_args__ = (
        Index("idx_routes_airport_zone_active", "airport_id", "zone_id", "is_active"),
    )


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    rating_avg = Column(Numeric(3, 2), default=0, nullable=False)
    rating_count = Column(Integer, default=0, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    tariffs = relationship("Tariff", back_populates="supplier")

    __table_args__ = (
        Index("idx_suppliers_verified_active", "is_verified", "is_active"),
    )


class Tariff(Base):
    __tablename__ = "tariffs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False)
    route_id = Column(Integer, ForeignKey("routes.id"), nullable=False)
    vehicle_type = Column(SQLEnum(VehicleType), nullable=False)
    currency = Column(String(3), default="EUR", nullable=False)

    # Pricing
    base_price = Column(Numeric(10, 2), nullable=False)
    price_per_pax = Column(Numeric(10, 2), nullable=True)  # per passenger beyond the first

    # Capacity
    min_pax = Column(Integer, default=1, nullable=True)
    max_pax = Column(Integer, nullable=True)

    # Validity window (calendar dates, inclusive)
    valid_from = Column(Date, nullable=True)
    valid_to = Column(Date, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    supplier = relationship("Supplier", back_populates="tariffs")
    route = relationship("Route", back_populates="tariffs")
    rules = relationship("TariffRule", back_populates="tariff", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_tariffs_route_active", "route_id", "is_active"),
        Index("idx_tariffs_supplier", "supplier_id"),
    )


class TariffRule(Base):
    __tablename__ = "tariff_rules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tariff_id = Column(Integer, ForeignKey("tariffs.id"), nullable=False)
    rule_type = Column(String(20), nullable=False)  # TariffRuleType value
    rule_name = Column(String(100), nullable=True)

    # Condition fields; which ones matter depends on rule_type
    day_of_week = Column(Integer, nullable=True)  # 1=Mon..7=Sun
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    season_from = Column(Date, nullable=True)
    season_to = Column(Date, nullable=True)
    hours_before = Column(Integer, nullable=True)

    # Adjustments
    perc_adjustment = Column(Numeric(6, 2), nullable=True)
    fixed_adjustment = Column(Numeric(10, 2), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    tariff = relationship("Tariff", back_populates="rules")

    __table_args__ = (
        Index("idx_tariff_rules_tariff_active", "tariff_id", "is_active"),
    )
