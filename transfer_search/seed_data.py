#!/usr/bin/env python3
"""
Transfer catalog seeder
Seeds the database with a sample airport, zones, routes, suppliers, tariffs and pricing rules
"""

import asyncio
from datetime import date, time
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from .database import async_session_factory, init_db, close_db
from .models import (
    Airport, Zone, Route, Supplier, Tariff, TariffRule,
    RouteDirection, VehicleType, TariffRuleType
)


async def seed_catalog(session: AsyncSession) -> Dict[str, Any]:
    """
    Insert the sample catalog and return the generated ids by name.

    Split airport (SPU) serves three zones:
    - Split Center: BOTH directions, several suppliers and rules
    - Trogir: TO_AIRPORT only
    - Makarska: route exists but is inactive
    """
    airport = Airport(code="SPU", name="Split Airport", city="Split", country="HR", timezone="Europe/Zagreb")
    split_center = Zone(name="Split Center", city="Split", country="HR", center_lat=43.5081, center_lng=16.4402)
    trogir = Zone(name="Trogir", city="Trogir", country="HR", center_lat=43.5125, center_lng=16.2517)
    makarska = Zone(name="Makarska", city="Makarska", country="HR", center_lat=43.2969, center_lng=17.0178)
    session.add_all([airport, split_center, trogir, makarska])
    await session.flush()

    routes = {
        "split_center": Route(airport_id=airport.id, zone_id=split_center.id, direction=RouteDirection.BOTH,
                              approx_distance_km=24, approx_duration_min=30),
        "trogir": Route(airport_id=airport.id, zone_id=trogir.id, direction=RouteDirection.TO_AIRPORT,
                        approx_distance_km=7, approx_duration_min=15),
        "makarska": Route(airport_id=airport.id, zone_id=makarska.id, direction=RouteDirection.BOTH,
                          approx_distance_km=85, approx_duration_min=90, is_active=False),
    }
    session.add_all(routes.values())

    suppliers = {
        "adriatic": Supplier(name="Adriatic Transfers", rating_avg=Decimal("4.80"), rating_count=120,
                             is_verified=True, is_active=True),
        "dalmatia": Supplier(name="Dalmatia Shuttle", rating_avg=Decimal("4.50"), rating_count=40,
                             is_verified=True, is_active=True),
        "unverified": Supplier(name="Split Taxi Co", is_verified=False, is_active=True),
        "inactive": Supplier(name="Old Rides", is_verified=True, is_active=False),
    }
    session.add_all(suppliers.values())
    await session.flush()

    center = routes["split_center"].id
    tariffs = {
        "adriatic_sedan": Tariff(supplier_id=suppliers["adriatic"].id, route_id=center, vehicle_type=VehicleType.SEDAN,
                                 currency="EUR", base_price=Decimal("35.00"), min_pax=1, max_pax=3),
        "adriatic_van": Tariff(supplier_id=suppliers["adriatic"].id, route_id=center, vehicle_type=VehicleType.VAN,
                               currency="EUR", base_price=Decimal("55.00"), price_per_pax=Decimal("5.00"),
                               min_pax=1, max_pax=8),
        "dalmatia_sedan": Tariff(supplier_id=suppliers["dalmatia"].id, route_id=center, vehicle_type=VehicleType.SEDAN,
                                 currency="EUR", base_price=Decimal("32.00"), min_pax=1, max_pax=3),
        "dalmatia_minibus": Tariff(supplier_id=suppliers["dalmatia"].id, route_id=center,
                                   vehicle_type=VehicleType.MINIBUS, currency="EUR", base_price=Decimal("90.00"),
                                   min_pax=4, max_pax=16),
        "unverified_sedan": Tariff(supplier_id=suppliers["unverified"].id, route_id=center,
                                   vehicle_type=VehicleType.SEDAN, currency="EUR", base_price=Decimal("20.00")),
        "inactive_supplier_van": Tariff(supplier_id=suppliers["inactive"].id, route_id=center,
                                        vehicle_type=VehicleType.VAN, currency="EUR", base_price=Decimal("25.00")),
        "expired_vip": Tariff(supplier_id=suppliers["adriatic"].id, route_id=center, vehicle_type=VehicleType.VIP,
                              currency="EUR", base_price=Decimal("120.00"), valid_to=date(2020, 12, 31)),
        "inactive_sedan": Tariff(supplier_id=suppliers["adriatic"].id, route_id=center, vehicle_type=VehicleType.SEDAN,
                                 currency="EUR", base_price=Decimal("10.00"), is_active=False),
        "trogir_sedan": Tariff(supplier_id=suppliers["dalmatia"].id, route_id=routes["trogir"].id,
                               vehicle_type=VehicleType.SEDAN, currency="EUR", base_price=Decimal("40.00")),
    }
    session.add_all(tariffs.values())
    await session.flush()

    rules = {
        "summer_peak": TariffRule(tariff_id=tariffs["adriatic_sedan"].id, rule_type=TariffRuleType.SEASON.value,
                                  rule_name="Summer peak", season_from=date(2030, 6, 1), season_to=date(2030, 9, 30),
                                  perc_adjustment=Decimal("15.00")),
        "broken_night": TariffRule(tariff_id=tariffs["adriatic_sedan"].id, rule_type=TariffRuleType.TIME_OF_DAY.value,
                                   rule_name="Night (missing end)", start_time=time(22, 0), end_time=None,
                                   perc_adjustment=Decimal("50.00")),
        "night_late": TariffRule(tariff_id=tariffs["dalmatia_sedan"].id, rule_type=TariffRuleType.TIME_OF_DAY.value,
                                 rule_name="Night (evening)", start_time=time(22, 0), end_time=time(23, 59),
                                 perc_adjustment=Decimal("20.00")),
        "night_early": TariffRule(tariff_id=tariffs["dalmatia_sedan"].id, rule_type=TariffRuleType.TIME_OF_DAY.value,
                                  rule_name="Night (early hours)", start_time=time(0, 0), end_time=time(5, 59),
                                  perc_adjustment=Decimal("20.00")),
        "sunday": TariffRule(tariff_id=tariffs["dalmatia_sedan"].id, rule_type=TariffRuleType.DAY_OF_WEEK.value,
                             rule_name="Sunday", day_of_week=7, fixed_adjustment=Decimal("5.00")),
        "last_minute": TariffRule(tariff_id=tariffs["adriatic_van"].id, rule_type=TariffRuleType.LAST_MINUTE.value,
                                  rule_name="Last minute", hours_before=24, fixed_adjustment=Decimal("10.00")),
        "disabled_discount": TariffRule(tariff_id=tariffs["adriatic_van"].id, rule_type=TariffRuleType.SEASON.value,
                                        season_from=date(2020, 1, 1), season_to=date(2040, 12, 31),
                                        perc_adjustment=Decimal("-50.00"), is_active=False),
    }
    session.add_all(rules.values())
    await session.commit()

    return {
        "airport": airport.id,
        "zones": {"split_center": split_center.id, "trogir": trogir.id, "makarska": makarska.id},
        "routes": {name: route.id for name, route in routes.items()},
        "suppliers": {name: supplier.id for name, supplier in suppliers.items()},
        "tariffs": {name: tariff.id for name, tariff in tariffs.items()},
        "rules": {name: rule.id for name, rule in rules.items()},
    }


async def seed_database():
    """Seed the configured database with the sample catalog"""
    print("🌱 Seeding transfer catalog...")
    await init_db()

    async with async_session_factory() as session:
        # Clear existing data, children first
        for model in (TariffRule, Tariff, Supplier, Route, Zone, Airport):
            await session.execute(delete(model))
            print(f"   Cleared {model.__tablename__}")
        await session.commit()

        ids = await seed_catalog(session)

    print(f"✅ Seeded airport SPU ({ids['airport']}) with {len(ids['routes'])} routes, "
          f"{len(ids['tariffs'])} tariffs and {len(ids['rules'])} rules")
    await close_db()


if __name__ == "__main__":
    asyncio.run(seed_database())
