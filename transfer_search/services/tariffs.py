"""
Tariff Filter
Narrows a route's tariffs to those a search may quote.
"""
from datetime import date
from typing import List
import logging

from .catalog import CatalogRepository, TariffRecord

logger = logging.getLogger(__name__)


def is_tariff_eligible(tariff: TariffRecord, total_pax: int, pickup_date: date) -> bool:
    """Active tariff of a verified, active supplier, within capacity and validity window."""
    if not tariff.is_active:
        return False
    if not (tariff.supplier.is_verified and tariff.supplier.is_active):
        return False

    min_pax = tariff.min_pax if tariff.min_pax is not None else 1
    if min_pax > total_pax:
        return False
    if tariff.max_pax is not None and tariff.max_pax < total_pax:
        return False

    if tariff.valid_from is not None and tariff.valid_from > pickup_date:
        return False
    if tariff.valid_to is not None and tariff.valid_to < pickup_date:
        return False

    return True


async def filter_tariffs(
    catalog: CatalogRepository,
    route_id: int,
    total_pax: int,
    pickup_date: date
) -> List[TariffRecord]:
    """Eligible tariffs for the route, in catalog order."""
    candidates = await catalog.find_tariffs(route_id, total_pax, pickup_date)
    eligible = [t for t in candidates if is_tariff_eligible(t, total_pax, pickup_date)]

    if len(eligible) != len(candidates):
        logger.warning(
            f"Catalog returned {len(candidates) - len(eligible)} ineligible tariffs for route {route_id}"
        )
    return eligible
