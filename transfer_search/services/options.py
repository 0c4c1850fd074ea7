"""
Option Assembler & Ranker
Turns priced tariffs into bookable transfer options and orders them by price.
"""
from decimal import Decimal
from typing import List, Optional
import hashlib
import json

from ..config import CANCELLATION_POLICY_TEXT, DEFAULT_ROUTE_DURATION_MIN
from ..schemas import SupplierSummary, TransferOption
from .catalog import RouteRecord, TariffRecord

OPTION_CODE_PREFIX = "OPT-"
OPTION_CODE_LENGTH = 12


def option_code(tariff_id: int, supplier_id: int, vehicle_type: str, pickup_time: str) -> str:
    """
    Stable quote reference for one option.

    The pickup time is hashed exactly as the customer submitted it. This is an
    identifier, not a secret.
    """
    canonical = json.dumps([tariff_id, supplier_id, vehicle_type, pickup_time], separators=(",", ":"))
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f"{OPTION_CODE_PREFIX}{digest[:OPTION_CODE_LENGTH].upper()}"


def estimate_duration(tariff: TariffRecord, route: Optional[RouteRecord]) -> int:
    if tariff.route_duration_min:
        return tariff.route_duration_min
    if route is not None and route.approx_duration_min:
        return route.approx_duration_min
    return DEFAULT_ROUTE_DURATION_MIN


def assemble_option(
    tariff: TariffRecord,
    price: Decimal,
    route: Optional[RouteRecord],
    pickup_time: str,
    cancellation_policy: str = CANCELLATION_POLICY_TEXT
) -> TransferOption:
    supplier = tariff.supplier
    return TransferOption(
        supplier=SupplierSummary(
            id=supplier.id,
            name=supplier.name,
            rating=float(supplier.rating_avg or 0),
            rating_count=supplier.rating_count or 0
        ),
        vehicle_type=tariff.vehicle_type,
        currency=tariff.currency,
        total_price=float(price),
        estimated_duration_min=estimate_duration(tariff, route),
        cancellation_policy=cancellation_policy,
        option_code=option_code(tariff.id, supplier.id, tariff.vehicle_type, pickup_time)
    )


def rank_options(options: List[TransferOption]) -> List[TransferOption]:
    """Cheapest first; equal prices keep their input order."""
    return sorted(options, key=lambda option: option.total_price)
