"""
Transfer Search Service
Resolves the route, filters tariffs, prices each tariff against its rules and ranks the options.
"""
from datetime import datetime, timezone
from typing import List, Optional
import asyncio
import logging

from ..config import SEARCH_TIMEOUT_SECONDS, SEARCH_MAX_CONCURRENCY, CANCELLATION_POLICY_TEXT
from ..errors import ValidationError, SearchTimeout
from ..pricing.quoting import compute_price
from ..pricing.rules import to_local_time
from ..schemas import TransferSearchRequest, TransferOption
from .catalog import CatalogRepository, RouteRecord, TariffRecord
from .options import assemble_option, rank_options
from .routes import resolve_route
from .tariffs import filter_tariffs

logger = logging.getLogger(__name__)


class TransferSearchService:
    """Stateless search over a read-only catalog; safe to share between requests."""

    def __init__(
        self,
        catalog: CatalogRepository,
        timeout_seconds: float = SEARCH_TIMEOUT_SECONDS,
        max_concurrency: int = SEARCH_MAX_CONCURRENCY,
        cancellation_policy: str = CANCELLATION_POLICY_TEXT
    ):
        self.catalog = catalog
        self.timeout_seconds = timeout_seconds
        self.max_concurrency = max(1, max_concurrency)
        self.cancellation_policy = cancellation_policy

    async def search(
        self,
        request: TransferSearchRequest,
        now: Optional[datetime] = None
    ) -> List[TransferOption]:
        """
        Search bookable transfer options for a request.

        Raises:
            ValidationError: pickup time is not strictly in the future
            RouteNotFound: no active route serves the airport/zone/direction
            CatalogUnavailable: a catalog read failed
            SearchTimeout: pricing did not finish within the deadline
        """
        now = now or datetime.now(timezone.utc)
        pickup = request.pickup_at

        # Checked before any catalog query
        if pickup <= now:
            raise ValidationError("Pickup time must be in the future")

        route = await resolve_route(
            self.catalog,
            airport_id=request.airport_id,
            zone_id=request.zone_id,
            direction=request.direction.value
        )

        pickup_date = to_local_time(pickup, route.airport_timezone).date()
        tariffs = await filter_tariffs(self.catalog, route.id, request.total_pax, pickup_date)
        if not tariffs:
            logger.info(f"Route {route.id} has no eligible tariffs for {request.total_pax} pax on {pickup_date}")
            return []

        try:
            options = await asyncio.wait_for(
                self._price_all(tariffs, route, request, now),
                timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.error(f"Search on route {route.id} exceeded {self.timeout_seconds}s while pricing {len(tariffs)} tariffs")
            raise SearchTimeout("Transfer search timed out")

        ranked = rank_options(options)
        logger.info(f"Search on route {route.id} returned {len(ranked)} options")
        return ranked

    async def _price_all(
        self,
        tariffs: List[TariffRecord],
        route: RouteRecord,
        request: TransferSearchRequest,
        now: datetime
    ) -> List[TransferOption]:
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def price_one(tariff: TariffRecord) -> TransferOption:
            async with semaphore:
                rules = await self.catalog.find_active_rules(tariff.id)
            price = compute_price(
                tariff,
                rules,
                total_pax=request.total_pax,
                pickup=request.pickup_at,
                now=now,
                timezone_name=route.airport_timezone
            )
            return assemble_option(tariff, price, route, request.pickup_time, self.cancellation_policy)

        # gather keeps input order, which the stable sort relies on for ties
        tasks = [asyncio.ensure_future(price_one(tariff)) for tariff in tariffs]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            raise


async def search_transfers(
    catalog: CatalogRepository,
    request: TransferSearchRequest,
    now: Optional[datetime] = None
) -> List[TransferOption]:
    """
    Convenience function for a one-off search.

    This is the main entry point for transfer searches.
    """
    search_service = TransferSearchService(catalog)
    return await search_service.search(request, now=now)
