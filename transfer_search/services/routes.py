"""
Route Resolver
Maps an airport, zone and travel direction to the active route serving it.
"""
import logging

from ..errors import RouteNotFound
from .catalog import CatalogRepository, RouteRecord

logger = logging.getLogger(__name__)


async def resolve_route(
    catalog: CatalogRepository,
    airport_id: int,
    zone_id: int,
    direction: str
) -> RouteRecord:
    """
    Return the active route whose direction matches the request or is BOTH.

    When several routes match, the first one in catalog order wins.
    """
    routes = await catalog.find_route(airport_id, zone_id, direction)
    if not routes:
        logger.info(f"No active route for airport {airport_id}, zone {zone_id}, direction {direction}")
        raise RouteNotFound(airport_id, zone_id, direction)

    if len(routes) > 1:
        logger.warning(
            f"{len(routes)} active routes match airport {airport_id}, zone {zone_id}, "
            f"direction {direction}; using route {routes[0].id}"
        )
    return routes[0]
