"""
Public transfer search API.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from ...database import async_session_factory
from ...errors import TransferSearchError
from ...ratelimit import search_rate_limit
from ...schemas import TransferSearchRequest, TransferSearchResponse, ErrorResponse
from ...services.catalog import CatalogRepository, SqlCatalogRepository
from ...services.search import TransferSearchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/public", tags=["Search"])


def get_catalog() -> CatalogRepository:
    return SqlCatalogRepository(async_session_factory)


def get_search_service(catalog: CatalogRepository = Depends(get_catalog)) -> TransferSearchService:
    return TransferSearchService(catalog)


@router.post(
    "/search-transfers",
    response_model=TransferSearchResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
    dependencies=[Depends(search_rate_limit)]
)
async def search_transfers(
    search_request: TransferSearchRequest,
    search_service: TransferSearchService = Depends(get_search_service)
):
    """
    Search priced transfer options for an airport/zone route.

    Options are sorted by total price, cheapest first.

    - **airportId** / **zoneId**: the route endpoints
    - **direction**: FROM_AIRPORT, TO_AIRPORT or BOTH
    - **pickupTime**: ISO-8601, must be in the future
    - **paxAdults** / **paxChildren**: passenger counts
    - **currency**: requested currency (prices are quoted in the tariff currency)
    """
    try:
        options = await search_service.search(search_request)
        return TransferSearchResponse(options=options)

    except TransferSearchError as e:
        if e.status_code >= 500:
            logger.error(f"Transfer search failed: {e.message}")
        return JSONResponse(status_code=e.status_code, content={"error": e.message})
    except Exception as e:
        logger.error(f"Error searching transfers: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to search transfers"})
