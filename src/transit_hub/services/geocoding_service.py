"""Free-text place search for planning origins and destinations.

Errors from the geocoding API are caught and logged - search_locations
returns api_available=False on failure.
"""

import logging

import httpx

from transit_hub.data.config import PlannerConfig, get_planner_config
from transit_hub.data.nominatim_client import NominatimClient
from transit_hub.models.responses import SearchLocationsResponse

logger = logging.getLogger(__name__)

# Queries shorter than this are not sent to the API
MIN_QUERY_LENGTH = 3


async def search_locations(
    query: str,
    config: PlannerConfig | None = None,
) -> SearchLocationsResponse:
    """Search places matching a free-text query.

    Args:
        query: Place name or address (e.g., "Bree Street Taxi Rank, Johannesburg").
        config: Optional configuration override.

    Returns:
        SearchLocationsResponse with candidate locations in ranking order.
    """
    query = query.strip()
    if len(query) < MIN_QUERY_LENGTH:
        return SearchLocationsResponse(query=query, locations=[], count=0, api_available=True)

    config = config or get_planner_config()

    try:
        async with NominatimClient(config) as client:
            locations = await client.search(query)
    except httpx.HTTPError as e:
        logger.warning(f"Failed to search locations for {query!r}: {e}")
        return SearchLocationsResponse(
            query=query,
            locations=[],
            count=0,
            api_available=False,
            error=str(e),
        )

    logger.debug(f"Found {len(locations)} locations for {query!r}")
    return SearchLocationsResponse(
        query=query,
        locations=locations,
        count=len(locations),
        api_available=True,
    )
