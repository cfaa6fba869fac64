from transit_hub.app import mcp
from transit_hub.models.responses import SearchLocationsResponse
from transit_hub.services.geocoding_service import search_locations as _search_locations


@mcp.tool()
async def search_locations(query: str) -> SearchLocationsResponse:
    """Search places by name or address to get coordinates for plan_route.

    Examples:
        search_locations("Bree Street Taxi Rank")
        search_locations("Park Station, Johannesburg")

    Args:
        query: Free-text place name or address (at least 3 characters).

    Returns:
        SearchLocationsResponse with candidate locations (lat, lon, display_name).
        api_available is false if the geocoding service could not be reached.
    """
    return await _search_locations(query)
