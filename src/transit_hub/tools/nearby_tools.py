"""MCP tools for finding hubs, stops and routes near a position."""

from transit_hub.app import mcp
from transit_hub.models.responses import (
    NearbyHubsResponse,
    NearbyRoutesResponse,
    NearbyStopsResponse,
)
from transit_hub.services import location_service

MAX_RADIUS_KM = 50.0
MAX_LIMIT = 20


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@mcp.tool()
async def find_nearby_hubs(
    lat: float,
    lon: float,
    radius_km: float = 10.0,
    limit: int = 5,
) -> NearbyHubsResponse:
    """Find transport hubs (taxi ranks, stations) near a position, closest first.

    Args:
        lat: Latitude in degrees.
        lon: Longitude in degrees.
        radius_km: Search radius in kilometers (default 10, max 50).
        limit: Maximum number of hubs to return (default 5, max 20).

    Returns:
        NearbyHubsResponse with hubs and distance_km.
    """
    return await location_service.nearby_hubs(
        lat=lat,
        lon=lon,
        radius_km=_clamp(radius_km, 0.0, MAX_RADIUS_KM),
        limit=int(_clamp(limit, 1, MAX_LIMIT)),
    )


@mcp.tool()
async def find_nearby_stops(
    lat: float,
    lon: float,
    radius_km: float = 5.0,
    limit: int = 5,
) -> NearbyStopsResponse:
    """Find stops near a position, closest first.

    Args:
        lat: Latitude in degrees.
        lon: Longitude in degrees.
        radius_km: Search radius in kilometers (default 5, max 50).
        limit: Maximum number of stops to return (default 5, max 20).

    Returns:
        NearbyStopsResponse with stops and distance_km.
    """
    return await location_service.nearby_stops(
        lat=lat,
        lon=lon,
        radius_km=_clamp(radius_km, 0.0, MAX_RADIUS_KM),
        limit=int(_clamp(limit, 1, MAX_LIMIT)),
    )


@mcp.tool()
async def find_nearby_routes(
    lat: float,
    lon: float,
    radius_km: float = 15.0,
    limit: int = 5,
) -> NearbyRoutesResponse:
    """Find routes departing from hubs near a position.

    Args:
        lat: Latitude in degrees.
        lon: Longitude in degrees.
        radius_km: Maximum distance to the route's hub (default 15, max 50).
        limit: Maximum number of routes to return (default 5, max 20).

    Returns:
        NearbyRoutesResponse with routes, their hub and hub_distance_km.
    """
    return await location_service.nearby_routes(
        lat=lat,
        lon=lon,
        radius_km=_clamp(radius_km, 0.0, MAX_RADIUS_KM),
        limit=int(_clamp(limit, 1, MAX_LIMIT)),
    )
