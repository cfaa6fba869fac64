"""Nearby hub, stop and route lookups around a rider's position."""

from pathlib import Path

from transit_hub.data.config import get_planner_config
from transit_hub.data.record_store import RecordStore, SqliteRecordStore
from transit_hub.models.entities import Coordinate
from transit_hub.models.responses import (
    HubResult,
    NearbyHubsResponse,
    NearbyRoutesResponse,
    NearbyStopsResponse,
    RouteResult,
    StopResult,
)
from transit_hub.services.geo import distance_km
from transit_hub.services.proximity import ProximitySearch


def _store(store: RecordStore | None, db_path: Path | None) -> RecordStore:
    return store if store is not None else SqliteRecordStore(db_path)


async def nearby_hubs(
    lat: float,
    lon: float,
    radius_km: float | None = None,
    limit: int | None = None,
    db_path: Path | None = None,
    store: RecordStore | None = None,
) -> NearbyHubsResponse:
    """Hubs within radius_km of a point, closest first.

    Args:
        lat: Latitude in degrees.
        lon: Longitude in degrees.
        radius_km: Search radius (default from config, 10km).
        limit: Maximum number of results (default from config, 5).
        db_path: Optional database path override.
        store: Optional store to query instead of the SQLite database.

    Returns:
        NearbyHubsResponse with hubs and their distances.
    """
    config = get_planner_config()
    radius_km = config.nearby_hubs_radius_km if radius_km is None else radius_km
    limit = config.nearby_result_limit if limit is None else limit

    proximity = ProximitySearch(_store(store, db_path))
    matches = await proximity.hubs_within_radius(Coordinate(lat=lat, lon=lon), radius_km)

    hubs = [
        HubResult(**match.hub.model_dump(), distance_km=round(match.distance_km, 3))
        for match in matches[:limit]
    ]
    return NearbyHubsResponse(hubs=hubs, count=len(hubs))


async def nearby_stops(
    lat: float,
    lon: float,
    radius_km: float | None = None,
    limit: int | None = None,
    db_path: Path | None = None,
    store: RecordStore | None = None,
) -> NearbyStopsResponse:
    """Stops within radius_km of a point, closest first.

    Same arguments as nearby_hubs (default radius 5km).
    """
    config = get_planner_config()
    radius_km = config.nearby_stops_radius_km if radius_km is None else radius_km
    limit = config.nearby_result_limit if limit is None else limit

    proximity = ProximitySearch(_store(store, db_path))
    matches = await proximity.stops_within_radius(Coordinate(lat=lat, lon=lon), radius_km)

    stops = [
        StopResult(**match.stop.model_dump(), distance_km=round(match.distance_km, 3))
        for match in matches[:limit]
    ]
    return NearbyStopsResponse(stops=stops, count=len(stops))


async def nearby_routes(
    lat: float,
    lon: float,
    radius_km: float | None = None,
    limit: int | None = None,
    db_path: Path | None = None,
    store: RecordStore | None = None,
) -> NearbyRoutesResponse:
    """Routes whose hub lies within radius_km of a point.

    Routes without a hub are never returned. Results keep store order.
    Same arguments as nearby_hubs (default radius 15km).
    """
    config = get_planner_config()
    radius_km = config.nearby_routes_radius_km if radius_km is None else radius_km
    limit = config.nearby_result_limit if limit is None else limit

    record_store = _store(store, db_path)
    hubs_by_id = {hub.id: hub for hub in await record_store.fetch_all_hubs()}

    routes: list[RouteResult] = []
    for route in await record_store.fetch_all_routes():
        if len(routes) >= limit:
            break
        hub = hubs_by_id.get(route.hub_id) if route.hub_id else None
        if hub is None:
            continue
        distance = distance_km(lat, lon, hub.latitude, hub.longitude)
        if distance <= radius_km:
            routes.append(
                RouteResult(**route.model_dump(), hub=hub, hub_distance_km=round(distance, 3))
            )

    return NearbyRoutesResponse(routes=routes, count=len(routes))
