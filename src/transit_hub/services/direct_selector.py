"""Fallback selection of a single route connecting origin and destination."""

import logging
import math

from transit_hub.data.config import PlannerConfig
from transit_hub.data.record_store import RecordStore
from transit_hub.models.entities import Coordinate, RouteWithStops
from transit_hub.services.proximity import ProximitySearch
from transit_hub.services.route_graph import RouteGraphLookup

logger = logging.getLogger(__name__)


class DirectRouteSelector:
    """Finds a route visiting the stop nearest the origin before the stop nearest the destination.

    Only succeeds when both nearest stops lie on one common route, in travel
    direction.
    """

    def __init__(
        self,
        store: RecordStore,
        proximity: ProximitySearch,
        graph: RouteGraphLookup,
        config: PlannerConfig,
    ):
        self._store = store
        self._proximity = proximity
        self._graph = graph
        self._config = config

    async def find_routes(self, start_stop_id: str, end_stop_id: str) -> list[RouteWithStops]:
        """All routes, in store order, visiting start_stop_id strictly before end_stop_id."""
        valid: list[RouteWithStops] = []
        for route in await self._store.fetch_all_routes():
            stops = await self._graph.stops_for_route(route.id)
            if not stops:
                continue

            stop_ids = [stop.id for stop in stops]
            if start_stop_id not in stop_ids or end_stop_id not in stop_ids:
                continue
            if stop_ids.index(start_stop_id) >= stop_ids.index(end_stop_id):
                continue

            hub = await self._store.fetch_hub(route.hub_id) if route.hub_id else None
            valid.append(RouteWithStops(route=route, stops=stops, hub=hub))
        return valid

    async def select(
        self, origin: Coordinate, destination: Coordinate
    ) -> RouteWithStops | None:
        """First direct route between the stops nearest origin and destination, if any."""
        radius = self._config.direct_search_radius_km
        if radius is None:
            radius = math.inf

        start = await self._proximity.nearest_stop(origin, radius)
        end = await self._proximity.nearest_stop(destination, radius)
        if start is None or end is None:
            logger.debug("No stops near origin or destination for a direct route")
            return None

        routes = await self.find_routes(start.stop.id, end.stop.id)
        logger.debug(
            f"{len(routes)} direct routes from {start.stop.name} to {end.stop.name}"
        )
        return routes[0] if routes else None
