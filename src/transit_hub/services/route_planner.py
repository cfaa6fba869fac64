"""Route planning entry point: hub route, then direct route, then no-route result."""

import logging
from pathlib import Path

from transit_hub.data.config import PlannerConfig, get_planner_config
from transit_hub.data.record_store import RecordStore, SqliteRecordStore
from transit_hub.models.entities import Location
from transit_hub.models.responses import RoutePlan
from transit_hub.services.direct_selector import DirectRouteSelector
from transit_hub.services.geo import distance_km
from transit_hub.services.hub_selector import HubRouteSelector
from transit_hub.services.itinerary import ItineraryBuilder
from transit_hub.services.proximity import ProximitySearch
from transit_hub.services.route_graph import RouteGraphLookup

logger = logging.getLogger(__name__)


class RoutePlanService:
    """Plans a journey between two locations over a RecordStore.

    Stateless between calls: every plan() reads the store afresh. Store
    errors propagate to the caller unchanged.
    """

    def __init__(self, store: RecordStore, config: PlannerConfig | None = None):
        self._config = config or get_planner_config()
        proximity = ProximitySearch(store)
        graph = RouteGraphLookup(store)
        self._hub_selector = HubRouteSelector(proximity, graph, self._config)
        self._direct_selector = DirectRouteSelector(store, proximity, graph, self._config)
        self._builder = ItineraryBuilder(self._config)

    async def plan(self, origin: Location, destination: Location) -> RoutePlan:
        """Plan a route from origin to destination.

        Strategies (in order):
        1. Hub route: ride to a hub, then a route from the hub to a stop near
           the destination (multi-modal plan)
        2. Direct route: one route through the stops nearest origin and destination
        3. No route: has_valid_route=False with the straight-line distance

        Args:
            origin: Where the rider starts.
            destination: Where the rider wants to go.

        Returns:
            RoutePlan with ordered steps and totals.

        Raises:
            RecordStoreError: If the store fails to answer a query.
        """
        direct_distance = distance_km(origin.lat, origin.lon, destination.lat, destination.lon)
        logger.debug(
            f"Planning {origin.label} ({origin.lat}, {origin.lon}) -> "
            f"{destination.label} ({destination.lat}, {destination.lon}), "
            f"direct distance {direct_distance:.2f}km"
        )

        combination = await self._hub_selector.select(origin.coordinate, destination.coordinate)
        if combination is not None:
            logger.info(
                f"Hub route found for {origin.label} -> {destination.label} "
                f"via {combination.hub.name}"
            )
            return self._builder.build_hub_plan(origin, destination, combination)

        route = await self._direct_selector.select(origin.coordinate, destination.coordinate)
        if route is not None:
            logger.info(
                f"Direct route found for {origin.label} -> {destination.label}: "
                f"{route.route.name}"
            )
            return self._builder.build_direct_plan(origin, destination, route)

        logger.info(f"No route found for {origin.label} -> {destination.label}")
        return self._builder.build_no_route_plan(origin, destination, direct_distance)


async def plan_route(
    origin: Location,
    destination: Location,
    db_path: Path | None = None,
) -> RoutePlan:
    """Plan a route over the ingested SQLite dataset.

    Args:
        origin: Where the rider starts.
        destination: Where the rider wants to go.
        db_path: Optional database path override.

    Returns:
        RoutePlan from RoutePlanService.plan().
    """
    service = RoutePlanService(SqliteRecordStore(db_path))
    return await service.plan(origin, destination)
