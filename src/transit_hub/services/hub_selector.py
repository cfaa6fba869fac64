"""Selection of the best hub-mediated route to a destination."""

import logging
import math
from dataclasses import dataclass

from transit_hub.data.config import PlannerConfig
from transit_hub.models.entities import Coordinate, Hub, RouteWithStops, Stop
from transit_hub.services.geo import distance_km
from transit_hub.services.proximity import ProximitySearch, nearest
from transit_hub.services.route_graph import RouteGraphLookup

logger = logging.getLogger(__name__)


@dataclass
class HubCandidate:
    """A route from a hub that serves a stop near the destination."""

    end_stop: Stop
    route: RouteWithStops
    hub: Hub


@dataclass
class HubCombination:
    """The chosen hub-mediated journey."""

    start_stop: Stop
    hub: Hub
    route: RouteWithStops
    end_stop: Stop
    total_distance_km: float


class HubRouteSelector:
    """Finds the (start stop, hub, route, end stop) combination with the lowest score.

    The score of a candidate is:

        walk(origin -> start stop)
        + ride(hub -> end stop)
        + walk(end stop -> destination)

    The start stop -> hub leg is rendered in the itinerary but is not part of
    the score. Changing that changes which routes are surfaced to riders.
    """

    def __init__(
        self,
        proximity: ProximitySearch,
        graph: RouteGraphLookup,
        config: PlannerConfig,
    ):
        self._proximity = proximity
        self._graph = graph
        self._config = config

    async def _collect_candidates(self, destination: Coordinate) -> list[HubCandidate]:
        """Flat list of hub routes serving stops near the destination.

        Ordered by destination-stop distance, then by route link order. The
        same hub may appear several times through different stops.
        """
        nearby = await self._proximity.stops_within_radius(
            destination, self._config.destination_search_radius_km
        )
        logger.debug(f"Found {len(nearby)} stops near destination")
        if not nearby:
            return []

        candidates: list[HubCandidate] = []
        for nearby_stop in nearby:
            routes = await self._graph.routes_serving_stop(nearby_stop.stop.id)
            logger.debug(
                f"{len(routes)} routes serve {nearby_stop.stop.name} "
                f"({nearby_stop.distance_km:.2f}km from destination)"
            )
            for route in routes:
                if route.hub is not None:
                    candidates.append(
                        HubCandidate(end_stop=nearby_stop.stop, route=route, hub=route.hub)
                    )
        return candidates

    async def select(
        self, origin: Coordinate, destination: Coordinate
    ) -> HubCombination | None:
        """Return the best combination, or None when no hub route reaches the destination."""
        candidates = await self._collect_candidates(destination)
        if not candidates:
            logger.debug("No hub routes found to any stop near the destination")
            return None

        logger.debug(f"Scoring {len(candidates)} hub route candidates")

        best: HubCombination | None = None
        min_total = math.inf
        for candidate in candidates:
            hub_stops = await self._graph.stops_reachable_from_hub(candidate.hub.id)
            if not hub_stops:
                continue

            match = nearest(origin, hub_stops, lambda stop: (stop.latitude, stop.longitude))
            if match is None:
                continue
            start_stop, walk_to_start = match

            hub, end_stop = candidate.hub, candidate.end_stop
            ride = distance_km(hub.latitude, hub.longitude, end_stop.latitude, end_stop.longitude)
            walk_from_end = distance_km(
                end_stop.latitude, end_stop.longitude, destination.lat, destination.lon
            )
            total = walk_to_start + ride + walk_from_end

            logger.debug(
                f"Route {candidate.route.route.name} via {hub.name} to {end_stop.name}: "
                f"start at {start_stop.name}, total {total:.2f}km"
            )

            if total < min_total:
                min_total = total
                best = HubCombination(
                    start_stop=start_stop,
                    hub=hub,
                    route=candidate.route,
                    end_stop=end_stop,
                    total_distance_km=total,
                )

        if best is None:
            logger.debug("No viable hub route combination found")
        else:
            logger.debug(
                f"Best hub route: {best.start_stop.name} -> {best.hub.name} -> "
                f"{best.route.route.name} -> {best.end_stop.name} "
                f"({best.total_distance_km:.2f}km)"
            )
        return best
