"""Conversion of selected routes into step-by-step itineraries."""

import math

from transit_hub.data.config import PlannerConfig
from transit_hub.models.entities import Coordinate, Location, Route, RouteWithStops, Stop
from transit_hub.models.responses import EntityType, RoutePlan, RouteRef, RouteStep
from transit_hub.services.geo import distance_km
from transit_hub.services.hub_selector import HubCombination
from transit_hub.services.proximity import nearest

WALKING = "Walking"

NO_ROUTE_MESSAGE = (
    "We don't have route information for this journey yet. "
    "The direct distance is {distance:.1f}km. "
    "Please check back later as we're constantly adding new routes."
)


# App deep-link paths, shared with existing link consumers
NAVIGATION_LINK_TEMPLATES = {
    EntityType.STOP: "/stop/{id}",
    EntityType.HUB: "/hub/{id}",
    EntityType.ROUTE: "/route-details?routeId={id}",
}


def navigation_link(entity_type: EntityType, entity_id: str) -> str:
    """App path for a stop, hub or route screen."""
    return NAVIGATION_LINK_TEMPLATES[EntityType(entity_type)].format(id=entity_id)


def format_duration(minutes: int) -> str:
    return f"{minutes} min"


def _stop_coordinate(stop: Stop) -> Coordinate:
    return Coordinate(lat=stop.latitude, lon=stop.longitude)


def _route_ref(route: Route) -> RouteRef:
    return RouteRef(
        route_id=route.id,
        route_name=route.name,
        transport_type=route.transport_type,
        navigation_link=navigation_link(EntityType.ROUTE, route.id),
    )


class ItineraryBuilder:
    """Builds RoutePlans with heuristic durations.

    Durations are estimated from straight-line distance with per-km pacing
    from PlannerConfig, since no timetable data exists.
    """

    def __init__(self, config: PlannerConfig):
        self._config = config

    def _minutes(self, distance: float, minutes_per_km: float) -> int:
        return math.ceil(distance * minutes_per_km)

    def _walk_step(
        self,
        distance: float,
        target_name: str,
        coordinates: Coordinate,
        stop: Stop | None = None,
    ) -> RouteStep | None:
        """Walking leg, or None when the walk is within the threshold."""
        if not distance > self._config.walk_step_threshold_km:
            return None

        minutes = self._minutes(distance, self._config.walk_minutes_per_km)
        step = RouteStep(
            instruction=f"Walk to {target_name}",
            transport_type=WALKING,
            duration=format_duration(minutes),
            duration_minutes=minutes,
            distance_km=distance,
            coordinates=coordinates,
        )
        if stop is not None:
            step = step.model_copy(
                update={
                    "stop_name": stop.name,
                    "entity_id": stop.id,
                    "entity_type": EntityType.STOP,
                    "navigation_link": navigation_link(EntityType.STOP, stop.id),
                }
            )
        return step

    def _plan(
        self,
        origin: Location,
        destination: Location,
        steps: list[RouteStep | None],
        total_distance: float,
        route: Route,
        is_multi_modal: bool,
    ) -> RoutePlan:
        kept = [step for step in steps if step is not None]
        total_minutes = sum(step.duration_minutes for step in kept)
        return RoutePlan(
            from_label=origin.label,
            to_label=destination.label,
            total_duration=format_duration(total_minutes),
            total_distance_km=total_distance,
            total_cost=route.cost or 0,
            steps=kept,
            is_multi_modal=is_multi_modal,
            routes_used=[_route_ref(route)],
            has_valid_route=True,
        )

    def build_hub_plan(
        self, origin: Location, destination: Location, combination: HubCombination
    ) -> RoutePlan:
        """Walk to the start stop, ride to the hub, ride the hub route, walk to the destination.

        Only the hub route's fare is charged.
        """
        start_stop, hub, end_stop = combination.start_stop, combination.hub, combination.end_stop
        route = combination.route.route

        walk_to_start = distance_km(
            origin.lat, origin.lon, start_stop.latitude, start_stop.longitude
        )
        to_hub = distance_km(start_stop.latitude, start_stop.longitude, hub.latitude, hub.longitude)
        ride = distance_km(hub.latitude, hub.longitude, end_stop.latitude, end_stop.longitude)
        walk_from_end = distance_km(
            end_stop.latitude, end_stop.longitude, destination.lat, destination.lon
        )

        to_hub_minutes = self._minutes(to_hub, self._config.hub_inbound_minutes_per_km)
        ride_minutes = self._minutes(ride, self._config.hub_route_minutes_per_km)

        steps = [
            self._walk_step(
                walk_to_start, start_stop.name, _stop_coordinate(start_stop), start_stop
            ),
            RouteStep(
                instruction=f"Take {route.transport_type} to {hub.name}",
                transport_type=route.transport_type,
                duration=format_duration(to_hub_minutes),
                duration_minutes=to_hub_minutes,
                distance_km=to_hub,
                stop_name=hub.name,
                coordinates=Coordinate(lat=hub.latitude, lon=hub.longitude),
                entity_id=hub.id,
                entity_type=EntityType.HUB,
                navigation_link=navigation_link(EntityType.HUB, hub.id),
            ),
            RouteStep(
                instruction=f"Take {route.name} from {hub.name} to {end_stop.name}",
                transport_type=route.transport_type,
                duration=format_duration(ride_minutes),
                duration_minutes=ride_minutes,
                distance_km=ride,
                cost=route.cost or 0,
                stop_name=f"{hub.name} → {end_stop.name}",
                coordinates=_stop_coordinate(end_stop),
                entity_id=route.id,
                entity_type=EntityType.ROUTE,
                navigation_link=navigation_link(EntityType.ROUTE, route.id),
            ),
            self._walk_step(walk_from_end, destination.label, destination.coordinate),
        ]

        total_distance = walk_to_start + to_hub + ride + walk_from_end
        return self._plan(origin, destination, steps, total_distance, route, is_multi_modal=True)

    def build_direct_plan(
        self, origin: Location, destination: Location, route_with_stops: RouteWithStops
    ) -> RoutePlan:
        """Walk to the route's stop nearest the origin, ride, walk to the destination.

        The ride distance follows the stop sequence between boarding and
        alighting stops. It is zero if the alighting stop comes first.

        Raises:
            ValueError: If the route has no stops.
        """
        route, stops = route_with_stops.route, route_with_stops.stops
        if not stops:
            raise ValueError(f"Route {route.id} has no stops")

        indexed = list(enumerate(stops))

        def position(item: tuple[int, Stop]) -> tuple[float, float]:
            return item[1].latitude, item[1].longitude

        start_match = nearest(origin.coordinate, indexed, position)
        end_match = nearest(destination.coordinate, indexed, position)
        if start_match is None or end_match is None:
            raise ValueError(f"Cannot place origin or destination on route {route.id}")
        (start_index, start_stop), walk_to_start = start_match
        (end_index, end_stop), _ = end_match

        segment = stops[start_index : end_index + 1]
        ride = sum(
            distance_km(a.latitude, a.longitude, b.latitude, b.longitude)
            for a, b in zip(segment, segment[1:])
        )
        walk_from_end = distance_km(
            end_stop.latitude, end_stop.longitude, destination.lat, destination.lon
        )
        ride_minutes = self._minutes(ride, self._config.direct_route_minutes_per_km)

        steps = [
            self._walk_step(
                walk_to_start, start_stop.name, _stop_coordinate(start_stop), start_stop
            ),
            RouteStep(
                instruction=f"Take {route.name} from {start_stop.name} to {end_stop.name}",
                transport_type=route.transport_type,
                duration=format_duration(ride_minutes),
                duration_minutes=ride_minutes,
                distance_km=ride,
                cost=route.cost or 0,
                stop_name=f"{start_stop.name} → {end_stop.name}",
                coordinates=_stop_coordinate(end_stop),
                entity_id=route.id,
                entity_type=EntityType.ROUTE,
                navigation_link=navigation_link(EntityType.ROUTE, route.id),
            ),
            self._walk_step(walk_from_end, destination.label, destination.coordinate),
        ]

        total_distance = walk_to_start + ride + walk_from_end
        return self._plan(origin, destination, steps, total_distance, route, is_multi_modal=False)

    def build_no_route_plan(
        self, origin: Location, destination: Location, direct_distance_km: float
    ) -> RoutePlan:
        return RoutePlan(
            from_label=origin.label,
            to_label=destination.label,
            total_duration="Unknown",
            total_distance_km=direct_distance_km,
            total_cost=0,
            steps=[],
            is_multi_modal=False,
            routes_used=[],
            has_valid_route=False,
            message=NO_ROUTE_MESSAGE.format(distance=direct_distance_km),
        )
