"""Nearest-neighbour search over stops and hubs."""

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar

from transit_hub.data.record_store import RecordStore
from transit_hub.models.entities import Coordinate, Hub, Stop
from transit_hub.services.geo import distance_km

T = TypeVar("T")

# Default search radii in kilometers
DEFAULT_HUB_RADIUS_KM = 5.0
DEFAULT_STOPS_RADIUS_KM = 5.0


@dataclass
class StopDistance:
    """A stop and its distance from the search point."""

    stop: Stop
    distance_km: float


@dataclass
class HubDistance:
    """A hub and its distance from the search point."""

    hub: Hub
    distance_km: float


def nearest(
    point: Coordinate,
    items: Iterable[T],
    position: Callable[[T], tuple[float, float]],
    max_distance_km: float = math.inf,
) -> tuple[T, float] | None:
    """Find the item closest to point, strictly within max_distance_km.

    The first item wins on equal distances. NaN distances never match.
    """
    best: tuple[T, float] | None = None
    min_distance = max_distance_km
    for item in items:
        lat, lon = position(item)
        distance = distance_km(point.lat, point.lon, lat, lon)
        if distance < min_distance:
            min_distance = distance
            best = (item, distance)
    return best


def within_radius(
    point: Coordinate,
    items: Iterable[T],
    position: Callable[[T], tuple[float, float]],
    max_distance_km: float,
) -> list[tuple[T, float]]:
    """Items within max_distance_km (inclusive), closest first.

    The sort is stable, so equidistant items keep their input order.
    """
    matches = []
    for item in items:
        lat, lon = position(item)
        distance = distance_km(point.lat, point.lon, lat, lon)
        if distance <= max_distance_km:
            matches.append((item, distance))
    matches.sort(key=lambda match: match[1])
    return matches


def _stop_position(stop: Stop) -> tuple[float, float]:
    return stop.latitude, stop.longitude


def _hub_position(hub: Hub) -> tuple[float, float]:
    return hub.latitude, hub.longitude


class ProximitySearch:
    """Distance queries over the store's stops and hubs.

    Each call reads the full collection from the store; nothing is cached
    between calls.
    """

    def __init__(self, store: RecordStore):
        self._store = store

    async def nearest_stop(
        self, point: Coordinate, max_distance_km: float = math.inf
    ) -> StopDistance | None:
        """Nearest stop strictly within max_distance_km (unbounded by default)."""
        match = nearest(point, await self._store.fetch_all_stops(), _stop_position, max_distance_km)
        if match is None:
            return None
        return StopDistance(stop=match[0], distance_km=match[1])

    async def nearest_hub(
        self, point: Coordinate, max_distance_km: float = DEFAULT_HUB_RADIUS_KM
    ) -> HubDistance | None:
        """Nearest hub strictly within max_distance_km."""
        match = nearest(point, await self._store.fetch_all_hubs(), _hub_position, max_distance_km)
        if match is None:
            return None
        return HubDistance(hub=match[0], distance_km=match[1])

    async def stops_within_radius(
        self, point: Coordinate, max_distance_km: float = DEFAULT_STOPS_RADIUS_KM
    ) -> list[StopDistance]:
        """All stops with distance <= max_distance_km, sorted ascending by distance."""
        stops = await self._store.fetch_all_stops()
        return [
            StopDistance(stop=stop, distance_km=distance)
            for stop, distance in within_radius(point, stops, _stop_position, max_distance_km)
        ]

    async def hubs_within_radius(
        self, point: Coordinate, max_distance_km: float = DEFAULT_HUB_RADIUS_KM
    ) -> list[HubDistance]:
        """All hubs with distance <= max_distance_km, sorted ascending by distance."""
        hubs = await self._store.fetch_all_hubs()
        return [
            HubDistance(hub=hub, distance_km=distance)
            for hub, distance in within_radius(point, hubs, _hub_position, max_distance_km)
        ]
