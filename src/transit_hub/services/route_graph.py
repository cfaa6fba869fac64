"""Route membership lookups through the route_stops join."""

import logging

from transit_hub.data.record_store import RecordStore
from transit_hub.models.entities import RouteWithStops, Stop

logger = logging.getLogger(__name__)


class RouteGraphLookup:
    """Resolves which routes visit a stop and which stops a hub's routes reach.

    Stop sequences always come from route_stops links. Stop.route_id is never
    used for membership.
    """

    def __init__(self, store: RecordStore):
        self._store = store

    async def stops_for_route(self, route_id: str) -> list[Stop]:
        """Ordered stop sequence of a route (empty if unknown)."""
        links = await self._store.fetch_route_stop_links_by_route(route_id)
        # stable sort keeps store order for equal order numbers
        links = sorted(links, key=lambda link: link.sequence_key)
        return [link.stop for link in links if link.stop is not None]

    async def routes_serving_stop(self, stop_id: str) -> list[RouteWithStops]:
        """Every route linked to the stop, with its stop sequence and hub.

        One entry is returned per link, in store order.
        """
        results: list[RouteWithStops] = []
        for link in await self._store.fetch_route_stop_links_by_stop(stop_id):
            route = await self._store.fetch_route(link.route_id)
            if route is None:
                logger.debug(f"Skipping link from stop {stop_id} to unknown route {link.route_id}")
                continue

            hub = await self._store.fetch_hub(route.hub_id) if route.hub_id else None
            stops = await self.stops_for_route(route.id)
            results.append(RouteWithStops(route=route, stops=stops, hub=hub))
        return results

    async def stops_reachable_from_hub(self, hub_id: str) -> list[Stop]:
        """All stops visited by routes departing the hub.

        Stops shared by several routes appear once per route.
        """
        stops: list[Stop] = []
        for route in await self._store.fetch_routes_by_hub(hub_id):
            stops.extend(await self.stops_for_route(route.id))
        return stops
