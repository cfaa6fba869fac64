"""Read-only access to the stop/hub/route dataset.

The planner only depends on the RecordStore protocol. Two adapters are provided:
SqliteRecordStore for the ingested database and InMemoryRecordStore for
embedding and tests.
"""

from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Protocol, TypeVar

import aiosqlite
from pydantic import BaseModel, ValidationError

from transit_hub.data.database import get_db
from transit_hub.models.entities import Hub, Route, RouteStopLink, Stop

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class RecordStoreError(Exception):
    """The backing store failed to answer a query."""


class RecordStore(Protocol):
    """Query surface the route planner needs from the dataset."""

    async def fetch_all_stops(self) -> list[Stop]: ...

    async def fetch_all_hubs(self) -> list[Hub]: ...

    async def fetch_all_routes(self) -> list[Route]: ...

    async def fetch_route(self, route_id: str) -> Route | None: ...

    async def fetch_hub(self, hub_id: str) -> Hub | None: ...

    async def fetch_route_stop_links_by_stop(self, stop_id: str) -> list[RouteStopLink]: ...

    async def fetch_route_stop_links_by_route(self, route_id: str) -> list[RouteStopLink]:
        """Links for one route, in visiting order."""
        ...

    async def fetch_routes_by_hub(self, hub_id: str) -> list[Route]: ...


STOP_COLUMNS = "id, name, latitude, longitude, order_number, route_id, cost, image_url"
HUB_COLUMNS = "id, name, latitude, longitude, address, transport_type, image_url"
ROUTE_COLUMNS = "id, name, start_point, end_point, cost, transport_type, hub_id"

LINK_SELECT = """
    SELECT rs.route_id, rs.stop_id, rs.order_number AS link_order,
           s.id, s.name, s.latitude, s.longitude, s.order_number,
           s.route_id AS stop_route_id, s.cost, s.image_url
    FROM route_stops rs
    JOIN stops s ON s.id = rs.stop_id
"""


def _as(model: type[M]) -> Callable[[aiosqlite.Row], M]:
    return lambda row: model.model_validate(dict(row))


def _convert(rows: Iterable[aiosqlite.Row], convert: Callable[[aiosqlite.Row], T]) -> list[T]:
    """Convert rows to records, reporting malformed stored values as RecordStoreError."""
    try:
        return [convert(row) for row in rows]
    except (ValidationError, ValueError, TypeError) as e:
        raise RecordStoreError(f"Malformed record in store: {e}") from e


def _row_to_link(row: aiosqlite.Row) -> RouteStopLink:
    """Convert a joined route_stops/stops row to a RouteStopLink."""
    stop = Stop(
        id=row["id"],
        name=row["name"],
        latitude=float(row["latitude"]),
        longitude=float(row["longitude"]),
        order_number=int(row["order_number"]) if row["order_number"] is not None else None,
        route_id=row["stop_route_id"],
        cost=float(row["cost"]) if row["cost"] is not None else None,
        image_url=row["image_url"],
    )
    return RouteStopLink(
        route_id=row["route_id"],
        stop_id=row["stop_id"],
        order_number=int(row["link_order"]) if row["link_order"] is not None else None,
        stop=stop,
    )


class SqliteRecordStore:
    """RecordStore backed by the SQLite database built by DatasetLoader.

    Every query opens its own connection. Listings follow insertion order.
    """

    def __init__(self, db_path: Path | None = None):
        """Initialize the store.

        Args:
            db_path: Optional database path override (defaults to TRANSIT_HUB_DB_PATH).
        """
        self._db_path = db_path

    async def _fetch(self, sql: str, params: Sequence = ()) -> list[aiosqlite.Row]:
        try:
            async with get_db(self._db_path) as db:
                async with db.execute(sql, params) as cursor:
                    return list(await cursor.fetchall())
        except (aiosqlite.Error, FileNotFoundError) as e:
            raise RecordStoreError(f"Record store query failed: {e}") from e

    async def fetch_all_stops(self) -> list[Stop]:
        rows = await self._fetch(f"SELECT {STOP_COLUMNS} FROM stops ORDER BY rowid")
        return _convert(rows, _as(Stop))

    async def fetch_all_hubs(self) -> list[Hub]:
        rows = await self._fetch(f"SELECT {HUB_COLUMNS} FROM hubs ORDER BY rowid")
        return _convert(rows, _as(Hub))

    async def fetch_all_routes(self) -> list[Route]:
        rows = await self._fetch(f"SELECT {ROUTE_COLUMNS} FROM routes ORDER BY rowid")
        return _convert(rows, _as(Route))

    async def fetch_route(self, route_id: str) -> Route | None:
        rows = await self._fetch(f"SELECT {ROUTE_COLUMNS} FROM routes WHERE id = ?", (route_id,))
        routes = _convert(rows, _as(Route))
        return routes[0] if routes else None

    async def fetch_hub(self, hub_id: str) -> Hub | None:
        rows = await self._fetch(f"SELECT {HUB_COLUMNS} FROM hubs WHERE id = ?", (hub_id,))
        hubs = _convert(rows, _as(Hub))
        return hubs[0] if hubs else None

    async def fetch_route_stop_links_by_stop(self, stop_id: str) -> list[RouteStopLink]:
        sql = LINK_SELECT + " WHERE rs.stop_id = ? ORDER BY rs.rowid"
        return _convert(await self._fetch(sql, (stop_id,)), _row_to_link)

    async def fetch_route_stop_links_by_route(self, route_id: str) -> list[RouteStopLink]:
        sql = (
            LINK_SELECT
            + " WHERE rs.route_id = ?"
            + " ORDER BY COALESCE(rs.order_number, s.order_number, 0), rs.rowid"
        )
        return _convert(await self._fetch(sql, (route_id,)), _row_to_link)

    async def fetch_routes_by_hub(self, hub_id: str) -> list[Route]:
        rows = await self._fetch(
            f"SELECT {ROUTE_COLUMNS} FROM routes WHERE hub_id = ? ORDER BY rowid", (hub_id,)
        )
        return _convert(rows, _as(Route))


class InMemoryRecordStore:
    """RecordStore over in-memory entity lists, preserving their order."""

    def __init__(
        self,
        stops: Iterable[Stop] = (),
        hubs: Iterable[Hub] = (),
        routes: Iterable[Route] = (),
        links: Iterable[RouteStopLink] = (),
    ):
        self.stops = list(stops)
        self.hubs = list(hubs)
        self.routes = list(routes)
        self.links = list(links)

    def _resolve(self, links: Iterable[RouteStopLink]) -> list[RouteStopLink]:
        """Attach linked stops, dropping links to unknown stops."""
        stops_by_id = {stop.id: stop for stop in self.stops}
        resolved = []
        for link in links:
            stop = stops_by_id.get(link.stop_id)
            if stop is not None:
                resolved.append(link.model_copy(update={"stop": stop}))
        return resolved

    async def fetch_all_stops(self) -> list[Stop]:
        return list(self.stops)

    async def fetch_all_hubs(self) -> list[Hub]:
        return list(self.hubs)

    async def fetch_all_routes(self) -> list[Route]:
        return list(self.routes)

    async def fetch_route(self, route_id: str) -> Route | None:
        return next((route for route in self.routes if route.id == route_id), None)

    async def fetch_hub(self, hub_id: str) -> Hub | None:
        return next((hub for hub in self.hubs if hub.id == hub_id), None)

    async def fetch_route_stop_links_by_stop(self, stop_id: str) -> list[RouteStopLink]:
        return self._resolve(link for link in self.links if link.stop_id == stop_id)

    async def fetch_route_stop_links_by_route(self, route_id: str) -> list[RouteStopLink]:
        links = self._resolve(link for link in self.links if link.route_id == route_id)
        return sorted(links, key=lambda link: link.sequence_key)

    async def fetch_routes_by_hub(self, hub_id: str) -> list[Route]:
        return [route for route in self.routes if route.hub_id == hub_id]
