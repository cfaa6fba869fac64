"""Tests for end-to-end route planning."""

import math
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from transit_hub.data.config import PlannerConfig
from transit_hub.data.record_store import InMemoryRecordStore, RecordStoreError
from transit_hub.models.entities import Hub, Location, Route, RouteStopLink, Stop
from transit_hub.models.responses import EntityType
from transit_hub.services.geo import distance_km
from transit_hub.services.route_planner import RoutePlanService, plan_route


def _stop(stop_id: str, lat: float, lon: float) -> Stop:
    return Stop(id=stop_id, name=f"Stop {stop_id}", latitude=lat, longitude=lon)


def _links(route_id: str, *stop_ids: str) -> list[RouteStopLink]:
    return [
        RouteStopLink(route_id=route_id, stop_id=stop_id, order_number=i)
        for i, stop_id in enumerate(stop_ids, start=1)
    ]


@pytest.fixture
def direct_store() -> InMemoryRecordStore:
    """Stop A (0,0) and Stop B (0,0.01) on route R1, no hubs."""
    return InMemoryRecordStore(
        stops=[_stop("A", 0.0, 0.0), _stop("B", 0.0, 0.01)],
        routes=[Route(id="R1", name="Route 1", transport_type="Bus", cost=8.5)],
        links=_links("R1", "A", "B"),
    )


@pytest.fixture
def hub_store() -> InMemoryRecordStore:
    """Hub H (0,0) with route R2 visiting C (0,0), E (near origin) and D (1,1)."""
    return InMemoryRecordStore(
        stops=[_stop("C", 0.0, 0.0), _stop("E", 0.001, 0.001), _stop("D", 1.0, 1.0)],
        hubs=[Hub(id="H", name="Hub H", latitude=0.0, longitude=0.0)],
        routes=[
            Route(id="R2", name="Route 2", transport_type="Taxi", cost=12.0, hub_id="H"),
        ],
        links=_links("R2", "C", "E", "D"),
    )


def _service(store: InMemoryRecordStore) -> RoutePlanService:
    return RoutePlanService(store, PlannerConfig())


class TestRoutePlanService:
    """Tests for RoutePlanService.plan strategy order and results."""

    async def test_direct_route(self, direct_store: InMemoryRecordStore) -> None:
        origin = Location(lat=0.0, lon=0.0, display_name="Stop A, Soweto")
        destination = Location(lat=0.0, lon=0.01, display_name="Stop B, Soweto")

        plan = await _service(direct_store).plan(origin, destination)

        assert plan.has_valid_route is True
        assert plan.is_multi_modal is False
        assert [r.route_id for r in plan.routes_used] == ["R1"]
        assert plan.total_cost == 8.5

        # both endpoints sit on the stops, so no walking
        assert len(plan.steps) == 1
        ride = distance_km(0, 0, 0, 0.01)
        assert math.isclose(plan.steps[0].distance_km, ride)
        assert plan.total_duration == f"{math.ceil(ride * 3.0)} min"

    async def test_hub_route(self, hub_store: InMemoryRecordStore) -> None:
        origin = Location(lat=0.005, lon=0.005, display_name="Home")
        destination = Location(lat=1.01, lon=1.0, display_name="Mall, Midrand")

        plan = await _service(hub_store).plan(origin, destination)

        assert plan.has_valid_route is True
        assert plan.is_multi_modal is True
        assert [r.route_id for r in plan.routes_used] == ["R2"]
        assert plan.total_cost == 12.0

        assert plan.steps[0].instruction == "Walk to Stop E"
        assert plan.steps[1].entity_type == EntityType.HUB
        assert plan.steps[1].entity_id == "H"
        assert plan.steps[2].entity_type == EntityType.ROUTE
        assert plan.steps[-1].instruction == "Walk to Mall"

    async def test_hub_route_preferred_over_direct(
        self, hub_store: InMemoryRecordStore
    ) -> None:
        """E and D are also in order on R2, so a direct plan exists but is not used."""
        origin = Location(lat=0.001, lon=0.001, display_name="Home")
        destination = Location(lat=1.0, lon=1.0, display_name="Mall")

        plan = await _service(hub_store).plan(origin, destination)

        assert plan.is_multi_modal is True

    async def test_falls_back_to_direct_when_hub_routes_miss_destination(
        self, direct_store: InMemoryRecordStore
    ) -> None:
        """A hub route far away does not prevent the direct route."""
        direct_store.hubs.append(Hub(id="H", name="Far Rank", latitude=5.0, longitude=5.0))
        direct_store.stops.append(_stop("F", 5.0, 5.0))
        direct_store.routes.append(
            Route(id="R9", name="Far Route", transport_type="Taxi", hub_id="H")
        )
        direct_store.links.extend(_links("R9", "F"))
        origin = Location(lat=0.0, lon=0.0, display_name="A")
        destination = Location(lat=0.0, lon=0.01, display_name="B")

        plan = await _service(direct_store).plan(origin, destination)

        assert plan.has_valid_route is True
        assert [r.route_id for r in plan.routes_used] == ["R1"]

    async def test_wrong_direction_has_no_route(
        self, direct_store: InMemoryRecordStore
    ) -> None:
        origin = Location(lat=0.0, lon=0.01, display_name="B")
        destination = Location(lat=0.0, lon=0.0, display_name="A")

        plan = await _service(direct_store).plan(origin, destination)

        assert plan.has_valid_route is False

    async def test_empty_dataset(self) -> None:
        origin = Location(lat=-26.2041, lon=28.0473, display_name="Johannesburg, Gauteng")
        destination = Location(lat=-26.1076, lon=28.0567, display_name="Sandton, Gauteng")

        plan = await _service(InMemoryRecordStore()).plan(origin, destination)

        expected = distance_km(-26.2041, 28.0473, -26.1076, 28.0567)
        assert plan.has_valid_route is False
        assert plan.steps == []
        assert plan.routes_used == []
        assert plan.total_cost == 0
        assert plan.total_duration == "Unknown"
        assert math.isclose(plan.total_distance_km, expected)
        assert f"{expected:.1f}km" in plan.message
        assert plan.from_label == "Johannesburg"
        assert plan.to_label == "Sandton"

    async def test_deterministic(self, hub_store: InMemoryRecordStore) -> None:
        origin = Location(lat=0.005, lon=0.005, display_name="Home")
        destination = Location(lat=1.01, lon=1.0, display_name="Mall")
        service = _service(hub_store)

        assert await service.plan(origin, destination) == await service.plan(
            origin, destination
        )

    async def test_reads_store_on_every_call(self, direct_store: InMemoryRecordStore) -> None:
        origin = Location(lat=0.0, lon=0.0, display_name="A")
        destination = Location(lat=0.0, lon=0.01, display_name="B")
        service = _service(direct_store)

        assert (await service.plan(origin, destination)).has_valid_route is True

        direct_store.links.clear()
        assert (await service.plan(origin, destination)).has_valid_route is False

    async def test_store_error_propagates(self, direct_store: InMemoryRecordStore) -> None:
        direct_store.fetch_route_stop_links_by_stop = AsyncMock(
            side_effect=RecordStoreError("timeout")
        )
        origin = Location(lat=0.0, lon=0.0, display_name="A")
        destination = Location(lat=0.0, lon=0.01, display_name="B")

        with pytest.raises(RecordStoreError, match="timeout"):
            await _service(direct_store).plan(origin, destination)


class TestPlanRouteOverSqlite:
    """Tests for plan_route over an ingested dataset."""

    async def test_direct_route(self, sample_db: Path) -> None:
        origin = Location(lat=0.0, lon=0.0, display_name="Stop A")
        destination = Location(lat=0.0, lon=0.01, display_name="Stop B")

        plan = await plan_route(origin, destination, db_path=sample_db)

        assert plan.has_valid_route is True
        assert plan.is_multi_modal is False
        assert [r.route_id for r in plan.routes_used] == ["R1"]
        assert plan.steps[0].instruction == "Take Line 1 from Stop A to Stop B"

    async def test_hub_route(self, sample_db: Path) -> None:
        origin = Location(lat=10.005, lon=10.005, display_name="Township")
        destination = Location(lat=11.01, lon=11.0, display_name="Mall")

        plan = await plan_route(origin, destination, db_path=sample_db)

        assert plan.has_valid_route is True
        assert plan.is_multi_modal is True
        assert [s.instruction for s in plan.steps] == [
            "Walk to Township Stop",
            "Take Taxi to Central Rank",
            "Take Mall Express from Central Rank to Mall Stop",
            "Walk to Mall",
        ]
        assert plan.steps[1].navigation_link == "/hub/H1"
        assert plan.total_cost == 12.0

    async def test_no_route(self, sample_db: Path) -> None:
        origin = Location(lat=0.0, lon=0.0, display_name="Stop A")
        destination = Location(lat=-5.0, lon=-5.0, display_name="Nowhere")

        plan = await plan_route(origin, destination, db_path=sample_db)

        assert plan.has_valid_route is False
        assert plan.message is not None

    async def test_missing_database(self, tmp_path: Path) -> None:
        origin = Location(lat=0.0, lon=0.0, display_name="A")

        with pytest.raises(RecordStoreError):
            await plan_route(origin, origin, db_path=tmp_path / "missing.db")
