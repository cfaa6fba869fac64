"""Pydantic models for transit dataset entities."""

from pydantic import BaseModel, ConfigDict


class Coordinate(BaseModel):
    """A WGS84 point in degrees."""

    lat: float
    lon: float


class Location(BaseModel):
    """A geocoded place used as a planning origin or destination."""

    # Nominatim returns numeric place ids and string coordinates
    model_config = ConfigDict(coerce_numbers_to_str=True)

    lat: float
    lon: float
    display_name: str
    place_id: str | None = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lon=self.lon)

    @property
    def label(self) -> str:
        """Short name: the part of display_name before the first comma."""
        return self.display_name.split(",")[0]


class Stop(BaseModel):
    """A boarding/alighting point."""

    id: str
    name: str
    latitude: float
    longitude: float
    order_number: int | None = None  # position along route_id only
    route_id: str | None = None  # hint; membership comes from route_stops
    cost: float | None = None
    image_url: str | None = None


class Hub(BaseModel):
    """A transfer point that routes depart from."""

    id: str
    name: str
    latitude: float
    longitude: float
    address: str | None = None
    transport_type: str | None = None
    image_url: str | None = None


class Route(BaseModel):
    """A transit route with a flat fare."""

    id: str
    name: str
    start_point: str | None = None
    end_point: str | None = None
    cost: float | None = None
    transport_type: str  # e.g. Bus, Taxi, Train
    hub_id: str | None = None


class RouteStopLink(BaseModel):
    """route_stops join row, with the linked stop resolved."""

    route_id: str
    stop_id: str
    order_number: int | None = None
    stop: Stop | None = None

    @property
    def sequence_key(self) -> int:
        """Visiting order: the link's own order, else the stop's, else 0."""
        if self.order_number is not None:
            return self.order_number
        if self.stop is not None and self.stop.order_number is not None:
            return self.stop.order_number
        return 0


class RouteWithStops(BaseModel):
    """A route bundled with its ordered stop sequence and originating hub."""

    route: Route
    stops: list[Stop]
    hub: Hub | None = None
