from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from transit_hub.models.entities import Coordinate, Hub, Location, Route, Stop


class EntityType(str, Enum):
    """Kind of dataset entity a route step links to."""

    STOP = "stop"
    HUB = "hub"
    ROUTE = "route"


# Route Planning Models


class RouteStep(BaseModel):
    """Single leg of an itinerary (a walk or a ride)."""

    model_config = ConfigDict(frozen=True)

    instruction: str
    transport_type: str = Field(description="Walking, or the route's transport type")
    duration: str = Field(description="Human-readable duration, e.g. '12 min'")
    duration_minutes: int
    distance_km: float | None = None
    cost: float | None = Field(default=None, description="Fare charged on this leg")
    stop_name: str | None = None
    coordinates: Coordinate | None = Field(default=None, description="Where this leg ends")

    # Deep link into the app (stop, hub or route screen)
    entity_id: str | None = None
    entity_type: EntityType | None = None
    navigation_link: str | None = None


class RouteRef(BaseModel):
    """A route used by a plan."""

    model_config = ConfigDict(frozen=True)

    route_id: str
    route_name: str
    transport_type: str
    navigation_link: str


class RoutePlan(BaseModel):
    """Response from plan_route."""

    model_config = ConfigDict(frozen=True)

    from_label: str
    to_label: str
    total_duration: str = Field(description="'<N> min', or 'Unknown' when no route exists")
    total_distance_km: float
    total_cost: float
    steps: list[RouteStep] = Field(default_factory=list)
    is_multi_modal: bool = Field(description="True when the itinerary goes via a hub")
    routes_used: list[RouteRef] = Field(default_factory=list)

    # Status
    has_valid_route: bool
    message: str | None = None


# Nearby Lookup Models


class HubResult(Hub):
    distance_km: float = Field(description="Distance from search coordinates")


class StopResult(Stop):
    distance_km: float = Field(description="Distance from search coordinates")


class RouteResult(Route):
    hub: Hub | None = None
    hub_distance_km: float | None = Field(
        default=None, description="Distance from search coordinates to the route's hub"
    )


class NearbyHubsResponse(BaseModel):
    hubs: list[HubResult]
    count: int = Field(description="Number of hubs returned")


class NearbyStopsResponse(BaseModel):
    stops: list[StopResult]
    count: int = Field(description="Number of stops returned")


class NearbyRoutesResponse(BaseModel):
    routes: list[RouteResult]
    count: int = Field(description="Number of routes returned")


# Location Search Models


class SearchLocationsResponse(BaseModel):
    """Response for search_locations tool."""

    query: str
    locations: list[Location] = Field(default_factory=list)
    count: int
    api_available: bool = Field(
        description="Whether the geocoding API was reachable (false on HTTP error)"
    )
    error: str | None = None
