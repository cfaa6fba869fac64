from transit_hub.app import mcp
from transit_hub.models.entities import Location
from transit_hub.models.responses import RoutePlan
from transit_hub.services.route_planner import plan_route as _plan_route


@mcp.tool()
async def plan_route(
    origin_lat: float,
    origin_lon: float,
    destination_lat: float,
    destination_lon: float,
    origin_name: str = "Origin",
    destination_name: str = "Destination",
) -> RoutePlan:
    """Plan a journey between two places using hubs, taxi, bus and train routes.

    Tries, in order:
    1. A hub route - ride to a hub, then a route from the hub to a stop near
       the destination
    2. A direct route through the stops nearest origin and destination
    3. Otherwise reports has_valid_route=False with the straight-line distance

    Use search_locations first to turn place names into coordinates.

    Args:
        origin_lat: Origin latitude in degrees.
        origin_lon: Origin longitude in degrees.
        destination_lat: Destination latitude in degrees.
        destination_lon: Destination longitude in degrees.
        origin_name: Origin display name (text before the first comma is the label).
        destination_name: Destination display name.

    Returns:
        RoutePlan with walk/ride steps, total duration, distance and fare.
        Steps carry navigation_link paths such as /stop/{id}, /hub/{id}
        and /route-details?routeId={id}.
    """
    origin = Location(lat=origin_lat, lon=origin_lon, display_name=origin_name)
    destination = Location(
        lat=destination_lat, lon=destination_lon, display_name=destination_name
    )
    return await _plan_route(origin=origin, destination=destination)
