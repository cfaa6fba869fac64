from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PlannerConfig(BaseSettings):
    """Configuration for route planning, dataset access and geocoding.

    Automatically loads from TRANSIT_HUB_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(env_prefix="TRANSIT_HUB_", env_file=".env", extra="ignore")

    db_path: Path = Path("data/transit.db")

    # Candidate search radii
    destination_search_radius_km: float = Field(
        default=3.0, description="Radius around the destination for hub-route candidate stops"
    )
    direct_search_radius_km: float | None = Field(
        default=None, description="Radius for direct-route nearest stops (None = unbounded)"
    )

    # Itinerary pacing (minutes per km of straight-line distance)
    walk_step_threshold_km: float = 0.05
    walk_minutes_per_km: float = 15.0
    hub_inbound_minutes_per_km: float = 3.0
    hub_route_minutes_per_km: float = 2.5
    direct_route_minutes_per_km: float = 3.0

    # Nearby lookups
    nearby_hubs_radius_km: float = 10.0
    nearby_stops_radius_km: float = 5.0
    nearby_routes_radius_km: float = 15.0
    nearby_result_limit: int = 5

    # Nominatim (OpenStreetMap) location search
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    nominatim_user_agent: str = "transit-hub-mcp/0.1"
    nominatim_country_codes: str = "za"
    nominatim_limit: int = 5
    http_timeout_seconds: float = 30.0


@lru_cache
def get_planner_config() -> PlannerConfig:
    """Get planner configuration (cached singleton).

    Returns:
        PlannerConfig with values from .env file or environment variables.
    """
    return PlannerConfig()
