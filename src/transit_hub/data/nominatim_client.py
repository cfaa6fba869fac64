import httpx
from pydantic import TypeAdapter

from transit_hub.data.config import PlannerConfig
from transit_hub.models.entities import Location

_locations_adapter = TypeAdapter(list[Location])


class NominatimClient:
    """Async HTTP client for OpenStreetMap Nominatim place search.

    Usage:
        async with NominatimClient(config) as client:
            locations = await client.search("Bree Street Taxi Rank")
    """

    def __init__(self, config: PlannerConfig):
        """Initialize the client.

        Args:
            config: Configuration with Nominatim URL, user agent and result limits.
        """
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "NominatimClient":
        """Enter async context - create HTTP client."""
        # Nominatim's usage policy requires an identifying User-Agent
        headers = {"User-Agent": self._config.nominatim_user_agent}
        self._client = httpx.AsyncClient(
            headers=headers, timeout=self._config.http_timeout_seconds
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context - close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def search(self, query: str) -> list[Location]:
        """Search places matching a free-text query.

        Returns:
            Matching locations in Nominatim's ranking order.

        Raises:
            RuntimeError: If client not initialized.
            httpx.HTTPError: If the HTTP request fails.
        """
        if not self._client:
            raise RuntimeError("Client not initialized - use 'async with'")

        params = {
            "format": "json",
            "q": query,
            "limit": self._config.nominatim_limit,
            "addressdetails": 1,
        }
        if self._config.nominatim_country_codes:
            params["countrycodes"] = self._config.nominatim_country_codes

        response = await self._client.get(self._config.nominatim_url, params=params)
        response.raise_for_status()

        return _locations_adapter.validate_python(response.json())
