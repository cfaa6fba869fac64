"""Tests for the location search service."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from transit_hub.data.config import PlannerConfig
from transit_hub.services.geocoding_service import search_locations


@pytest.fixture
def config() -> PlannerConfig:
    return PlannerConfig(nominatim_url="https://example.com/search")


class TestSearchLocations:
    """Tests for search_locations."""

    async def test_returns_locations(self, config: PlannerConfig) -> None:
        mock_response = MagicMock()
        mock_response.json.return_value = [
            {"place_id": 1, "lat": "-26.2", "lon": "28.04", "display_name": "Soweto, Gauteng"},
        ]

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client = AsyncMock()
            mock_client.get = AsyncMock(return_value=mock_response)
            mock_client_class.return_value = mock_client

            result = await search_locations("  Soweto  ", config)

        assert result.query == "Soweto"
        assert result.api_available is True
        assert result.error is None
        assert result.count == 1
        assert result.locations[0].display_name == "Soweto, Gauteng"

    async def test_short_query_skips_api(self, config: PlannerConfig) -> None:
        with patch("httpx.AsyncClient") as mock_client_class:
            result = await search_locations(" ab ", config)

            mock_client_class.assert_not_called()

        assert result.count == 0
        assert result.locations == []
        assert result.api_available is True

    async def test_connection_error(self, config: PlannerConfig) -> None:
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client = AsyncMock()
            mock_client.get = AsyncMock(side_effect=httpx.ConnectError("connection refused"))
            mock_client_class.return_value = mock_client

            result = await search_locations("Soweto", config)

        assert result.api_available is False
        assert result.error == "connection refused"
        assert result.count == 0
        assert result.locations == []

    async def test_status_error(self, config: PlannerConfig) -> None:
        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "429 Too Many Requests", request=MagicMock(), response=MagicMock()
        )

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client = AsyncMock()
            mock_client.get = AsyncMock(return_value=mock_response)
            mock_client_class.return_value = mock_client

            result = await search_locations("Soweto", config)

        assert result.api_available is False
        assert "429" in result.error
