"""
Pytest fixtures for the countries admin tests.
"""

import os
from collections.abc import AsyncGenerator
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing app
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("API_BASE_URL", "http://api.test/api/v1")

from schemas.country import Country  # noqa: E402


def make_country(country_id: int = 1, **overrides: Any) -> Country:
    """Build a Country as the API would return it."""
    data: dict[str, Any] = {
        "id": country_id,
        "name": f"Country {country_id}",
        "code": f"C{country_id:02d}"[:3],
        "isoCode2": f"{country_id:02d}"[:2],
        "active": True,
        "createdAt": "2024-01-15T10:00:00Z",
        "updatedAt": "2024-02-01T12:30:00Z",
        "cities": [],
    }
    data.update(overrides)
    return Country.model_validate(data)


@pytest.fixture
def country_factory() -> Callable[..., Country]:
    return make_country


@pytest.fixture
def sample_country_data() -> dict[str, Any]:
    """Country JSON as served by the external API."""
    return {
        "id": 7,
        "name": "Kazakhstan",
        "code": "KAZ",
        "isoCode2": "KZ",
        "active": True,
        "createdAt": "2024-01-15T10:00:00Z",
        "updatedAt": "2024-02-01T12:30:00Z",
        "cities": [
            {
                "id": 70,
                "name": "Almaty",
                "country": "Kazakhstan",
                "countryId": 7,
                "countryInfo": {
                    "id": 7,
                    "name": "Kazakhstan",
                    "code": "KAZ",
                    "isoCode2": "KZ",
                    "active": True,
                },
                "region": "Almaty Region",
                "latitude": 43.238,
                "longitude": 76.889,
                "description": "Largest city",
                "createdAt": "2024-01-15T10:00:00Z",
                "updatedAt": "2024-01-15T10:00:00Z",
                "active": True,
            }
        ],
    }


@pytest.fixture
def sample_country(sample_country_data: dict[str, Any]) -> Country:
    return Country.model_validate(sample_country_data)


@pytest.fixture
def sample_countries() -> list[Country]:
    return [make_country(i) for i in range(1, 4)]


@pytest.fixture
def mock_country_client() -> MagicMock:
    """Create mock CountryClient."""
    client = MagicMock()
    client.list_countries = AsyncMock(return_value=[])
    client.get_country = AsyncMock()
    client.get_country_by_code = AsyncMock()
    client.create_country = AsyncMock()
    client.update_country = AsyncMock()
    client.delete_country = AsyncMock(return_value=None)
    return client


@pytest.fixture
def store(mock_country_client: MagicMock):
    from services.country_store import CountryStore

    return CountryStore(mock_country_client)


@pytest.fixture
def manager(store):
    from views.countries_manager import CountriesManager

    return CountriesManager(store)


@pytest.fixture
def translator():
    from core.i18n import Translator

    return Translator()


@pytest.fixture
def sessions(manager, mock_country_client: MagicMock):
    """Session registry whose first session gets the ``manager`` fixture."""
    from core.sessions import SessionRegistry
    from services.country_store import CountryStore
    from views.countries_manager import CountriesManager

    unclaimed = [manager]

    def build_manager() -> CountriesManager:
        if unclaimed:
            return unclaimed.pop()
        return CountriesManager(CountryStore(mock_country_client))

    return SessionRegistry(build_manager)


@pytest.fixture
async def app(sessions) -> Any:
    """FastAPI application wired to the mocked store."""
    from core.i18n import Translator
    from main import app as fastapi_app

    fastapi_app.state.countries_sessions = sessions
    fastapi_app.state.translator = Translator()
    yield fastapi_app
    del fastapi_app.state.countries_sessions


@pytest.fixture
async def client(app: Any) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for the page routes."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
