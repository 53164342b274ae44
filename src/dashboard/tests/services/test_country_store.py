"""
Tests for the CountryStore.

Covers:
- Loading/error transitions of every action
- Pagination metadata derived from the returned page
- Re-fetch of the current page after mutations
- Synchronous setters and subscriptions
"""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from schemas.country import CountryFilters, CreateCountryRequest, UpdateCountryRequest
from services.country_store import CountriesState, CountryStore


def http_error(status_code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "http://api.test/api/v1/countries/public")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError("error", request=request, response=response)


@pytest.fixture
def payload() -> CreateCountryRequest:
    return CreateCountryRequest(name="Kazakhstan", code="KAZ", iso_code2="KZ", active=True)


class TestInitialState:
    def test_initial_state(self, store):
        assert store.state == CountriesState()
        assert store.state.countries == []
        assert store.state.selected_country is None
        assert store.state.is_loading is False
        assert store.state.error is None
        assert store.state.total_pages == 0
        assert store.state.current_page == 0


class TestFetchCountries:
    """Tests for fetch_countries."""

    async def test_success_replaces_countries(self, store, mock_country_client, country_factory):
        first = [country_factory(1), country_factory(2)]
        second = [country_factory(3)]
        mock_country_client.list_countries.return_value = first
        await store.fetch_countries(CountryFilters(page=0, size=10))

        mock_country_client.list_countries.return_value = second
        await store.fetch_countries(CountryFilters(page=0, size=10))

        assert [c.id for c in store.state.countries] == [3]
        assert store.state.total_elements == 1
        assert store.state.is_loading is False

    async def test_page_metadata(self, store, mock_country_client, country_factory):
        mock_country_client.list_countries.return_value = [country_factory(i) for i in range(7)]

        await store.fetch_countries(CountryFilters(page=1, size=10))

        assert store.state.current_page == 1
        assert store.state.total_pages == 1

    @pytest.mark.parametrize("count,size,expected", [(0, 10, 0), (10, 10, 1), (11, 10, 2), (5, 2, 3)])
    async def test_total_pages_from_page_length(self, store, mock_country_client, country_factory, count, size, expected):
        mock_country_client.list_countries.return_value = [country_factory(i) for i in range(count)]

        await store.fetch_countries(CountryFilters(page=0, size=size))

        assert store.state.total_pages == expected

    async def test_full_page_still_reports_single_page(self, store, mock_country_client, country_factory):
        """The page length, not a server total, drives total_pages."""
        mock_country_client.list_countries.return_value = [country_factory(i) for i in range(10)]

        await store.fetch_countries(CountryFilters(page=0, size=10))

        assert store.state.total_pages == 1

    async def test_defaults_without_filters(self, store, mock_country_client, country_factory):
        mock_country_client.list_countries.return_value = [country_factory(i) for i in range(15)]

        await store.fetch_countries()

        mock_country_client.list_countries.assert_awaited_once_with(CountryFilters())
        assert store.state.current_page == 0
        assert store.state.total_pages == 2

    async def test_loading_flag_while_pending(self, store, mock_country_client):
        seen: list[tuple[bool, object]] = []

        async def list_countries(filters):
            seen.append((store.state.is_loading, store.state.error))
            return []

        mock_country_client.list_countries = AsyncMock(side_effect=list_countries)

        await store.fetch_countries()

        assert seen == [(True, None)]
        assert store.state.is_loading is False

    async def test_failure_keeps_countries(self, store, mock_country_client, country_factory):
        mock_country_client.list_countries.return_value = [country_factory(1)]
        await store.fetch_countries()

        mock_country_client.list_countries.side_effect = http_error(500)
        await store.fetch_countries(CountryFilters(page=3))

        assert [c.id for c in store.state.countries] == [1]
        assert store.state.current_page == 0
        assert store.state.is_loading is False
        assert store.state.error == "Request failed with status code 500"

    async def test_failure_without_message_uses_fallback(self, store, mock_country_client):
        mock_country_client.list_countries.side_effect = RuntimeError()

        await store.fetch_countries()

        assert store.state.error == "Failed to fetch countries"

    async def test_new_fetch_clears_previous_error(self, store, mock_country_client):
        mock_country_client.list_countries.side_effect = RuntimeError("offline")
        await store.fetch_countries()
        assert store.state.error == "offline"

        mock_country_client.list_countries.side_effect = None
        mock_country_client.list_countries.return_value = []
        await store.fetch_countries()

        assert store.state.error is None


class TestFetchSingleCountry:
    async def test_fetch_by_id(self, store, mock_country_client, sample_country):
        mock_country_client.get_country.return_value = sample_country

        await store.fetch_country_by_id(7)

        mock_country_client.get_country.assert_awaited_once_with(7)
        assert store.state.selected_country == sample_country
        assert store.state.is_loading is False

    async def test_fetch_by_id_not_found(self, store, mock_country_client, sample_country):
        store.set_selected_country(sample_country)
        mock_country_client.get_country.side_effect = http_error(404)

        await store.fetch_country_by_id(999)

        assert store.state.selected_country == sample_country
        assert store.state.error == "Request failed with status code 404"
        assert store.state.is_loading is False

    async def test_fetch_by_code(self, store, mock_country_client, sample_country):
        mock_country_client.get_country_by_code.return_value = sample_country

        await store.fetch_country_by_code("KAZ")

        mock_country_client.get_country_by_code.assert_awaited_once_with("KAZ")
        assert store.state.selected_country == sample_country

    async def test_fetch_by_code_failure_fallback(self, store, mock_country_client):
        mock_country_client.get_country_by_code.side_effect = RuntimeError("")

        await store.fetch_country_by_code("XXX")

        assert store.state.error == "Failed to fetch country"


class TestMutations:
    """Tests for create/update/delete and the refresh that follows."""

    async def test_create_refreshes_current_page_with_size_ten(self, store, mock_country_client, country_factory, payload):
        mock_country_client.list_countries.return_value = [country_factory(i) for i in range(3)]
        await store.fetch_countries(CountryFilters(page=2, size=25))
        mock_country_client.list_countries.reset_mock()

        result = await store.create_country(payload)

        assert result is True
        mock_country_client.create_country.assert_awaited_once_with(payload)
        mock_country_client.list_countries.assert_awaited_once_with(CountryFilters(page=2, size=10))
        assert store.state.is_loading is False

    async def test_create_failure(self, store, mock_country_client, country_factory, payload):
        mock_country_client.list_countries.return_value = [country_factory(1)]
        await store.fetch_countries()
        mock_country_client.list_countries.reset_mock()
        mock_country_client.create_country.side_effect = http_error(400)

        result = await store.create_country(payload)

        assert result is False
        assert store.state.error == "Request failed with status code 400"
        assert store.state.is_loading is False
        assert [c.id for c in store.state.countries] == [1]
        mock_country_client.list_countries.assert_not_awaited()

    async def test_update(self, store, mock_country_client):
        data = UpdateCountryRequest(name="Renamed")

        result = await store.update_country(5, data)

        assert result is True
        mock_country_client.update_country.assert_awaited_once_with(5, data)
        mock_country_client.list_countries.assert_awaited_once_with(CountryFilters(page=0, size=10))

    async def test_update_failure_fallback(self, store, mock_country_client):
        mock_country_client.update_country.side_effect = RuntimeError()

        assert await store.update_country(5, UpdateCountryRequest(active=False)) is False
        assert store.state.error == "Failed to update country"

    async def test_delete(self, store, mock_country_client):
        result = await store.delete_country(5)

        assert result is True
        mock_country_client.delete_country.assert_awaited_once_with(5)
        mock_country_client.list_countries.assert_awaited_once()

    async def test_delete_failure(self, store, mock_country_client):
        mock_country_client.delete_country.side_effect = RuntimeError()

        assert await store.delete_country(5) is False
        assert store.state.error == "Failed to delete country"
        mock_country_client.list_countries.assert_not_awaited()

    async def test_refresh_failure_still_reports_success(self, store, mock_country_client, payload):
        mock_country_client.list_countries.side_effect = RuntimeError("list down")

        assert await store.create_country(payload) is True
        assert store.state.error == "list down"

    async def test_overlapping_actions_last_write_wins(self, store, mock_country_client, country_factory):
        slow_release = asyncio.Event()

        async def list_countries(filters):
            if filters.page == 0:
                await slow_release.wait()
                return [country_factory(1)]
            return [country_factory(2), country_factory(3)]

        mock_country_client.list_countries = AsyncMock(side_effect=list_countries)

        first = asyncio.create_task(store.fetch_countries(CountryFilters(page=0)))
        await asyncio.sleep(0)
        await store.fetch_countries(CountryFilters(page=1))
        assert store.state.current_page == 1

        slow_release.set()
        await first

        assert [c.id for c in store.state.countries] == [1]
        assert store.state.current_page == 0


class TestSetters:
    def test_set_selected_country(self, store, sample_country):
        store.set_selected_country(sample_country)
        assert store.state.selected_country == sample_country

        store.set_selected_country(None)
        assert store.state.selected_country is None

    async def test_clear_error(self, store, mock_country_client):
        mock_country_client.list_countries.side_effect = RuntimeError("offline")
        await store.fetch_countries()

        store.clear_error()

        assert store.state.error is None

    async def test_reset(self, store, mock_country_client, country_factory, sample_country):
        mock_country_client.list_countries.return_value = [country_factory(1)]
        await store.fetch_countries(CountryFilters(page=4))
        store.set_selected_country(sample_country)

        store.reset()

        assert store.state == CountriesState()
