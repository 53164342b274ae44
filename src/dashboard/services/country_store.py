"""
Country collection store.

Single source of truth for the countries screen: holds the current page,
the selected country, loading/error flags and pagination metadata, and
exposes async actions that call the CountryClient and update state.

Known defects kept on purpose:
- total_pages is derived from the length of the returned page, not from a
  server-reported total, so it undercounts whenever more pages exist.
- Refreshes after create/update/delete always use a page size of 10,
  whatever size the last manual fetch used.
"""

import math
from typing import Optional

import structlog
from pydantic import BaseModel, Field

from core.errors import describe_error
from schemas.country import Country, CountryFilters, CreateCountryRequest
from services.country_client import CountryClient, CountryPayload

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_SIZE = 10
REFRESH_PAGE_SIZE = 10


class CountriesState(BaseModel):
    """Snapshot of the store. Replaced wholesale on every change."""

    countries: list[Country] = Field(default_factory=list)
    selected_country: Optional[Country] = None
    is_loading: bool = False
    error: Optional[str] = None
    total_elements: int = 0
    total_pages: int = 0
    current_page: int = 0


class CountryStore:
    """
    State container for the countries screen.

    Concurrent actions are not serialized; whichever finishes last
    determines the final state.
    """

    def __init__(self, client: CountryClient):
        self.client = client
        self.state = CountriesState()

    def _set(self, **changes) -> None:
        self.state = self.state.model_copy(update=changes)

    # =========================================================================
    # Fetch actions
    # =========================================================================

    async def fetch_countries(self, filters: Optional[CountryFilters] = None) -> None:
        """Fetch one page and replace the current list with it."""
        filters = filters or CountryFilters()
        self._set(is_loading=True, error=None)
        try:
            countries = await self.client.list_countries(filters)
        except Exception as e:
            logger.warning("countries_fetch_failed", error=str(e))
            self._set(
                error=describe_error(e, "Failed to fetch countries"),
                is_loading=False,
            )
            return

        page_size = filters.size or DEFAULT_PAGE_SIZE
        self._set(
            countries=countries,
            total_elements=len(countries),
            total_pages=math.ceil(len(countries) / page_size),
            current_page=filters.page or 0,
            is_loading=False,
        )

    async def fetch_country_by_id(self, country_id: int) -> None:
        """Load a single country into selected_country."""
        self._set(is_loading=True, error=None)
        try:
            country = await self.client.get_country(country_id)
        except Exception as e:
            logger.warning("country_fetch_failed", country_id=country_id, error=str(e))
            self._set(error=describe_error(e, "Failed to fetch country"), is_loading=False)
            return

        self._set(selected_country=country, is_loading=False)

    async def fetch_country_by_code(self, code: str) -> None:
        """Load a single country by code into selected_country."""
        self._set(is_loading=True, error=None)
        try:
            country = await self.client.get_country_by_code(code)
        except Exception as e:
            logger.warning("country_fetch_failed", code=code, error=str(e))
            self._set(error=describe_error(e, "Failed to fetch country"), is_loading=False)
            return

        self._set(selected_country=country, is_loading=False)

    # =========================================================================
    # Mutations - each one re-fetches the current page on success
    # =========================================================================

    async def _refresh_current_page(self) -> None:
        await self.fetch_countries(
            CountryFilters(page=self.state.current_page, size=REFRESH_PAGE_SIZE)
        )

    async def create_country(self, data: CreateCountryRequest) -> bool:
        """Create a country. Returns True on success."""
        self._set(is_loading=True, error=None)
        try:
            await self.client.create_country(data)
        except Exception as e:
            logger.warning("country_create_failed", error=str(e))
            self._set(error=describe_error(e, "Failed to create country"), is_loading=False)
            return False

        logger.info("country_created", code=data.code)
        self._set(is_loading=False)
        await self._refresh_current_page()
        return True

    async def update_country(self, country_id: int, data: CountryPayload) -> bool:
        """Patch a country. Returns True on success."""
        self._set(is_loading=True, error=None)
        try:
            await self.client.update_country(country_id, data)
        except Exception as e:
            logger.warning("country_update_failed", country_id=country_id, error=str(e))
            self._set(error=describe_error(e, "Failed to update country"), is_loading=False)
            return False

        logger.info("country_updated", country_id=country_id)
        self._set(is_loading=False)
        await self._refresh_current_page()
        return True

    async def delete_country(self, country_id: int) -> bool:
        """Delete a country. Returns True on success."""
        self._set(is_loading=True, error=None)
        try:
            await self.client.delete_country(country_id)
        except Exception as e:
            logger.warning("country_delete_failed", country_id=country_id, error=str(e))
            self._set(error=describe_error(e, "Failed to delete country"), is_loading=False)
            return False

        logger.info("country_deleted", country_id=country_id)
        self._set(is_loading=False)
        await self._refresh_current_page()
        return True

    # =========================================================================
    # Synchronous setters
    # =========================================================================

    def set_selected_country(self, country: Optional[Country]) -> None:
        self._set(selected_country=country)

    def clear_error(self) -> None:
        self._set(error=None)

    def reset(self) -> None:
        """Return to the initial empty state."""
        self.state = CountriesState()
