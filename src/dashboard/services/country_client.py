"""
Client for the countries endpoints of the external REST API.

Public endpoints serve reads; admin endpoints (create/update/delete) rely on
the credentials the shared HTTP client attaches. Failures are not caught
here: httpx.HTTPStatusError and transport errors reach the caller as-is.
"""

from typing import Union

import httpx
import structlog

from schemas.country import (
    Country,
    CountryFilters,
    CreateCountryRequest,
    UpdateCountryRequest,
)

logger = structlog.get_logger(__name__)

CountryPayload = Union[CreateCountryRequest, UpdateCountryRequest]


def build_list_params(filters: CountryFilters | None) -> list[tuple[str, str]]:
    """
    Build the query string for the list endpoint.

    Only defined filters are sent; nothing is defaulted. Empty name/code
    count as undefined.
    """
    if filters is None:
        return []

    params: list[tuple[str, str]] = []
    if filters.name:
        params.append(("name", filters.name))
    if filters.code:
        params.append(("code", filters.code))
    if filters.active is not None:
        params.append(("active", "true" if filters.active else "false"))
    if filters.page is not None:
        params.append(("page", str(filters.page)))
    if filters.size is not None:
        params.append(("size", str(filters.size)))
    return params


class CountryClient:
    """Request/response pairs against /countries."""

    PUBLIC_PATH = "/countries/public"
    ADMIN_PATH = "/countries/admin"

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client

    async def list_countries(self, filters: CountryFilters | None = None) -> list[Country]:
        """Get one page of countries (public)."""
        params = build_list_params(filters)
        logger.debug("countries_list_request", params=params)

        response = await self.http_client.get(self.PUBLIC_PATH, params=params)
        response.raise_for_status()
        return [Country.model_validate(item) for item in response.json()]

    async def get_country(self, country_id: int) -> Country:
        """Get a country by ID (public). 404 raises HTTPStatusError."""
        response = await self.http_client.get(f"{self.PUBLIC_PATH}/{country_id}")
        response.raise_for_status()
        return Country.model_validate(response.json())

    async def get_country_by_code(self, code: str) -> Country:
        """Get a country by its alpha-3 code (public)."""
        response = await self.http_client.get(f"{self.PUBLIC_PATH}/code/{code}")
        response.raise_for_status()
        return Country.model_validate(response.json())

    async def create_country(self, payload: CreateCountryRequest) -> Country:
        """Create a country (admin)."""
        body = payload.model_dump(by_alias=True, mode="json")
        logger.debug("country_create_request", code=payload.code)

        response = await self.http_client.post(self.ADMIN_PATH, json=body)
        response.raise_for_status()
        return Country.model_validate(response.json())

    async def update_country(self, country_id: int, payload: CountryPayload) -> Country:
        """Patch a country (admin). Unset fields are left untouched server-side."""
        body = payload.model_dump(by_alias=True, mode="json", exclude_unset=True)
        logger.debug("country_update_request", country_id=country_id, fields=sorted(body))

        response = await self.http_client.patch(f"{self.ADMIN_PATH}/{country_id}", json=body)
        response.raise_for_status()
        return Country.model_validate(response.json())

    async def delete_country(self, country_id: int) -> None:
        """Delete a country (admin)."""
        logger.debug("country_delete_request", country_id=country_id)

        response = await self.http_client.delete(f"{self.ADMIN_PATH}/{country_id}")
        response.raise_for_status()
