"""Schemas module initialization."""

from schemas.country import (
    City,
    Country,
    CountryFilters,
    CountryInfo,
    CreateCountryRequest,
    UpdateCountryRequest,
)

__all__ = [
    "City",
    "Country",
    "CountryFilters",
    "CountryInfo",
    "CreateCountryRequest",
    "UpdateCountryRequest",
]
