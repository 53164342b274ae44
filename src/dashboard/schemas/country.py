"""
Country-related Pydantic schemas.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for every model exchanged with the countries API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CountryInfo(ApiModel):
    """Denormalized country snapshot embedded in a city."""

    id: int
    name: str
    code: str
    iso_code2: str
    active: bool


class City(ApiModel):
    """A city attached to a country. Read-only from this module."""

    id: int
    name: str
    country: Optional[str] = None
    country_id: int
    country_info: Optional[CountryInfo] = None
    region: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    active: bool = True


class Country(ApiModel):
    """Country record as returned by the API."""

    id: int
    name: str
    code: str  # ISO 3166-1 alpha-3
    iso_code2: str  # ISO 3166-1 alpha-2
    active: bool
    created_at: datetime
    updated_at: datetime
    cities: list[City] = Field(default_factory=list)

    @field_validator("cities", mode="before")
    @classmethod
    def null_cities_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class CreateCountryRequest(ApiModel):
    """Payload for creating a country."""

    name: str = Field(..., min_length=1)
    code: str = Field(..., min_length=3, max_length=3)
    iso_code2: str = Field(..., min_length=2, max_length=2)
    active: bool = True


class UpdateCountryRequest(ApiModel):
    """Partial update payload. Only explicitly set fields are sent."""

    name: Optional[str] = Field(None, min_length=1)
    code: Optional[str] = Field(None, min_length=3, max_length=3)
    iso_code2: Optional[str] = Field(None, min_length=2, max_length=2)
    active: Optional[bool] = None


class CountryFilters(BaseModel):
    """Query descriptor for the country list."""

    name: Optional[str] = None  # Substring match, semantics owned by the server
    code: Optional[str] = None
    active: Optional[bool] = None
    page: Optional[int] = Field(None, ge=0)
    size: Optional[int] = Field(None, ge=1)
