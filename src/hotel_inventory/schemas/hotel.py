"""Hotel request and response schemas.

JSON uses camelCase (rateAvailability, createdAt, contractStart) while Python
code uses snake_case; the alias generator maps between them. Rows from the
store validate straight into HotelResponse via from_attributes.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from hotel_inventory.schemas.pagination import PaginationMeta


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class YearRecord(CamelModel):
    """One calendar year of contract state for a hotel."""

    year: int
    available: bool
    contract_start: str | None = None
    contract_end: str | None = None

    def to_store(self) -> dict[str, Any]:
        """Shape persisted in the rate_availability column."""
        return self.model_dump(by_alias=True, exclude_none=True)


class HotelCreate(CamelModel):
    name: str = Field(min_length=1)
    country: str = Field(min_length=1)
    city: str = Field(min_length=1)
    stars: int | None = None
    rate_availability: list[YearRecord]


class HotelUpdate(CamelModel):
    """Partial update: absent or null fields keep their stored value."""

    name: str | None = Field(default=None, min_length=1)
    country: str | None = Field(default=None, min_length=1)
    city: str | None = Field(default=None, min_length=1)
    stars: int | None = None
    rate_availability: list[YearRecord] | None = None


class HotelResponse(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: str
    name: str
    country: str
    city: str
    stars: int | None = None
    rate_availability: list[YearRecord]
    created_at: datetime
    updated_at: datetime


class HotelListResponse(BaseModel):
    """``{hotels: [...], pagination: {...}}``"""

    hotels: list[HotelResponse]
    pagination: PaginationMeta


class HotelStats(CamelModel):
    total_hotels: int
    unique_countries: int
    unique_cities: int
    available_contracts: int
    unavailable_contracts: int


class OkResponse(BaseModel):
    ok: bool = True
