"""Factory functions for creating model instances in tests."""

from datetime import datetime
from typing import Any

from hotel_inventory.models import Hotel


def year(
    year: int,
    available: bool = True,
    contract_start: str | None = None,
    contract_end: str | None = None,
) -> dict[str, Any]:
    """A stored year record, as it sits in the rate_availability column."""
    record: dict[str, Any] = {"year": year, "available": available}
    if contract_start is not None:
        record["contractStart"] = contract_start
    if contract_end is not None:
        record["contractEnd"] = contract_end
    return record


def make_hotel(
    *,
    name: str = "Serena Beach Resort",
    country: str = "Kenya",
    city: str = "Mombasa",
    stars: int | None = 5,
    rate_availability: list[dict[str, Any]] | None = None,
    created_at: datetime | None = None,
) -> Hotel:
    hotel = Hotel(
        name=name,
        country=country,
        city=city,
        stars=stars,
        rate_availability=rate_availability if rate_availability is not None else [],
    )
    if created_at is not None:
        hotel.created_at = created_at
    return hotel


def hotel_payload(**overrides: Any) -> dict[str, Any]:
    """JSON body for POST /api/hotels."""
    body: dict[str, Any] = {
        "name": "Kilimanjaro Lodge",
        "country": "Tanzania",
        "city": "Arusha",
        "stars": 4,
        "rateAvailability": [
            {
                "year": 2025,
                "available": True,
                "contractStart": "2025-01-01",
                "contractEnd": "2025-12-31",
            }
        ],
    }
    body.update(overrides)
    return body
