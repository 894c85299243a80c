"""Hotel data-access layer.

Query building plus plain query functions: no caching, no HTTP concerns.
``list_hotels`` and ``count_hotels`` share ``hotel_filters`` so the total
always describes the same rows the page was cut from.
"""

import json
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any

from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_inventory.config import settings
from hotel_inventory.db.expressions import has_year_record, year_record_count
from hotel_inventory.models import Hotel

CONTRACT_STATUSES = ("all", "available", "unavailable")

# Calendar years the store can compare against.
MIN_YEAR, MAX_YEAR = 1, 9999
# Keeps (page - 1) * limit inside a signed 64-bit OFFSET for any clamped limit.
MAX_PAGE = 2**31 - 1


def _to_int(value: object, default: int, low: int, high: int | None = None) -> int:
    """Parse ``value``; anything unparseable or outside [low, high] is ``default``."""
    if value is None or isinstance(value, bool):
        return default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return default
    if parsed < low or (high is not None and parsed > high):
        return default
    return parsed


@dataclass(frozen=True)
class HotelQuery:
    """Normalized filter and pagination request for the hotel listing."""

    search: str = ""
    country: str = ""
    city: str = ""
    year: int = 0
    contract_status: str = "all"
    page: int = 1
    limit: int = 12

    @classmethod
    def from_params(
        cls,
        *,
        search: str | None = None,
        country: str | None = None,
        city: str | None = None,
        year: object = None,
        contract_status: str | None = None,
        page: object = None,
        limit: object = None,
        max_limit: int | None = None,
        default_limit: int | None = None,
    ) -> "HotelQuery":
        """Build a query from raw request values.

        Malformed or out-of-range numbers fall back to defaults instead of
        failing: page 1, the configured page size, the current calendar year.
        A positive ``limit`` above ``max_limit`` is clamped to it.
        """
        max_limit = max_limit or settings.hotels_max_limit
        default_limit = default_limit or settings.hotels_default_limit

        parsed_page = _to_int(page, 1, 1, MAX_PAGE)
        # a limit above the maximum is clamped, not reset
        parsed_limit = min(_to_int(limit, default_limit, 1), max_limit)
        status = (contract_status or "all").strip().lower()

        return cls(
            search=(search or "").strip(),
            country=(country or "").strip(),
            city=(city or "").strip(),
            year=_to_int(year, date.today().year, MIN_YEAR, MAX_YEAR),
            contract_status=status if status in CONTRACT_STATUSES else "all",
            page=parsed_page,
            limit=parsed_limit,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def cache_key(self) -> str:
        return json.dumps(asdict(self), sort_keys=True)


def hotel_filters(query: HotelQuery) -> list[ColumnElement[bool]]:
    """Predicates for ``query``, without ordering or paging."""
    clauses: list[ColumnElement[bool]] = []
    if query.search:
        clauses.append(
            or_(
                Hotel.name.icontains(query.search, autoescape=True),
                Hotel.city.icontains(query.search, autoescape=True),
                Hotel.country.icontains(query.search, autoescape=True),
            )
        )
    if query.country:
        clauses.append(Hotel.country == query.country)
    if query.city:
        clauses.append(Hotel.city == query.city)
    if query.contract_status != "all":
        # Exact-year membership; no nearest-year fallback here.
        clauses.append(
            has_year_record(
                Hotel.rate_availability, query.year, query.contract_status == "available"
            )
        )
    return clauses


async def list_hotels(db: AsyncSession, query: HotelQuery) -> list[Hotel]:
    """Return one page of matching hotels, newest first."""
    stmt = (
        select(Hotel)
        .where(*hotel_filters(query))
        .order_by(Hotel.created_at.desc(), Hotel.id)
        .offset(query.offset)
        .limit(query.limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_hotels(db: AsyncSession, query: HotelQuery) -> int:
    """Return the number of hotels matching ``query``'s filters."""
    stmt = select(func.count()).select_from(Hotel).where(*hotel_filters(query))
    result = await db.execute(stmt)
    return result.scalar_one()


async def get_hotel(db: AsyncSession, hotel_id: str) -> Hotel | None:
    return await db.get(Hotel, hotel_id)


async def insert_hotel(db: AsyncSession, values: dict[str, Any]) -> Hotel:
    hotel = Hotel(**values)
    db.add(hotel)
    await db.flush()
    # load server-generated timestamps
    await db.refresh(hotel)
    return hotel


async def update_hotel(db: AsyncSession, hotel: Hotel, values: dict[str, Any]) -> Hotel:
    for field, value in values.items():
        setattr(hotel, field, value)
    # a write with no changed columns still counts as a mutation
    hotel.updated_at = func.now()
    await db.flush()
    await db.refresh(hotel)
    return hotel


async def delete_hotel(db: AsyncSession, hotel: Hotel) -> None:
    await db.delete(hotel)
    await db.flush()


async def hotel_stats(db: AsyncSession) -> dict[str, int]:
    """Inventory-wide counts; contract counts total every year record."""
    records = Hotel.rate_availability
    row = (
        await db.execute(
            select(
                func.count(Hotel.id),
                func.count(func.distinct(Hotel.country)),
                func.count(func.distinct(Hotel.city)),
                func.coalesce(func.sum(year_record_count(records, True)), 0),
                func.coalesce(func.sum(year_record_count(records, False)), 0),
            )
        )
    ).one()

    return {
        "total_hotels": row[0],
        "unique_countries": row[1],
        "unique_cities": row[2],
        "available_contracts": int(row[3]),
        "unavailable_contracts": int(row[4]),
    }
