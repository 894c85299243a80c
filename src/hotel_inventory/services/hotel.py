"""Hotel business logic.

Reads go through the result cache. Every write clears it once its transaction
commits, so a read racing the write cannot re-cache the old rows. The cache holds fully built response models so a hit costs no database round trip.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from hotel_inventory.cache import ResultCache
from hotel_inventory.db.session import on_commit
from hotel_inventory.exceptions import NotFoundError
from hotel_inventory.logging import get_logger
from hotel_inventory.models import Hotel
from hotel_inventory.repositories import hotel as repo
from hotel_inventory.repositories.hotel import HotelQuery
from hotel_inventory.schemas.hotel import (
    HotelCreate,
    HotelListResponse,
    HotelResponse,
    HotelStats,
    HotelUpdate,
)
from hotel_inventory.schemas.pagination import Paginated, PaginationMeta

logger = get_logger(__name__)

HotelListCache = ResultCache[HotelListResponse]


async def search_hotels(db: AsyncSession, query: HotelQuery) -> Paginated[Hotel]:
    """One page of hotels plus the filtered total (two queries)."""
    items = await repo.list_hotels(db, query)
    total = await repo.count_hotels(db, query)
    return Paginated(items=items, total=total, page=query.page, limit=query.limit)


async def get_hotel_listing(
    db: AsyncSession, cache: HotelListCache, query: HotelQuery
) -> HotelListResponse:
    key = query.cache_key()
    cached = cache.get(key)
    if cached is not None:
        logger.debug("hotel_cache_hit", key=key)
        return cached

    logger.debug("hotel_cache_miss", key=key)
    page = await search_hotels(db, query)
    listing = HotelListResponse(
        hotels=[HotelResponse.model_validate(hotel) for hotel in page.items],
        pagination=PaginationMeta.from_page(page),
    )
    cache.set(key, listing)
    return listing


async def get_stats(db: AsyncSession) -> HotelStats:
    return HotelStats(**await repo.hotel_stats(db))


async def create_hotel(db: AsyncSession, cache: HotelListCache, payload: HotelCreate) -> Hotel:
    hotel = await repo.insert_hotel(
        db,
        {
            "name": payload.name,
            "country": payload.country,
            "city": payload.city,
            "stars": payload.stars,
            "rate_availability": [record.to_store() for record in payload.rate_availability],
        },
    )
    on_commit(db, cache.clear)
    logger.info("hotel_created", hotel_id=hotel.id, name=hotel.name)
    return hotel


async def update_hotel(
    db: AsyncSession, cache: HotelListCache, hotel_id: str, payload: HotelUpdate
) -> Hotel:
    hotel = await repo.get_hotel(db, hotel_id)
    if hotel is None:
        raise NotFoundError("Hotel", hotel_id)

    changes = payload.model_dump(exclude_none=True, exclude={"rate_availability"})
    if payload.rate_availability is not None:
        changes["rate_availability"] = [r.to_store() for r in payload.rate_availability]

    hotel = await repo.update_hotel(db, hotel, changes)
    on_commit(db, cache.clear)
    logger.info("hotel_updated", hotel_id=hotel_id, fields=sorted(changes))
    return hotel


async def delete_hotel(db: AsyncSession, cache: HotelListCache, hotel_id: str) -> None:
    hotel = await repo.get_hotel(db, hotel_id)
    if hotel is None:
        raise NotFoundError("Hotel", hotel_id)
    await repo.delete_hotel(db, hotel)
    on_commit(db, cache.clear)
    logger.info("hotel_deleted", hotel_id=hotel_id)
