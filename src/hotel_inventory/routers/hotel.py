"""Hotel endpoints.

Listing and stats are open; writes need an admin session.
"""

from fastapi import APIRouter, Query

from hotel_inventory.dependencies import DB, AdminUser, Cache
from hotel_inventory.repositories.hotel import HotelQuery
from hotel_inventory.schemas.hotel import (
    HotelCreate,
    HotelListResponse,
    HotelResponse,
    HotelStats,
    HotelUpdate,
    OkResponse,
)
from hotel_inventory.services import hotel as service

router = APIRouter(prefix="/api/hotels", tags=["hotels"])


@router.get("", response_model=HotelListResponse, response_model_exclude_none=True)
async def list_hotels(
    db: DB,
    cache: Cache,
    # Raw strings: malformed numbers fall back to defaults instead of a 4xx.
    page: str | None = Query(None),
    limit: str | None = Query(None),
    search: str | None = Query(None),
    country: str | None = Query(None),
    city: str | None = Query(None),
    year: str | None = Query(None),
    contract_status: str | None = Query(None, alias="contractStatus"),
) -> HotelListResponse:
    """Filtered, paginated hotels, newest first."""
    query = HotelQuery.from_params(
        search=search,
        country=country,
        city=city,
        year=year,
        contract_status=contract_status,
        page=page,
        limit=limit,
    )
    return await service.get_hotel_listing(db, cache, query)


@router.get("/stats", response_model=HotelStats)
async def hotel_stats(db: DB) -> HotelStats:
    return await service.get_stats(db)


@router.post(
    "", response_model=HotelResponse, response_model_exclude_none=True, status_code=201
)
async def create_hotel(
    payload: HotelCreate, db: DB, cache: Cache, _admin: AdminUser
) -> HotelResponse:
    hotel = await service.create_hotel(db, cache, payload)
    return HotelResponse.model_validate(hotel)


@router.put("/{hotel_id}", response_model=HotelResponse, response_model_exclude_none=True)
async def update_hotel(
    hotel_id: str, payload: HotelUpdate, db: DB, cache: Cache, _admin: AdminUser
) -> HotelResponse:
    hotel = await service.update_hotel(db, cache, hotel_id, payload)
    return HotelResponse.model_validate(hotel)


@router.delete("/{hotel_id}", response_model=OkResponse)
async def delete_hotel(hotel_id: str, db: DB, cache: Cache, _admin: AdminUser) -> OkResponse:
    await service.delete_hotel(db, cache, hotel_id)
    return OkResponse()
