"""InventoryDashboard against the app and against scripted transports."""

import asyncio
from typing import Any

import httpx
import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_inventory.client.api import HotelApi
from hotel_inventory.client.dashboard import InventoryDashboard
from hotel_inventory.client.filters import FilterState
from hotel_inventory.contracts import StatusKind
from hotel_inventory.schemas.hotel import HotelCreate, HotelUpdate, YearRecord


def dashboard_for(client: AsyncClient, **kwargs: Any) -> InventoryDashboard:
    filters = FilterState(current_year=lambda: 2024)
    return InventoryDashboard(HotelApi(client), filters=filters, **kwargs)


def listing(names: list[str], page: int = 1) -> dict[str, Any]:
    return {
        "hotels": [
            {
                "id": name.lower(),
                "name": name,
                "country": "Kenya",
                "city": "Nairobi",
                "rateAvailability": [],
                "createdAt": "2025-01-01T00:00:00Z",
                "updatedAt": "2025-01-01T00:00:00Z",
            }
            for name in names
        ],
        "pagination": {"page": page, "limit": 12, "total": 30, "totalPages": 3},
    }


@pytest.mark.asyncio
async def test_refresh_loads_committed_page(client: AsyncClient, seeded_db: AsyncSession) -> None:
    dash = dashboard_for(client)
    assert await dash.refresh() is True
    assert dash.total == 5
    assert dash.total_pages == 1
    assert [h.name for h in dash.hotels][0] == "Kampala Sheraton"


@pytest.mark.asyncio
async def test_draft_edits_do_not_change_rows_until_applied(
    client: AsyncClient, seeded_db: AsyncSession
) -> None:
    dash = dashboard_for(client)
    await dash.refresh()

    dash.filters.edit(country="Kenya")
    await dash.refresh()
    assert dash.total == 5

    await dash.apply_filters()
    assert dash.page == 1
    assert {h.country for h in dash.hotels} == {"Kenya"}
    assert dash.total == 2

    await dash.clear_filters()
    assert dash.total == 5
    assert dash.filters.committed.year == 2024


@pytest.mark.asyncio
async def test_enter_in_search_fetches_page_one(
    client: AsyncClient, seeded_db: AsyncSession
) -> None:
    dash = dashboard_for(client, page_size=2)
    await dash.go_to_page(3)
    assert dash.page == 3
    assert len(dash.hotels) == 1

    dash.filters.edit(search="serena")
    assert await dash.key_pressed("search", "Enter") is True
    assert dash.page == 1
    assert sorted(h.name for h in dash.hotels) == ["Nairobi Serena", "Serena Beach Resort"]


@pytest.mark.asyncio
async def test_views_share_one_status_per_hotel(
    client: AsyncClient, seeded_db: AsyncSession
) -> None:
    dash = dashboard_for(client)
    await dash.refresh()

    table = {row["id"]: row["status"] for row in dash.table_rows()}
    grid = {tile["id"]: tile["status"] for tile in dash.grid_tiles()}
    cards = {card["id"]: card["status"] for card in dash.cards()}
    assert table == grid == cards

    by_name = {h.name: dash.status_for(h) for h in dash.hotels}
    assert by_name["Serena Beach Resort"].kind is StatusKind.AVAILABLE
    assert by_name["Nairobi Serena"].kind is StatusKind.UNAVAILABLE
    assert by_name["Arusha Coffee Lodge"].label == "Available (2023)"
    assert by_name["Zanzibar Palace"].kind is StatusKind.NO_DATA


@pytest.mark.asyncio
async def test_admin_add_derives_availability_and_refreshes(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    client.headers.update(admin_headers)
    dash = dashboard_for(client)
    await dash.load_session()
    assert dash.is_admin is True

    created = await dash.add_hotel(
        HotelCreate(
            name="Mara Camp",
            country="Kenya",
            city="Narok",
            rate_availability=[
                YearRecord(year=2024, available=False, contract_start="2024-01-01", contract_end="2024-12-31"),
                YearRecord(year=2025, available=True),
            ],
        )
    )
    assert created is not None
    assert [r.available for r in created.rate_availability] == [True, True]
    assert [h.name for h in dash.hotels] == ["Mara Camp"]
    assert dash.notifications[-1].title == "Hotel Added"

    updated = await dash.edit_hotel(created.id, HotelUpdate(stars=3))
    assert updated is not None and updated.stars == 3
    assert dash.hotels[0].stars == 3

    assert await dash.delete_hotel(created.id) is True
    assert dash.hotels == []
    assert dash.notifications[-1].title == "Hotel Deleted"


@pytest.mark.asyncio
async def test_user_role_write_shows_permission_notice(
    client: AsyncClient, user_headers: dict[str, str]
) -> None:
    client.headers.update(user_headers)
    dash = dashboard_for(client)
    await dash.load_session()
    assert dash.is_admin is False

    result = await dash.add_hotel(
        HotelCreate(name="X", country="Y", city="Z", rate_availability=[])
    )
    assert result is None
    assert dash.login_required is False
    assert dash.notifications[-1].title == "Admin required"


@pytest.mark.asyncio
async def test_write_without_session_requires_login(client: AsyncClient) -> None:
    dash = dashboard_for(client)
    assert await dash.delete_hotel("whatever") is False
    assert dash.login_required is True


@pytest.mark.asyncio
async def test_late_response_from_older_fetch_is_discarded() -> None:
    release_first = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params["page"])
        if page == 1:
            await release_first.wait()
            return httpx.Response(200, json=listing(["Old"], page=1))
        return httpx.Response(200, json=listing(["New"], page=page))

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://test"
    ) as http:
        dash = dashboard_for(http)
        first = asyncio.create_task(dash.refresh(page=1))
        await asyncio.sleep(0)

        assert await dash.go_to_page(2) is True
        release_first.set()
        assert await first is False

    assert [h.name for h in dash.hotels] == ["New"]
    assert dash.page == 2


@pytest.mark.asyncio
async def test_fetch_failure_empties_rows_and_notifies() -> None:
    calls = 0

    async def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls == 1:
            return httpx.Response(200, json=listing(["A", "B"]))
        return httpx.Response(
            500, json={"error": {"code": "store_error", "message": "Data store unavailable"}}
        )

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://test"
    ) as http:
        dash = dashboard_for(http)
        assert await dash.refresh() is True
        assert len(dash.hotels) == 2

        assert await dash.refresh() is False

    assert dash.hotels == []
    assert dash.total == 0
    assert dash.notifications[-1].title == "Failed to load hotels"
    assert dash.notifications[-1].variant == "destructive"


@pytest.mark.asyncio
async def test_unauthorized_fetch_flags_login() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"code": "unauthorized", "message": "nope"}})

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://test"
    ) as http:
        dash = dashboard_for(http)
        assert await dash.refresh() is False

    assert dash.login_required is True
    assert dash.notifications == []
