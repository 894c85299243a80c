"""Inventory dashboard state.

Holds what the browser dashboard holds: committed/draft filters, the current
page of rows, totals, notifications and whether the user must log in again.

Fetches are numbered. Only the response to the most recently issued fetch is
applied; an older one that resolves late is dropped, so rapid page clicks
cannot leave the view showing an earlier page.
"""

from dataclasses import dataclass
from typing import Any, Literal

import httpx

from hotel_inventory.client.api import HotelApi
from hotel_inventory.client.filters import FilterState
from hotel_inventory.contracts import ContractStatus, derive_available, resolve_contract_status
from hotel_inventory.exceptions import AuthenticationError, AuthorizationError, DomainError
from hotel_inventory.logging import get_logger
from hotel_inventory.schemas.hotel import HotelCreate, HotelResponse, HotelStats, HotelUpdate, YearRecord

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 12


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


def with_derived_availability(records: list[YearRecord]) -> list[YearRecord]:
    """Recompute ``available`` for records whose contract window is complete."""
    return [
        record.model_copy(
            update={"available": derive_available(record.contract_start, record.contract_end)}
        )
        if record.contract_start and record.contract_end
        else record
        for record in records
    ]


class InventoryDashboard:
    def __init__(
        self,
        api: HotelApi,
        *,
        filters: FilterState | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.api = api
        self.filters = filters or FilterState()
        self.page = 1
        self.page_size = page_size
        self.hotels: list[HotelResponse] = []
        self.total = 0
        self.total_pages = 0
        self.stats: HotelStats | None = None
        self.notifications: list[Notification] = []
        self.login_required = False
        # UI hint only; the server checks the role on every write
        self.is_admin = False
        self._issued = 0

    # -- fetching ---------------------------------------------------------

    async def refresh(self, page: int | None = None) -> bool:
        """Fetch the current page with the committed filters.

        Returns True when the response was applied, False when it failed or
        was superseded by a newer fetch.
        """
        if page is not None:
            self.page = max(page, 1)
        self._issued += 1
        seq = self._issued

        try:
            listing = await self.api.list_hotels(self.filters.committed, self.page, self.page_size)
        except AuthenticationError:
            if seq == self._issued:
                self.login_required = True
            return False
        except (DomainError, httpx.HTTPError) as exc:
            if seq != self._issued:
                return False
            logger.warning("hotel_fetch_failed", error=str(exc), page=self.page)
            self.hotels, self.total, self.total_pages = [], 0, 0
            self.notify(
                "Failed to load hotels",
                "Could not fetch data from the server. Please try again later.",
                destructive=True,
            )
            return False

        if seq != self._issued:
            logger.debug("stale_response_discarded", seq=seq, latest=self._issued)
            return False

        self.hotels = listing.hotels
        self.total = listing.pagination.total
        self.total_pages = listing.pagination.total_pages
        return True

    async def load_stats(self) -> HotelStats | None:
        try:
            self.stats = await self.api.stats()
        except (DomainError, httpx.HTTPError) as exc:
            logger.warning("stats_fetch_failed", error=str(exc))
        return self.stats

    async def apply_filters(self) -> bool:
        self.filters.apply()
        return await self.refresh(page=1)

    async def clear_filters(self) -> bool:
        self.filters.clear()
        return await self.refresh(page=1)

    async def key_pressed(self, field_name: str, key: str) -> bool:
        if self.filters.key_pressed(field_name, key):
            return await self.refresh(page=1)
        return False

    async def go_to_page(self, page: int) -> bool:
        return await self.refresh(page=page)

    # -- session ----------------------------------------------------------

    async def load_session(self) -> None:
        """Ask the server who we are; only its answer sets the admin hint."""
        try:
            session = await self.api.me()
        except AuthenticationError:
            self.is_admin = False
            return
        self.is_admin = session.user.role == "admin"

    async def login(self, email: str, password: str) -> bool:
        try:
            session = await self.api.login(email, password)
        except AuthenticationError:
            self.notify("Login failed", "Invalid email or password.", destructive=True)
            return False
        self.login_required = False
        self.is_admin = session.user.role == "admin"
        return True

    async def logout(self) -> None:
        await self.api.logout()
        self.is_admin = False

    # -- writes -----------------------------------------------------------

    async def add_hotel(self, hotel: HotelCreate) -> HotelResponse | None:
        payload = hotel.model_copy(
            update={"rate_availability": with_derived_availability(hotel.rate_availability)}
        )
        created = await self._write(
            "add", self.api.create_hotel, payload.model_dump(by_alias=True, exclude_none=True)
        )
        if created is not None:
            await self.refresh()
            self.notify("Hotel Added", f"{created.name} has been added to the inventory.")
        return created

    async def edit_hotel(self, hotel_id: str, changes: HotelUpdate) -> HotelResponse | None:
        if changes.rate_availability is not None:
            changes = changes.model_copy(
                update={"rate_availability": with_derived_availability(changes.rate_availability)}
            )
        updated = await self._write(
            "edit",
            self.api.update_hotel,
            hotel_id,
            changes.model_dump(by_alias=True, exclude_none=True),
        )
        if updated is not None:
            self.hotels = [updated if h.id == hotel_id else h for h in self.hotels]
            self.notify("Hotel Updated", f"{updated.name} has been updated.")
        return updated

    async def delete_hotel(self, hotel_id: str) -> bool:
        name = next((h.name for h in self.hotels if h.id == hotel_id), hotel_id)
        if await self._write("delete", self._delete, hotel_id) is None:
            return False
        await self.refresh()
        self.notify("Hotel Deleted", f"{name} has been removed from the inventory.", destructive=True)
        return True

    async def _delete(self, hotel_id: str) -> bool:
        await self.api.delete_hotel(hotel_id)
        return True

    async def _write(self, action: str, call: Any, *args: Any) -> Any:
        """Run one write; failures become notifications and are not retried."""
        try:
            return await call(*args)
        except AuthenticationError:
            self.login_required = True
            self.notify("Login required", f"Please log in to {action} hotels.", destructive=True)
        except AuthorizationError:
            self.notify("Admin required", f"Only admins can {action} hotels.", destructive=True)
        except (DomainError, httpx.HTTPError) as exc:
            logger.warning("hotel_write_failed", action=action, error=str(exc))
            self.notify(
                f"{action.capitalize()} failed",
                f"Could not {action} hotel. Please try again later.",
                destructive=True,
            )
        return None

    # -- view models ------------------------------------------------------

    def status_for(self, hotel: HotelResponse) -> ContractStatus:
        """Badge for ``hotel`` at the committed year; every view goes through here."""
        return resolve_contract_status(hotel.rate_availability, self.filters.committed.year)

    def table_rows(self) -> list[dict[str, Any]]:
        return [
            {
                "id": h.id,
                "name": h.name,
                "location": f"{h.city}, {h.country}",
                "stars": h.stars,
                "status": self.status_for(h),
            }
            for h in self.hotels
        ]

    def grid_tiles(self) -> list[dict[str, Any]]:
        return [{"id": h.id, "title": h.name, "status": self.status_for(h)} for h in self.hotels]

    def cards(self) -> list[dict[str, Any]]:
        return [
            {
                "id": h.id,
                "title": h.name,
                "subtitle": f"{h.city}, {h.country}",
                "stars": h.stars,
                "years": sorted({r.year for r in h.rate_availability}),
                "status": self.status_for(h),
            }
            for h in self.hotels
        ]

    def notify(self, title: str, description: str, *, destructive: bool = False) -> None:
        self.notifications.append(
            Notification(title, description, "destructive" if destructive else "default")
        )
