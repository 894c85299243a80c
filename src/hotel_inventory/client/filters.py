"""Staged filter editing.

``FilterState`` keeps two filter sets. ``draft`` takes every edit; ``committed``
only changes on apply, clear or an external sync, and is the only one a fetch
may read. That keeps keystrokes from turning into requests.
"""

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal

ContractStatusFilter = Literal["all", "available", "unavailable"]


def _current_year() -> int:
    return date.today().year


@dataclass(frozen=True)
class HotelFilters:
    search: str = ""
    country: str = ""
    city: str = ""
    year: int = field(default_factory=_current_year)
    contract_status: ContractStatusFilter = "all"

    def to_params(self, page: int, limit: int) -> dict[str, str]:
        """Query string for GET /api/hotels."""
        return {
            "page": str(page),
            "limit": str(limit),
            "search": self.search,
            "country": self.country,
            "city": self.city,
            "year": str(self.year),
            "contractStatus": self.contract_status,
        }


class FilterState:
    """Draft/committed filter pair.

    ``on_commit``, when given, is called with the new committed filters after
    apply and clear. InventoryDashboard does not set it: it fetches page 1
    itself after calling apply or clear.
    """

    def __init__(
        self,
        committed: HotelFilters | None = None,
        on_commit: Callable[[HotelFilters], Any] | None = None,
        current_year: Callable[[], int] = _current_year,
    ) -> None:
        self._current_year = current_year
        self.committed = committed or self.defaults()
        self.draft = self.committed
        self.on_commit = on_commit

    def defaults(self) -> HotelFilters:
        return HotelFilters(year=self._current_year())

    def edit(self, **changes: Any) -> HotelFilters:
        """Change draft fields only."""
        self.draft = dataclasses.replace(self.draft, **changes)
        return self.draft

    def apply(self) -> HotelFilters:
        self.committed = self.draft
        self._notify()
        return self.committed

    def clear(self) -> HotelFilters:
        self.committed = self.draft = self.defaults()
        self._notify()
        return self.committed

    def sync(self, committed: HotelFilters) -> None:
        """External change to the committed set; the draft follows it."""
        self.committed = self.draft = committed

    def key_pressed(self, field_name: str, key: str) -> bool:
        """Enter in the search box applies the draft. Returns True when it did."""
        if field_name == "search" and key == "Enter":
            self.apply()
            return True
        return False

    @property
    def dirty(self) -> bool:
        return self.draft != self.committed

    def _notify(self) -> None:
        if self.on_commit is not None:
            self.on_commit(self.committed)
