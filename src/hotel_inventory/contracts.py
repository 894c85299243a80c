"""Contract-status resolution shared by every hotel view.

The listing filter (``contractStatus``) tests exact-year membership in SQL.
Display goes through ``resolve_contract_status`` below, which falls back to
the nearest year when the requested one is missing. The two are deliberately
separate: a hotel with only a 2023 record is excluded by
``contractStatus=available&year=2024`` yet displays as "Available (2023)".
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Protocol, TypeVar


class YearRecordLike(Protocol):
    @property
    def year(self) -> int: ...

    @property
    def available(self) -> bool: ...

    @property
    def contract_start(self) -> str | None: ...

    @property
    def contract_end(self) -> str | None: ...


class StatusKind(StrEnum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    NO_DATA = "noData"


@dataclass(frozen=True)
class ContractStatus:
    label: str
    kind: StatusKind
    tooltip: str
    shown_year: int | None = None
    fallback: bool = False


R = TypeVar("R", bound=YearRecordLike)


def _pick_record(records: Sequence[R], target_year: int) -> tuple[R | None, bool]:
    for record in records:
        if record.year == target_year:
            return record, False
    if not records:
        return None, False
    # Strict comparison: on equal distance the earlier list entry wins.
    nearest = records[0]
    for record in records[1:]:
        if abs(record.year - target_year) < abs(nearest.year - target_year):
            nearest = record
    return nearest, True


def resolve_contract_status(records: Sequence[YearRecordLike], target_year: int) -> ContractStatus:
    """Return the badge for ``records`` as seen from ``target_year``."""
    record, fallback = _pick_record(records, target_year)
    if record is None:
        return ContractStatus(
            label=f"No Data ({target_year})",
            kind=StatusKind.NO_DATA,
            tooltip=f"No contract data for {target_year}",
        )

    shown = record.year
    word = "Available" if record.available else "Unavailable"
    tooltip = f"{word} in {shown}"
    if record.contract_start and record.contract_end:
        tooltip += f" ({record.contract_start} → {record.contract_end})"
    if fallback:
        tooltip += f" (showing {shown}; no data for {target_year})"

    return ContractStatus(
        label=f"{word} ({shown})",
        kind=StatusKind.AVAILABLE if record.available else StatusKind.UNAVAILABLE,
        tooltip=tooltip,
        shown_year=shown,
        fallback=fallback,
    )


def derive_available(contract_start: str | None, contract_end: str | None) -> bool:
    """Availability implied by a contract window: both ISO dates set and start <= end."""
    if not contract_start or not contract_end:
        return False
    try:
        return date.fromisoformat(contract_start) <= date.fromisoformat(contract_end)
    except ValueError:
        return False
