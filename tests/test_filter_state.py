"""Draft/committed filter state machine."""

from hotel_inventory.client.filters import FilterState, HotelFilters


def make_state() -> tuple[FilterState, list[HotelFilters]]:
    commits: list[HotelFilters] = []
    state = FilterState(on_commit=commits.append, current_year=lambda: 2025)
    return state, commits


def test_starts_with_defaults() -> None:
    state, _ = make_state()
    assert state.committed == HotelFilters(year=2025)
    assert state.draft == state.committed
    assert not state.dirty


def test_edits_touch_draft_only() -> None:
    state, commits = make_state()
    state.edit(search="serena")
    state.edit(country="Kenya", contract_status="available")

    assert state.draft == HotelFilters(
        search="serena", country="Kenya", year=2025, contract_status="available"
    )
    assert state.committed == HotelFilters(year=2025)
    assert state.dirty
    assert commits == []


def test_apply_commits_draft() -> None:
    state, commits = make_state()
    state.edit(city="Arusha", year=2024)
    committed = state.apply()

    assert committed == HotelFilters(city="Arusha", year=2024)
    assert state.committed == state.draft
    assert commits == [committed]


def test_clear_resets_both_to_defaults() -> None:
    state, commits = make_state()
    state.edit(search="x", year=2023)
    state.apply()
    state.edit(city="draft-only")

    state.clear()
    assert state.committed == state.draft == HotelFilters(year=2025)
    assert commits[-1] == HotelFilters(year=2025)


def test_external_sync_overwrites_draft_without_commit_callback() -> None:
    state, commits = make_state()
    state.edit(search="unsaved")
    external = HotelFilters(country="Uganda", year=2022)

    state.sync(external)
    assert state.draft == state.committed == external
    assert commits == []


def test_enter_in_search_applies() -> None:
    state, commits = make_state()
    state.edit(search="lodge")

    assert state.key_pressed("search", "a") is False
    assert state.key_pressed("city", "Enter") is False
    assert commits == []

    assert state.key_pressed("search", "Enter") is True
    assert state.committed.search == "lodge"
    assert len(commits) == 1


def test_to_params_uses_wire_names() -> None:
    filters = HotelFilters(search="s", country="c", city="t", year=2024, contract_status="unavailable")
    assert filters.to_params(page=2, limit=12) == {
        "page": "2",
        "limit": "12",
        "search": "s",
        "country": "c",
        "city": "t",
        "year": "2024",
        "contractStatus": "unavailable",
    }
