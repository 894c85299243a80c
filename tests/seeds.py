"""Reusable seed data fixtures for integration tests."""

from datetime import UTC, datetime, timedelta

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from tests.factories import make_hotel, year

BASE_TIME = datetime(2025, 1, 1, tzinfo=UTC)


@pytest_asyncio.fixture
async def seeded_db(db: AsyncSession) -> AsyncSession:
    """Seed 5 hotels in 3 countries, created one hour apart (oldest first)."""
    hotels = [
        make_hotel(
            name="Serena Beach Resort",
            country="Kenya",
            city="Mombasa",
            stars=5,
            rate_availability=[year(2024, True, "2024-01-01", "2024-12-31"), year(2025, False)],
        ),
        make_hotel(
            name="Nairobi Serena",
            country="Kenya",
            city="Nairobi",
            stars=5,
            rate_availability=[year(2024, False), year(2025, True)],
        ),
        make_hotel(
            name="Arusha Coffee Lodge",
            country="Tanzania",
            city="Arusha",
            stars=4,
            rate_availability=[year(2023, True)],
        ),
        make_hotel(
            name="Zanzibar Palace",
            country="Tanzania",
            city="Stone Town",
            stars=None,
            rate_availability=[],
        ),
        make_hotel(
            name="Kampala Sheraton",
            country="Uganda",
            city="Kampala",
            stars=4,
            rate_availability=[year(2024, True), year(2024, False)],
        ),
    ]
    for offset, hotel in enumerate(hotels):
        hotel.created_at = BASE_TIME + timedelta(hours=offset)
    db.add_all(hotels)
    await db.commit()
    return db
