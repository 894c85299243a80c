"""Async HTTP client for the hotel inventory API.

Wraps an ``httpx.AsyncClient`` (so tests can hand in one bound to the ASGI
app) and converts error statuses into the domain exceptions.
"""

from typing import Any

import httpx

from hotel_inventory.client.filters import HotelFilters
from hotel_inventory.exceptions import (
    ERRORS_BY_STATUS,
    DomainError,
    NotFoundError,
    TransientStoreError,
)
from hotel_inventory.schemas.auth import SessionOut
from hotel_inventory.schemas.hotel import HotelListResponse, HotelResponse, HotelStats


def _error_message(response: httpx.Response) -> str:
    try:
        return str(response.json()["error"]["message"])
    except (ValueError, KeyError, TypeError):
        return response.reason_phrase or f"HTTP {response.status_code}"


def raise_for_status(response: httpx.Response, resource: str = "") -> None:
    if response.is_success:
        return
    message = _error_message(response)
    if response.status_code == 404:
        raise NotFoundError("Hotel", resource or response.url.path)
    error_cls = ERRORS_BY_STATUS.get(response.status_code)
    if error_cls is not None:
        raise error_cls(message)
    if response.status_code >= 500:
        raise TransientStoreError(message)
    raise DomainError(message)


class HotelApi:
    def __init__(self, http: httpx.AsyncClient) -> None:
        self.http = http

    async def list_hotels(self, filters: HotelFilters, page: int, limit: int) -> HotelListResponse:
        response = await self.http.get(
            "/api/hotels",
            params=filters.to_params(page, limit),
            headers={"Cache-Control": "no-cache"},
        )
        raise_for_status(response)
        return HotelListResponse.model_validate(response.json())

    async def stats(self) -> HotelStats:
        response = await self.http.get("/api/hotels/stats")
        raise_for_status(response)
        return HotelStats.model_validate(response.json())

    async def create_hotel(self, payload: dict[str, Any]) -> HotelResponse:
        response = await self.http.post("/api/hotels", json=payload)
        raise_for_status(response)
        return HotelResponse.model_validate(response.json())

    async def update_hotel(self, hotel_id: str, payload: dict[str, Any]) -> HotelResponse:
        response = await self.http.put(f"/api/hotels/{hotel_id}", json=payload)
        raise_for_status(response, hotel_id)
        return HotelResponse.model_validate(response.json())

    async def delete_hotel(self, hotel_id: str) -> None:
        response = await self.http.delete(f"/api/hotels/{hotel_id}")
        raise_for_status(response, hotel_id)

    async def register(self, email: str, password: str, role: str | None = None) -> None:
        body: dict[str, str] = {"email": email, "password": password}
        if role is not None:
            body["role"] = role
        raise_for_status(await self.http.post("/api/auth/register", json=body))

    async def login(self, email: str, password: str) -> SessionOut:
        response = await self.http.post(
            "/api/auth/login", json={"email": email, "password": password}
        )
        raise_for_status(response)
        return SessionOut.model_validate(response.json())

    async def logout(self) -> None:
        raise_for_status(await self.http.post("/api/auth/logout"))

    async def me(self) -> SessionOut:
        response = await self.http.get("/api/auth/me")
        raise_for_status(response)
        return SessionOut.model_validate(response.json())
