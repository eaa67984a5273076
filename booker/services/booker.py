import logging
from typing import Any

import httpx
from pydantic import BaseModel

from booker.config import Settings
from booker.exceptions.custom import TransportError
from booker.schemas.auth import TokenCreds
from booker.schemas.booking import BookingData, PartialBookingData

logger = logging.getLogger(__name__)

PING_PATH = "/ping"
AUTH_PATH = "/auth"
BOOKING_PATH = "/booking"
BOOKING_ITEM_PATH = "/booking/{booking_id}"

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def build_client(settings: Settings) -> httpx.AsyncClient:
    """Client bound to the configured Restful Booker instance."""
    return httpx.AsyncClient(
        base_url=settings.base_url,
        headers=DEFAULT_HEADERS,
        timeout=settings.timeout,
    )


def _cookie(token: str) -> dict[str, str]:
    return {"Cookie": f"token={token}"}


class BookerService:
    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def _send(
        self,
        method: str,
        path: str,
        *,
        body: BaseModel | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            resp = await self._client.request(
                method,
                path,
                json=body.model_dump(mode="json") if body is not None else None,
                params=params,
                headers=headers,
            )
        except httpx.TransportError as exc:
            logger.error("%s %s transport failure: %s", method, path, exc)
            raise TransportError(str(exc) or type(exc).__name__, method, path) from exc

        logger.debug("%s %s -> %d", method, path, resp.status_code)
        return resp

    async def ping(self) -> httpx.Response:
        return await self._send("GET", PING_PATH)

    async def create_token(self, creds: TokenCreds) -> httpx.Response:
        return await self._send("POST", AUTH_PATH, body=creds)

    async def create_booking(self, booking: BookingData) -> httpx.Response:
        return await self._send("POST", BOOKING_PATH, body=booking)

    async def get_booking(self, booking_id: int) -> httpx.Response:
        return await self._send("GET", BOOKING_ITEM_PATH.format(booking_id=booking_id))

    async def get_booking_ids(
        self,
        firstname: str | None = None,
        lastname: str | None = None,
        checkin: str | None = None,
        checkout: str | None = None,
    ) -> httpx.Response:
        """List booking ids, optionally filtered by name or dates."""
        filters = {
            "firstname": firstname,
            "lastname": lastname,
            "checkin": checkin,
            "checkout": checkout,
        }
        params = {k: v for k, v in filters.items() if v is not None}
        return await self._send("GET", BOOKING_PATH, params=params or None)

    async def update_booking(
        self, booking_id: int, booking: BookingData, token: str,
    ) -> httpx.Response:
        return await self._send(
            "PUT",
            BOOKING_ITEM_PATH.format(booking_id=booking_id),
            body=booking,
            headers=_cookie(token),
        )

    async def partial_update_booking(
        self, booking_id: int, partial: PartialBookingData, token: str,
    ) -> httpx.Response:
        return await self._send(
            "PATCH",
            BOOKING_ITEM_PATH.format(booking_id=booking_id),
            body=partial,
            headers=_cookie(token),
        )

    async def delete_booking(self, booking_id: int, token: str) -> httpx.Response:
        return await self._send(
            "DELETE",
            BOOKING_ITEM_PATH.format(booking_id=booking_id),
            headers=_cookie(token),
        )
