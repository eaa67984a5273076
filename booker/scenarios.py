"""The booking lifecycle, one coroutine per step.

A ``BookingScenario`` is shared by the ordered lifecycle tests. Its booking id
is written once by ``create`` and read by every later step. Each step checks
the current ``BookingState``, performs one interaction, asserts the response,
and only then advances the state.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from booker.assertions import expect
from booker.config import Settings
from booker.exceptions.custom import FieldMismatch, ScenarioStateError
from booker.factories import (
    make_booking,
    make_invalid_booking_id,
    make_partial_booking,
    make_token_creds,
)
from booker.schemas.auth import TokenCreds
from booker.schemas.booking import BookingData, BookingRef, CreatedBooking, PartialBookingData
from booker.services.auth import AuthService
from booker.services.booker import BookerService

logger = logging.getLogger(__name__)


class BookingState(StrEnum):
    unset = "unset"
    created = "created"
    present = "present"
    updated = "updated"
    patched = "patched"
    deleted = "deleted"
    absent = "absent"


# States in which the booking still exists on the server.
_LIVE = (BookingState.created, BookingState.present, BookingState.updated, BookingState.patched)
_GONE = (BookingState.deleted, BookingState.absent)

# Dependency edges of the ordered lifecycle. No required step waits on `search`.
LIFECYCLE_EDGES: dict[str, tuple[str, ...]] = {
    "create": (),
    "read": ("create",),
    "search": ("create",),
    "update": ("create", "read"),
    "partial_update": ("update",),
    "delete": ("create", "read", "update", "partial_update"),
    "confirm_deleted": ("delete",),
    "double_delete": ("delete",),
}


class BookingScenario:
    def __init__(
        self,
        new_booking: BookingData,
        updated_booking: BookingData,
        partial_booking: PartialBookingData,
        token_creds: TokenCreds,
    ) -> None:
        self.new_booking = new_booking
        self.updated_booking = updated_booking
        self.partial_booking = partial_booking
        self.token_creds = token_creds
        self.state = BookingState.unset
        self._booking_id: int | None = None

    @classmethod
    def fresh(cls, settings: Settings | None = None) -> BookingScenario:
        return cls(
            new_booking=make_booking(),
            updated_booking=make_booking(),
            partial_booking=make_partial_booking(),
            token_creds=make_token_creds(settings),
        )

    @property
    def booking_id(self) -> int:
        if self._booking_id is None:
            raise ScenarioStateError("booking id is not set; create has not succeeded")
        return self._booking_id

    def _record_booking_id(self, booking_id: int) -> None:
        if self._booking_id is not None:
            raise ScenarioStateError(
                f"booking id already set to {self._booking_id}, refusing {booking_id}"
            )
        self._booking_id = booking_id

    def _require(self, step: str, *allowed: BookingState) -> None:
        if self.state not in allowed:
            raise ScenarioStateError(
                f"{step} not allowed in state {self.state}; "
                f"expected one of {', '.join(allowed)}"
            )

    def _advance(self, state: BookingState) -> None:
        logger.info("Booking %s: %s -> %s", self._booking_id, self.state, state)
        self.state = state

    async def _token(self, booker: BookerService) -> str:
        return await AuthService(booker).acquire_token(self.token_creds)

    async def create(self, booker: BookerService) -> int:
        self._require("create", BookingState.unset)
        resp = await booker.create_booking(self.new_booking)

        check = expect(resp).status(200).not_null("bookingid")
        check.fields(self.new_booking.model_dump(mode="json"), prefix="booking")
        created = check.parse(CreatedBooking)

        self._record_booking_id(created.bookingid)
        self._advance(BookingState.created)
        return created.bookingid

    async def read(self, booker: BookerService) -> None:
        self._require("read", BookingState.created, BookingState.present)
        resp = await booker.get_booking(self.booking_id)

        expect(resp).status(200).fields(self.new_booking.model_dump(mode="json"))
        self._advance(BookingState.present)

    async def search(self, booker: BookerService) -> None:
        """The created booking is listed when filtering by its guest name."""
        self._require("search", BookingState.created, BookingState.present)
        resp = await booker.get_booking_ids(
            firstname=self.new_booking.firstname,
            lastname=self.new_booking.lastname,
        )

        check = expect(resp).status(200)
        listed = [ref.bookingid for ref in check.parse(list[BookingRef])]
        if self.booking_id not in listed:
            check.fail(FieldMismatch("bookingid", self.booking_id, listed))

    async def update(self, booker: BookerService) -> None:
        self._require("update", BookingState.created, BookingState.present)
        token = await self._token(booker)
        resp = await booker.update_booking(self.booking_id, self.updated_booking, token)

        expect(resp).status(200).fields(self.updated_booking.model_dump(mode="json"))
        self._advance(BookingState.updated)

    async def partial_update(self, booker: BookerService) -> None:
        self._require("partial update", BookingState.updated)
        token = await self._token(booker)
        resp = await booker.partial_update_booking(self.booking_id, self.partial_booking, token)

        merged = self.updated_booking.model_dump(mode="json")
        merged.update(self.partial_booking.model_dump(mode="json"))
        expect(resp).status(200).fields(merged)
        self._advance(BookingState.patched)

    async def delete(self, booker: BookerService) -> None:
        self._require("delete", *_LIVE)
        token = await self._token(booker)
        resp = await booker.delete_booking(self.booking_id, token)

        expect(resp).status(201)
        self._advance(BookingState.deleted)

    async def confirm_deleted(self, booker: BookerService) -> None:
        self._require("confirm deleted", *_GONE)
        resp = await booker.get_booking(self.booking_id)

        expect(resp).status(404)
        self._advance(BookingState.absent)

    async def double_delete(self, booker: BookerService) -> None:
        self._require("double delete", *_GONE)
        token = await self._token(booker)
        resp = await booker.delete_booking(self.booking_id, token)

        expect(resp).status(405)


async def read_invalid_id(booker: BookerService, booking_id: int | None = None) -> int:
    """GET a negative id and expect 404. Touches no shared state."""
    if booking_id is None:
        booking_id = make_invalid_booking_id()
    if booking_id >= 0:
        raise ValueError(f"invalid booking id must be negative, got {booking_id}")
    resp = await booker.get_booking(booking_id)
    expect(resp).status(404)
    return booking_id


async def health_check(booker: BookerService) -> None:
    resp = await booker.ping()
    expect(resp).status(201)
