import itertools
import json
import secrets

import httpx
import pytest
import respx
from httpx import Response

from booker.config import DEFAULT_BASE_URL, Settings, configure_logging
from booker.services.booker import BookerService, build_client

pytest_plugins = ("booker.ordering", "pytester")

BOOKING_ITEM = r"^/booking/(?P<booking_id>-?\d+)$"


class FakeBooker:
    """In-memory Restful Booker, answering with the real service's status codes."""

    def __init__(self, username: str = "admin", password: str = "password123"):
        self.bookings: dict[int, dict] = {}
        self.tokens: set[str] = set()
        self._ids = itertools.count(1)
        self._creds = (username, password)

    def mount(self, router: respx.MockRouter, host: str) -> None:
        router.get(host=host, path="/ping").mock(side_effect=self.ping)
        router.post(host=host, path="/auth").mock(side_effect=self.auth)
        router.post(host=host, path="/booking").mock(side_effect=self.create)
        router.get(host=host, path="/booking").mock(side_effect=self.list_ids)
        router.get(host=host, path__regex=BOOKING_ITEM).mock(side_effect=self.get)
        router.put(host=host, path__regex=BOOKING_ITEM).mock(side_effect=self.update)
        router.patch(host=host, path__regex=BOOKING_ITEM).mock(side_effect=self.patch)
        router.delete(host=host, path__regex=BOOKING_ITEM).mock(side_effect=self.delete)

    def _authorized(self, request: httpx.Request) -> bool:
        for part in request.headers.get("cookie", "").split(";"):
            name, _, value = part.strip().partition("=")
            if name == "token" and value in self.tokens:
                return True
        return False

    def ping(self, request):
        return Response(201, text="Created")

    def auth(self, request):
        body = json.loads(request.content)
        if (body.get("username"), body.get("password")) != self._creds:
            return Response(200, json={"reason": "Bad credentials"})
        token = secrets.token_hex(8)
        self.tokens.add(token)
        return Response(200, json={"token": token})

    def create(self, request):
        booking = json.loads(request.content)
        booking_id = next(self._ids)
        self.bookings[booking_id] = booking
        return Response(200, json={"bookingid": booking_id, "booking": booking})

    def list_ids(self, request):
        params = request.url.params
        hits = [
            booking_id
            for booking_id, booking in self.bookings.items()
            if all(booking.get(key) == params[key] for key in ("firstname", "lastname") if key in params)
        ]
        return Response(200, json=[{"bookingid": booking_id} for booking_id in hits])

    def get(self, request, booking_id):
        booking = self.bookings.get(int(booking_id))
        if booking is None:
            return Response(404, text="Not Found")
        return Response(200, json=booking)

    def update(self, request, booking_id):
        if not self._authorized(request):
            return Response(403, text="Forbidden")
        if int(booking_id) not in self.bookings:
            return Response(405, text="Method Not Allowed")
        booking = json.loads(request.content)
        self.bookings[int(booking_id)] = booking
        return Response(200, json=booking)

    def patch(self, request, booking_id):
        if not self._authorized(request):
            return Response(403, text="Forbidden")
        if int(booking_id) not in self.bookings:
            return Response(405, text="Method Not Allowed")
        booking = self.bookings[int(booking_id)]
        booking.update(json.loads(request.content))
        return Response(200, json=booking)

    def delete(self, request, booking_id):
        if not self._authorized(request):
            return Response(403, text="Forbidden")
        if self.bookings.pop(int(booking_id), None) is None:
            return Response(405, text="Method Not Allowed")
        return Response(201, text="Created")


def pytest_configure(config):
    configure_logging(Settings())


@pytest.fixture(scope="session")
def settings() -> Settings:
    return Settings()


@pytest.fixture
def fake_booker():
    """FakeBooker on the default host, for unit tests."""
    fake = FakeBooker()
    with respx.mock(assert_all_called=False) as router:
        fake.mount(router, httpx.URL(DEFAULT_BASE_URL).host)
        yield fake


@pytest.fixture(scope="module")
def booker_backend(settings):
    """Replay backend for a lifecycle module; None when running live."""
    if settings.live:
        yield None
        return
    fake = FakeBooker(settings.username, settings.password)
    with respx.mock(assert_all_called=False) as router:
        fake.mount(router, httpx.URL(settings.base_url).host)
        yield fake


@pytest.fixture
async def booker(settings):
    async with build_client(settings) as client:
        yield BookerService(client)
