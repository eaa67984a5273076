"""Randomized payloads for the booking lifecycle."""

from datetime import timedelta

from faker import Faker

from booker.config import Settings
from booker.schemas.auth import TokenCreds
from booker.schemas.booking import BookingData, BookingDates, PartialBookingData

ADDITIONAL_NEEDS = (
    "Breakfast", "Lunch", "Dinner", "Brunch", "Late checkout",
    "Airport transfer", "Vegetarian menu", "Champagne", "Extra pillows",
)

MIN_PRICE = 1
MAX_PRICE = 1000
MAX_STAY_NIGHTS = 14


def make_booking(faker: Faker | None = None) -> BookingData:
    faker = faker or Faker()
    checkin = faker.date_between(start_date="today", end_date="+1y")
    checkout = checkin + timedelta(days=faker.random_int(1, MAX_STAY_NIGHTS))
    return BookingData(
        firstname=faker.first_name(),
        lastname=faker.last_name(),
        totalprice=faker.random_int(MIN_PRICE, MAX_PRICE),
        depositpaid=faker.pybool(),
        bookingdates=BookingDates(
            checkin=checkin.isoformat(),
            checkout=checkout.isoformat(),
        ),
        additionalneeds=faker.random_element(ADDITIONAL_NEEDS),
    )


def make_partial_booking(faker: Faker | None = None) -> PartialBookingData:
    faker = faker or Faker()
    return PartialBookingData(
        firstname=faker.first_name(),
        totalprice=faker.random_int(MIN_PRICE, MAX_PRICE),
    )


def make_token_creds(settings: Settings | None = None) -> TokenCreds:
    if settings is None:
        return TokenCreds()
    return TokenCreds(username=settings.username, password=settings.password)


def make_invalid_booking_id(faker: Faker | None = None) -> int:
    """A negative id the service never assigns."""
    faker = faker or Faker()
    return faker.random_int(-100, -1)
