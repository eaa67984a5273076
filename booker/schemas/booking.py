from datetime import date

from typing import Annotated

from pydantic import BaseModel, Field, StrictInt, model_validator


class BookingDates(BaseModel):
    model_config = {"frozen": True}

    checkin: str  # YYYY-MM-DD
    checkout: str  # YYYY-MM-DD

    @model_validator(mode="after")
    def checkout_not_before_checkin(self):
        if date.fromisoformat(self.checkout) < date.fromisoformat(self.checkin):
            raise ValueError("checkout must not be before checkin")
        return self


class BookingData(BaseModel):
    model_config = {"frozen": True}

    firstname: str
    lastname: str
    totalprice: int
    depositpaid: bool
    bookingdates: BookingDates
    additionalneeds: str


class PartialBookingData(BaseModel):
    model_config = {"frozen": True}

    firstname: str
    totalprice: int


class CreatedBooking(BaseModel):
    bookingid: Annotated[StrictInt, Field(gt=0)]
    booking: BookingData


class BookingRef(BaseModel):
    bookingid: int
