from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# "HH:MM" or "HH:MM:SS"; kept as strings and matched exactly
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$"


def _check_window(start_time: str, end_time: str) -> None:
    # compare on a common HH:MM:SS form; the stored strings stay as given
    def norm(t: str) -> str:
        return t if len(t) == 8 else f"{t}:00"

    if norm(end_time) <= norm(start_time):
        raise ValueError("end_time must be after start_time")


# -----------------------------
# SLOT (availability)
# -----------------------------

class SlotIn(BaseModel):
    photographer_id: int
    date: date
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)

    @model_validator(mode="after")
    def _window(self):
        _check_window(self.start_time, self.end_time)
        return self


class SlotOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    photographer_id: int
    date: date
    start_time: str
    end_time: str
    is_booked: bool


# -----------------------------
# BOOKING
# -----------------------------

class BookingIn(BaseModel):
    photographer_id: int
    date: date
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)
    category_id: Optional[int] = None
    location: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = Field(None, max_length=2000)
    # minor currency units
    total_amount: int = Field(gt=0)

    @model_validator(mode="after")
    def _window(self):
        _check_window(self.start_time, self.end_time)
        return self


class PartyOut(BaseModel):
    id: int
    name: str


class BookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    photographer_id: int
    category_id: Optional[int] = None
    date: date
    start_time: str
    end_time: str
    location: Optional[str] = None
    notes: Optional[str] = None
    total_amount: int
    currency: str
    status: str
    payment_intent_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    customer: Optional[PartyOut] = None
    photographer: Optional[PartyOut] = None


class BookingCreatedOut(BaseModel):
    booking: BookingOut
    client_secret: Optional[str] = None


class StatusIn(BaseModel):
    # validated by the workflow so that an unknown value is an "Invalid status"
    status: str


class PaymentIntentIn(BaseModel):
    booking_id: int


class PaymentIntentOut(BaseModel):
    client_secret: Optional[str] = None
