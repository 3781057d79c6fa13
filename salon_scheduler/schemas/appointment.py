import re
from datetime import date as Date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TIME_SLOT_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
CALENDAR_DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
MAX_PRICE = 100_000_000

def normalize_calendar_date(value) -> Date:
    """Reduce a date-ish value to its calendar day.

    Accepts ``date`` objects, ``datetime`` objects and strings whose first ten
    characters are ``YYYY-MM-DD`` (e.g. ``2025-11-03T00:00:00.000Z``). The
    time-of-day and offset, if any, are dropped rather than converted.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, Date):
        return value
    if not isinstance(value, str):
        raise ValueError("date must be a YYYY-MM-DD string")

    value = value.strip()
    head, tail = value[:10], value[10:]
    if not CALENDAR_DATE_PATTERN.match(head) or (tail and tail[0] not in "T "):
        raise ValueError("date must be in YYYY-MM-DD format")
    try:
        return datetime.strptime(head, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError("date must be in YYYY-MM-DD format")

class AppointmentDraft(BaseModel):
    """Appointment payload without an identity, used for create and update."""

    client: str = Field(..., max_length=255)
    phone: str = Field("", max_length=50)
    service: str = Field(..., max_length=255)
    date: Date
    time: str
    employee: str = Field(..., max_length=255)
    notes: Optional[str] = None
    # NUMERIC(10, 2) holds at most eight integer digits
    price: Optional[float] = Field(None, ge=0, lt=MAX_PRICE, allow_inf_nan=False)

    @field_validator("client", "service", "employee")
    @classmethod
    def required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("phone", mode="before")
    @classmethod
    def phone_default(cls, v):
        return "" if v is None else v

    @field_validator("date", mode="before")
    @classmethod
    def calendar_date(cls, v):
        return normalize_calendar_date(v)

    @field_validator("time")
    @classmethod
    def time_slot(cls, v: str) -> str:
        v = v.strip()
        if not TIME_SLOT_PATTERN.match(v):
            raise ValueError("time must be in HH:MM 24-hour format")
        return v

class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client: str
    phone: str
    service: str
    date: Date
    time: str
    employee: str
    notes: Optional[str] = None
    price: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("date", mode="before")
    @classmethod
    def calendar_date(cls, v):
        return normalize_calendar_date(v)

class AppointmentCreated(BaseModel):
    id: int

class AppointmentUpdated(BaseModel):
    updated: bool = True

class AppointmentDeleted(BaseModel):
    deleted: bool = True
