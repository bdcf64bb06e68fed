from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from seatlock.infrastructure.config import settings


class SeatStatus(Enum):
    Available = 'Available'
    Locked = 'Locked'
    Booked = 'Booked'


class Seat(BaseModel):
    seat_id: int
    status: SeatStatus
    owner_id: str | None
    lock_expires_in: float | None


class LockRequest(BaseModel):
    owner_id: str
    ttl_seconds: float | None = Field(default=None, gt=0, le=settings.max_lock_ttl_seconds)


class OwnerRequest(BaseModel):
    owner_id: str


class Ack(BaseModel):
    seat_id: int
    released: bool


class Message(BaseModel):
    message: str


class Error(BaseModel):
    detail: str
    error: str
