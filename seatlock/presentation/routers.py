from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from seatlock.core.entities.errors import ReservationError
from seatlock.core.use_cases.reservation_result import ReservationResult
from seatlock.schemas.models import Ack, Error, LockRequest, Message, OwnerRequest, Seat
from seatlock.services.reservation_service import ReservationService, list_seats_service, to_seat_schema

router = APIRouter()

ERROR_STATUS_CODES: dict[ReservationError, int] = {
    ReservationError.NOT_FOUND: 404,
    ReservationError.INVALID_INPUT: 422,
    ReservationError.ALREADY_BOOKED: 409,
    ReservationError.ALREADY_LOCKED_BY_OTHER: 409,
    ReservationError.NOT_LOCKED: 409,
    ReservationError.NOT_OWNER: 403,
    ReservationError.LOCK_EXPIRED: 410,
}


def get_reservation_service(request: Request) -> ReservationService:
    return request.app.state.reservation_service


def _error_response(result: ReservationResult) -> JSONResponse:
    body = Error(detail=result.message, error=result.error.value)
    return JSONResponse(status_code=ERROR_STATUS_CODES[result.error], content=body.model_dump())


def _seat_response(result: ReservationResult, service: ReservationService) -> Seat | JSONResponse:
    if not result.ok:
        return _error_response(result)
    return to_seat_schema(result.seat, service.clock.now())


@router.get("/", response_class=PlainTextResponse)
def get_root() -> str:
    return "Welcome to the Ticket Booking System"


@router.get("/api/hello", response_model=Message)
def get_api_hello() -> Message:
    return Message(message="Hello from Express API!")


@router.get("/seats", response_model=list[Seat])
def get_seats(service: ReservationService = Depends(get_reservation_service)) -> list[Seat]:
    """
    List all seats in ascending id order. Expired locks are shown as Available.
    """
    return list_seats_service(service)


@router.get("/seats/{seat_id}", response_model=Seat, responses={404: {"model": Error}})
def get_seats_seat_id(seat_id: int, service: ReservationService = Depends(get_reservation_service)):
    """
    Get a single seat
    """
    return _seat_response(service.get_seat(seat_id), service)


@router.post(
    "/seats/{seat_id}/lock",
    response_model=Seat,
    responses={404: {"model": Error}, 409: {"model": Error}, 422: {"model": Error}},
)
def post_seats_seat_id_lock(
    seat_id: int,
    body: LockRequest,
    service: ReservationService = Depends(get_reservation_service),
):
    """
    Place a time-bounded lock on a seat

    Returns:
      - 200 with the locked seat
      - 404 if the seat does not exist
      - 409 if the seat is booked or locked by a live lock
      - 422 on invalid owner id or ttl
    """
    return _seat_response(service.lock_seat(seat_id, body.owner_id, body.ttl_seconds), service)


@router.post(
    "/seats/{seat_id}/confirm",
    response_model=Seat,
    responses={403: {"model": Error}, 404: {"model": Error}, 409: {"model": Error}, 410: {"model": Error}},
)
def post_seats_seat_id_confirm(
    seat_id: int,
    body: OwnerRequest,
    service: ReservationService = Depends(get_reservation_service),
):
    """
    Turn the caller's lock into a booking

    Returns:
      - 200 with the booked seat
      - 403 if the seat is locked by someone else
      - 404 if the seat does not exist
      - 409 if the seat is not locked or already booked
      - 410 if the caller's lock has expired
    """
    return _seat_response(service.confirm_seat(seat_id, body.owner_id), service)


@router.post(
    "/seats/{seat_id}/release",
    response_model=Ack,
    responses={403: {"model": Error}, 404: {"model": Error}, 409: {"model": Error}},
)
def post_seats_seat_id_release(
    seat_id: int,
    body: OwnerRequest,
    service: ReservationService = Depends(get_reservation_service),
):
    """
    Give up the caller's lock on a seat
    """
    result = service.release_seat(seat_id, body.owner_id)
    if not result.ok:
        return _error_response(result)
    return Ack(seat_id=result.seat.seat_id, released=True)
