from fastapi import APIRouter, HTTPException, Request, Query
from typing import List
from models import Booking, BookingCreate, BookingAction, BookingStatus
from errors import RideShareError
from services.booking_service import (
    create_booking, handle_booking, delete_booking, get_booking,
    get_bookings_by_rider, get_pending_bookings_for_driver,
)
from .deps import get_store, get_user_id, http_error

router = APIRouter()

@router.post("/bookings", response_model=Booking)
async def book_ride(booking_data: BookingCreate, request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await create_booking(booking_data, user_id, store)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error creating booking: {exc}")

@router.get("/bookings", response_model=List[Booking])
async def get_my_bookings(request: Request, status: List[BookingStatus] | None = Query(None)):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await get_bookings_by_rider(user_id, store, status)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error retrieving bookings: {exc}")

@router.get("/bookings/pending", response_model=List[Booking])
async def get_pending_bookings(request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await get_pending_bookings_for_driver(user_id, store)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error retrieving pending bookings: {exc}")

@router.get("/bookings/{booking_id}", response_model=Booking)
async def get_booking_endpoint(booking_id: str, request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await get_booking(booking_id, user_id, store)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error retrieving booking: {exc}")

@router.put("/bookings/{booking_id}/confirm", response_model=Booking)
async def confirm_booking(booking_id: str, request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await handle_booking(booking_id, user_id, BookingAction.CONFIRM, store)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error confirming booking: {exc}")

@router.put("/bookings/{booking_id}/reject", response_model=Booking)
async def reject_booking(booking_id: str, request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await handle_booking(booking_id, user_id, BookingAction.REJECT, store)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error rejecting booking: {exc}")

@router.delete("/bookings/{booking_id}")
async def delete_booking_endpoint(booking_id: str, request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await delete_booking(booking_id, user_id, store)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error deleting booking: {exc}")
