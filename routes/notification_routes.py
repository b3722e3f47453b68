from fastapi import APIRouter, HTTPException, Request
from typing import List
from models import Notification
from errors import RideShareError
from services.notification_service import (
    get_notifications, mark_notification_read, mark_all_notifications_read,
)
from .deps import get_store, get_user_id, http_error

router = APIRouter()

@router.get("/notifications", response_model=List[Notification])
async def get_notifications_endpoint(request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await get_notifications(user_id, store)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error retrieving notifications: {exc}")

@router.patch("/notifications/read")
async def mark_all_read(request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await mark_all_notifications_read(user_id, store)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error marking notifications as read: {exc}")

@router.patch("/notifications/{notification_id}/read", response_model=Notification)
async def mark_read(notification_id: str, request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await mark_notification_read(notification_id, user_id, store)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error marking notification as read: {exc}")
