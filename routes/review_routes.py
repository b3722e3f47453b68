from fastapi import APIRouter, HTTPException, Request, Query
from typing import List
from models import Review, ReviewCreate, RatingSummary, ConnectionStatus
from errors import RideShareError
from services.review_service import create_review, get_reviews, get_rating_summary, have_ridden_together
from .deps import get_store, get_user_id, http_error

router = APIRouter()

@router.post("/reviews", response_model=Review)
async def create_review_endpoint(review_data: ReviewCreate, request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await create_review(review_data, user_id, store)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error creating review: {exc}")

@router.get("/reviews", response_model=List[Review])
async def get_reviews_endpoint(
    request: Request,
    userId: str | None = Query(None, description="Only reviews about this user"),
    rideId: str | None = Query(None),
):
    store = get_store(request)

    try:
        return await get_reviews(store, reviewed_id=userId, ride_id=rideId)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error retrieving reviews: {exc}")

@router.get("/users/{user_id}/rating", response_model=RatingSummary)
async def get_user_rating(user_id: str, request: Request):
    store = get_store(request)

    try:
        return await get_rating_summary(user_id, store)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error retrieving rating: {exc}")

@router.get("/users/{user_id}/connection", response_model=ConnectionStatus)
async def check_connection(user_id: str, request: Request):
    store = get_store(request)
    current_user_id = get_user_id(request)

    try:
        return await have_ridden_together(current_user_id, user_id, store)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error checking user connection: {exc}")
