from fastapi import APIRouter, HTTPException, Request, Query
from typing import List
from datetime import date
from models import (
    Ride, RideCreate, RideUpdate, RideStatusUpdate, RideDetail,
    RideSearchResult, DriverRideSummary, RouteSummary,
)
from errors import RideShareError
from services.helpers import validate_coordinates
from services.search_service import search_rides, browse_rides
from services.ride_service import (
    create_new_ride, get_ride_detail, update_ride, update_ride_status, delete_ride,
    get_rides_by_driver, get_ride_route,
)
from .deps import get_store, get_user_id, http_error

router = APIRouter()

@router.get("/rides/", response_model=List[RideSearchResult])
async def get_rides(
    request: Request,
    ride_date: date | None = Query(None, alias="date"),
    from_text: str | None = Query(None, alias="from"),
    to_text: str | None = Query(None, alias="to"),
):
    store = get_store(request)
    get_user_id(request)

    try:
        return await browse_rides(store, ride_date, from_text, to_text)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error retrieving rides: {exc}")

@router.post("/rides/", response_model=Ride)
async def create_ride(ride: RideCreate, request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await create_new_ride(ride, user_id, store)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error creating ride: {exc}")

@router.get("/rides/search", response_model=List[RideSearchResult])
async def search_rides_endpoint(
    request: Request,
    seats: int = Query(1, description="Seats the rider needs"),
    fromLat: float | None = Query(None),
    fromLng: float | None = Query(None),
    toLat: float | None = Query(None),
    toLng: float | None = Query(None),
    maxDistance: float | None = Query(None, description="Maximum straight-line distance in miles"),
    ride_date: date | None = Query(None, alias="date"),
):
    store = get_store(request)

    try:
        pickup = validate_coordinates(fromLat, fromLng)
        dropoff = validate_coordinates(toLat, toLng)
        return await search_rides(store, seats, pickup, dropoff, maxDistance, ride_date)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error searching rides: {exc}")

@router.get("/rides/driver/{driver_id}", response_model=List[DriverRideSummary])
async def get_driver_rides(driver_id: str, request: Request):
    store = get_store(request)
    user_id = get_user_id(request)
    if user_id != driver_id:
        raise HTTPException(status_code=403, detail="Unauthorized to view these rides")

    try:
        return await get_rides_by_driver(driver_id, store)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error retrieving rides: {exc}")

@router.get("/rides/{ride_id}", response_model=RideDetail)
async def get_ride(ride_id: str, request: Request):
    store = get_store(request)

    try:
        return await get_ride_detail(ride_id, store)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error retrieving ride: {exc}")

@router.put("/rides/{ride_id}", response_model=Ride)
async def update_ride_endpoint(ride_id: str, ride_update: RideUpdate, request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await update_ride(ride_id, ride_update, user_id, store)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error updating ride: {exc}")

@router.patch("/rides/{ride_id}/status", response_model=Ride)
async def update_ride_status_endpoint(ride_id: str, body: RideStatusUpdate, request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await update_ride_status(ride_id, body.status, user_id, store)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error updating ride status: {exc}")

@router.delete("/rides/{ride_id}")
async def delete_ride_endpoint(ride_id: str, request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await delete_ride(ride_id, user_id, store)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error deleting ride: {exc}")

@router.get("/rides/{ride_id}/route", response_model=RouteSummary)
async def get_ride_route_endpoint(ride_id: str, request: Request):
    store = get_store(request)
    routes_client = getattr(request.app.state, "routes_client", None)
    if not routes_client:
        raise HTTPException(status_code=503, detail="Routes client not initialized")

    try:
        return await get_ride_route(ride_id, store, routes_client)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error retrieving route: {exc}")
