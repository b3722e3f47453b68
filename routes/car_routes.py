from fastapi import APIRouter, HTTPException, Request
from typing import List
from models import Car, CarCreate
from errors import RideShareError
from services.car_service import create_car, get_cars, get_car, delete_car
from .deps import get_store, get_user_id, http_error

router = APIRouter()

@router.post("/cars", response_model=Car)
async def create_car_endpoint(car: CarCreate, request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await create_car(car, user_id, store)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error creating car: {exc}")

@router.get("/cars", response_model=List[Car])
async def get_cars_endpoint(request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await get_cars(user_id, store)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error retrieving cars: {exc}")

@router.get("/cars/{car_id}", response_model=Car)
async def get_car_endpoint(car_id: str, request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await get_car(car_id, user_id, store)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error retrieving car: {exc}")

@router.delete("/cars/{car_id}")
async def delete_car_endpoint(car_id: str, request: Request):
    store = get_store(request)
    user_id = get_user_id(request)

    try:
        return await delete_car(car_id, user_id, store)
    except RideShareError as e:
        raise http_error(e)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error deleting car: {exc}")
