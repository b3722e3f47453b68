from models import Car, CarCreate, RideStatus
from errors import NotFound, InvalidState

import logging
logger = logging.getLogger(__name__)

async def create_car(car_data: CarCreate, user_id: str, store):
    car = Car(userId=user_id, **car_data.model_dump())
    store.add_car(car)
    logger.info(f"Car {car.carId} registered for {user_id}")
    return car

async def get_cars(user_id: str, store):
    return store.list_cars(user_id)

def get_owned_car(car_id: str, user_id: str, store):
    car = store.get_car(car_id)
    # Other users' cars are reported as missing
    if not car or car.userId != user_id:
        raise NotFound(f"Car {car_id} not found")
    return car

async def get_car(car_id: str, user_id: str, store):
    return get_owned_car(car_id, user_id, store)

async def delete_car(car_id: str, user_id: str, store):
    get_owned_car(car_id, user_id, store)

    active_rides = store.list_rides(driver_id=user_id, statuses=[RideStatus.ACTIVE])
    if any(ride.carId == car_id for ride in active_rides):
        raise InvalidState("Cannot delete car that is being used in active rides")

    store.delete_car(car_id)
    logger.info(f"Car {car_id} deleted by {user_id}")
    return {"status": "success", "message": "Car deleted successfully"}
