import pytest
from errors import NotFound, InvalidState
from models import CarCreate, RideStatus
from services.car_service import create_car, get_cars, get_car, delete_car
from conftest import DRIVER, OTHER_RIDER


async def test_register_and_list_cars(store):
    car = await create_car(
        CarCreate(make="Honda", model="Civic", year=2019, color="Red", licensePlate="XYZ-987", seats=5),
        DRIVER, store,
    )
    assert car.carId.startswith("car_")
    assert car.userId == DRIVER
    assert [c.carId for c in await get_cars(DRIVER, store)] == [car.carId]
    assert await get_cars(OTHER_RIDER, store) == []


async def test_other_users_car_is_hidden(store, make_car):
    car = make_car()
    assert (await get_car(car.carId, DRIVER, store)).licensePlate == "ABC-123"
    with pytest.raises(NotFound):
        await get_car(car.carId, OTHER_RIDER, store)


async def test_car_in_active_ride_cannot_be_deleted(store, make_ride):
    ride = make_ride()
    with pytest.raises(InvalidState):
        await delete_car(ride.carId, DRIVER, store)
    assert store.get_car(ride.carId) is not None


async def test_delete_car(store, make_ride):
    ride = make_ride(status=RideStatus.COMPLETED)
    result = await delete_car(ride.carId, DRIVER, store)
    assert result["status"] == "success"
    assert store.get_car(ride.carId) is None


async def test_delete_someone_elses_car(store, make_car):
    car = make_car()
    with pytest.raises(NotFound):
        await delete_car(car.carId, OTHER_RIDER, store)
