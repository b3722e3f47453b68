import os

# Settings requires these; the tests never reach Firestore
os.environ.setdefault("PORT", "8000")
os.environ.setdefault("DATABASE_URL", "https://rideshare-test.firebaseio.com")

import pytest
from datetime import date
from fastapi.testclient import TestClient
from models import Car, Ride, Booking, Location
from memory_store import MemoryStore

DRIVER = "driver-1"
RIDER = "rider-1"
OTHER_RIDER = "rider-2"


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def make_car(store):
    def _make(user_id=DRIVER, **overrides):
        data = dict(make="Toyota", model="Corolla", year=2020, color="Blue", licensePlate="ABC-123", seats=4)
        data.update(overrides)
        car = Car(userId=user_id, **data)
        return store.add_car(car)
    return _make


@pytest.fixture
def make_ride(store, make_car):
    """Insert a ride directly, skipping the schedule checks of the service"""
    def _make(driver_id=DRIVER, **overrides):
        if "carId" not in overrides:
            overrides["carId"] = make_car(driver_id).carId
        data = dict(
            startDate=date(2024, 6, 1),
            departureTime="09:00",
            returnTime="10:00",
            pricePerSeat=12.5,
            seatsAvailable=3,
            pickupLocation=Location(address="1 Main St, Springfield", latitude=40.0, longitude=-74.0),
            dropoffLocation=Location(address="99 Broad St, Newark", latitude=40.7, longitude=-74.2),
        )
        data.update(overrides)
        return store.add_ride(Ride(driverId=driver_id, **data))
    return _make


@pytest.fixture
def make_booking(store):
    def _make(ride, user_id=RIDER, seats=1, **overrides):
        booking = Booking(
            rideId=ride.rideId,
            userId=user_id,
            seats=seats,
            totalPrice=seats * ride.pricePerSeat,
            **overrides,
        )
        return store.add_booking(booking)
    return _make


@pytest.fixture
def ride_payload():
    def _payload(car_id, **overrides):
        payload = {
            "carId": car_id,
            "startDate": "2024-06-01",
            "departureTime": "09:00",
            "returnTime": "10:00",
            "pricePerSeat": 12.5,
            "seatsAvailable": 3,
            "pickupLocation": {"address": "1 Main St, Springfield", "latitude": 40.0, "longitude": -74.0},
            "dropoffLocation": {"address": "99 Broad St, Newark", "latitude": 40.7, "longitude": -74.2},
        }
        payload.update(overrides)
        return payload
    return _payload


@pytest.fixture
def client(store):
    from main import app
    app.state.store = store
    app.state.routes_client = None
    return TestClient(app)
