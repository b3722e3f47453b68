from models import (
    Ride, RideCreate, RideUpdate, RideStatus, BookingStatus, BookingSummary,
    RideDetail, DriverRideSummary, RouteSummary, ACTIVE_BOOKING_STATUSES,
)
from errors import NotFound, Forbidden, Conflict, InvalidState
from datetime import datetime
from .schedule import slot_for_ride, has_conflict
from .booking_service import booked_seats, remaining_seats
from .car_service import get_owned_car
from .review_service import summarize_ratings
from .notification_service import notify_ride
from .helpers import decode_polyline
from .utils import get_driving_route

import logging
logger = logging.getLogger(__name__)

# Rides that still occupy the driver's calendar
SCHEDULED_RIDE_STATUSES = (RideStatus.PENDING, RideStatus.ACTIVE)
FINAL_RIDE_STATUSES = (RideStatus.COMPLETED, RideStatus.CANCELLED)

def _check_schedule(ride: Ride, store):
    """Reject a ride that overlaps another scheduled ride of the same driver"""
    others = [
        other for other in store.list_rides(driver_id=ride.driverId, statuses=SCHEDULED_RIDE_STATUSES)
        if other.rideId != ride.rideId
    ]
    if has_conflict(slot_for_ride(ride), [slot_for_ride(other) for other in others]):
        raise Conflict("This schedule conflicts with one of your other rides")

def _get_driver_ride(ride_id: str, driver_id: str, store):
    ride = store.get_ride(ride_id)
    if not ride:
        raise NotFound(f"Ride {ride_id} not found")
    if ride.driverId != driver_id:
        raise Forbidden("You can only manage your own rides")
    return ride

async def create_new_ride(ride_data: RideCreate, driver_id: str, store):
    """Create a new ride for the driver"""
    get_owned_car(ride_data.carId, driver_id, store)

    ride = Ride(driverId=driver_id, **ride_data.model_dump())
    _check_schedule(ride, store)

    store.add_ride(ride)
    logger.info(f"Ride {ride.rideId} created by {driver_id} ({ride.recurringPattern.value})")
    return ride

async def get_ride_by_id(ride_id: str, store):
    ride = store.get_ride(ride_id)
    if not ride:
        raise NotFound(f"Ride {ride_id} not found")
    return ride

async def get_ride_detail(ride_id: str, store):
    """A ride with its seat accounting and the driver's rating"""
    ride = await get_ride_by_id(ride_id, store)
    bookings = store.list_bookings(ride_id=ride_id)
    driver_reviews = store.list_reviews(reviewed_id=ride.driverId)

    return RideDetail(
        ride=ride,
        remainingSeats=remaining_seats(ride, bookings),
        bookings=[
            BookingSummary(bookingId=booking.bookingId, status=booking.status, seats=booking.seats)
            for booking in bookings
        ],
        driverRating=summarize_ratings(ride.driverId, driver_reviews),
    )

async def update_ride(ride_id: str, updates: RideUpdate, driver_id: str, store):
    """Replace the editable fields of a ride.

    Location ids are kept so the embedded locations stay the same records.
    Capacity can not drop below the seats already confirmed.
    """
    existing = _get_driver_ride(ride_id, driver_id, store)
    if existing.status in FINAL_RIDE_STATUSES:
        raise InvalidState(f"Cannot edit a {existing.status.value} ride")

    if updates.carId != existing.carId:
        get_owned_car(updates.carId, driver_id, store)

    data = updates.model_dump()
    data["pickupLocation"]["id"] = existing.pickupLocation.id
    data["dropoffLocation"]["id"] = existing.dropoffLocation.id
    candidate = Ride.model_validate({**existing.model_dump(), **data})
    _check_schedule(candidate, store)

    def apply(ride, bookings):
        if ride is None:
            raise NotFound(f"Ride {ride_id} not found")
        # Status may have moved since the first read
        if ride.status in FINAL_RIDE_STATUSES:
            raise InvalidState(f"Cannot edit a {ride.status.value} ride")
        confirmed = booked_seats(bookings)
        if candidate.seatsAvailable < confirmed:
            raise InvalidState(f"{confirmed} seats are already confirmed on this ride")
        return [candidate.model_copy(update={"status": ride.status, "updatedAt": datetime.now()})]

    updated = store.run_booking_transaction(ride_id, apply)[0]
    logger.info(f"Ride {ride_id} updated by {driver_id}")
    return updated

def _cascade_bookings(status: RideStatus, bookings, now):
    """Booking transitions implied by a ride reaching a final status"""
    changed = []
    for booking in bookings:
        if status == RideStatus.COMPLETED and booking.status == BookingStatus.CONFIRMED:
            new_status = BookingStatus.COMPLETED
        elif status in FINAL_RIDE_STATUSES and booking.status in ACTIVE_BOOKING_STATUSES:
            new_status = BookingStatus.CANCELLED
        else:
            continue
        changed.append(booking.model_copy(update={"status": new_status, "updatedAt": now}))
    return changed

async def update_ride_status(ride_id: str, status: RideStatus, driver_id: str, store):
    """Move a ride to a new status and carry its bookings along.

    Completing a ride completes its confirmed bookings and cancels the
    pending ones; cancelling it cancels every open booking.
    """
    def apply(ride, bookings):
        if ride is None:
            raise NotFound(f"Ride {ride_id} not found")
        if ride.driverId != driver_id:
            raise Forbidden("You can only manage your own rides")
        if ride.status in FINAL_RIDE_STATUSES and status != ride.status:
            raise InvalidState(f"Ride is already {ride.status.value}")

        now = datetime.now()
        updated_ride = ride.model_copy(update={"status": status, "updatedAt": now})
        return [updated_ride] + _cascade_bookings(status, bookings, now)

    written = store.run_booking_transaction(ride_id, apply)
    ride, affected = written[0], written[1:]
    logger.info(f"Ride {ride_id} set to {status.value}, {len(affected)} bookings updated")

    for booking in affected:
        notify_ride(store, booking.userId, ride_id,
                    f"Your ride is now {status.value.lower()}, booking {booking.status.value.lower()}")
    return ride

async def delete_ride(ride_id: str, driver_id: str, store):
    """Delete a ride and its locations.

    Rides with confirmed riders must be cancelled instead. Pending requests
    are cancelled in the same transaction that closes the ride, so no
    confirmation can slip in before the documents are removed.
    """
    def apply(ride, bookings):
        if ride is None:
            raise NotFound(f"Ride {ride_id} not found")
        if ride.driverId != driver_id:
            raise Forbidden("You can only delete your own rides")
        if booked_seats(bookings) > 0:
            raise InvalidState("Cannot delete a ride with confirmed bookings, cancel it instead")

        now = datetime.now()
        closed = ride.model_copy(update={"status": RideStatus.CANCELLED, "updatedAt": now})
        return [closed] + _cascade_bookings(RideStatus.CANCELLED, bookings, now)

    written = store.run_booking_transaction(ride_id, apply)
    store.delete_ride(ride_id)
    logger.info(f"Ride {ride_id} deleted by {driver_id}")

    for booking in written[1:]:
        notify_ride(store, booking.userId, ride_id, "A ride you requested was removed by the driver")
    return {"status": "success", "message": "Ride deleted successfully"}

async def get_rides_by_driver(driver_id: str, store):
    """All rides of a driver with their confirmed riders, earliest first"""
    rides = store.list_rides(driver_id=driver_id)
    if not rides:
        return []

    confirmed = store.list_bookings_for_rides(
        [ride.rideId for ride in rides], statuses=[BookingStatus.CONFIRMED]
    )
    by_ride = {}
    for booking in confirmed:
        by_ride.setdefault(booking.rideId, []).append(booking)

    rides.sort(key=lambda ride: (ride.startDate, ride.departureTime))
    return [
        DriverRideSummary(
            ride=ride,
            remainingSeats=remaining_seats(ride, by_ride.get(ride.rideId, [])),
            confirmedBookings=by_ride.get(ride.rideId, []),
        )
        for ride in rides
    ]

async def get_ride_route(ride_id: str, store, routes_client):
    """Driving route between a ride's pickup and dropoff, for display"""
    ride = await get_ride_by_id(ride_id, store)
    origin = (ride.pickupLocation.latitude, ride.pickupLocation.longitude)
    destination = (ride.dropoffLocation.latitude, ride.dropoffLocation.longitude)

    route = await get_driving_route(routes_client, origin, destination)
    if route is None:
        raise NotFound(f"No driving route found for ride {ride_id}")

    encoded = route.polyline.encoded_polyline
    return RouteSummary(
        rideId=ride_id,
        distanceMeters=route.distance_meters,
        durationSeconds=route.duration.total_seconds(),
        encodedPolyline=encoded,
        points=decode_polyline(encoded),
    )
