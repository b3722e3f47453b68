from models import (
    Booking, BookingCreate, BookingStatus, BookingAction, RideStatus, RecurringPattern,
    ACTIVE_BOOKING_STATUSES, WEEKDAYS,
)
from errors import NotFound, Forbidden, Conflict, CapacityExceeded, InvalidState
from datetime import datetime
from .notification_service import notify_booking

import logging
logger = logging.getLogger(__name__)

BOOKABLE_RIDE_STATUSES = (RideStatus.ACTIVE, RideStatus.PENDING)

def booked_seats(bookings, exclude_id: str | None = None) -> int:
    """Seats held by confirmed bookings; pending requests reserve nothing"""
    return sum(
        booking.seats for booking in bookings
        if booking.status == BookingStatus.CONFIRMED and booking.bookingId != exclude_id
    )

def remaining_seats(ride, bookings) -> int:
    return max(0, ride.seatsAvailable - booked_seats(bookings))

def _check_recurring_days(ride, booking_data: BookingCreate):
    if not booking_data.isRecurring:
        return
    if ride.recurringPattern == RecurringPattern.ONCE:
        raise InvalidState("This ride is not recurring")
    if ride.recurringPattern == RecurringPattern.MONTHLY and booking_data.recurringDays:
        raise InvalidState("Monthly rides cannot be booked by weekday")
    if ride.recurringPattern == RecurringPattern.WEEKLY:
        offered = ride.recurringDays or [WEEKDAYS[ride.startDate.weekday()]]
        missing = [day.value for day in booking_data.recurringDays if day not in offered]
        if missing:
            raise InvalidState(f"This ride does not run on {', '.join(missing)}")

async def create_booking(booking_data: BookingCreate, user_id: str, store):
    """Request seats on a ride.

    The booking starts PENDING and does not hold seats until the driver
    confirms it, so capacity is only checked against confirmed bookings.
    """
    ride_id = booking_data.rideId

    def apply(ride, bookings):
        if ride is None:
            raise NotFound(f"Ride {ride_id} not found")
        if ride.driverId == user_id:
            raise Forbidden("You cannot book your own ride")
        if ride.status not in BOOKABLE_RIDE_STATUSES:
            raise InvalidState("This ride is not open for booking")

        for existing in bookings:
            if existing.userId == user_id and existing.status in ACTIVE_BOOKING_STATUSES:
                raise Conflict("You have already booked this ride")

        _check_recurring_days(ride, booking_data)

        if booked_seats(bookings) + booking_data.seats > ride.seatsAvailable:
            raise CapacityExceeded("Not enough seats available")

        total_price = booking_data.totalPrice or round(booking_data.seats * ride.pricePerSeat, 2)
        return [Booking(
            rideId=ride_id,
            userId=user_id,
            seats=booking_data.seats,
            totalPrice=total_price,
            isRecurring=booking_data.isRecurring,
            recurringDays=booking_data.recurringDays if booking_data.isRecurring else [],
        )]

    booking = store.run_booking_transaction(ride_id, apply)[0]
    logger.info(f"Booking {booking.bookingId} created for ride {ride_id} by {user_id}")

    ride = store.get_ride(ride_id)
    if ride:
        notify_booking(store, ride.driverId, booking.bookingId,
                       f"New booking request for {booking.seats} seat(s)")
    return booking

async def handle_booking(booking_id: str, driver_id: str, action: BookingAction, store):
    """Confirm or reject a booking on one of the driver's rides.

    Confirmation re-counts the ride's confirmed seats inside the same
    transaction that writes the booking: whichever request the driver
    confirms first gets the seats.
    """
    booking = store.get_booking(booking_id)
    if not booking:
        raise NotFound(f"Booking {booking_id} not found")

    def apply(ride, bookings):
        if ride is None:
            raise NotFound(f"Ride {booking.rideId} not found")
        if ride.driverId != driver_id:
            raise Forbidden("Only the driver can confirm or reject bookings")

        current = next((item for item in bookings if item.bookingId == booking_id), None)
        if current is None:
            raise NotFound(f"Booking {booking_id} not found")

        now = datetime.now()
        if action == BookingAction.CONFIRM:
            if current.status != BookingStatus.PENDING:
                raise InvalidState(f"Cannot confirm a {current.status.value} booking")
            if ride.status not in BOOKABLE_RIDE_STATUSES:
                raise InvalidState(f"Cannot confirm bookings on a {ride.status.value} ride")
            if booked_seats(bookings, exclude_id=booking_id) + current.seats > ride.seatsAvailable:
                raise CapacityExceeded("Not enough seats available to confirm this booking")
            return [current.model_copy(update={
                "status": BookingStatus.CONFIRMED,
                "isConfirmed": True,
                "confirmedAt": now,
                "updatedAt": now,
            })]

        if current.status not in ACTIVE_BOOKING_STATUSES:
            raise InvalidState(f"Cannot reject a {current.status.value} booking")
        return [current.model_copy(update={"status": BookingStatus.CANCELLED, "updatedAt": now})]

    updated = store.run_booking_transaction(booking.rideId, apply)[0]
    logger.info(f"Booking {booking_id} {updated.status.value} by driver {driver_id}")

    if updated.status == BookingStatus.CONFIRMED:
        notify_booking(store, updated.userId, booking_id, "Your booking has been confirmed")
    else:
        notify_booking(store, updated.userId, booking_id, "Your booking has been declined")
    return updated

async def delete_booking(booking_id: str, user_id: str, store):
    booking = store.get_booking(booking_id)
    if not booking:
        raise NotFound(f"Booking {booking_id} not found")

    if booking.userId != user_id:
        raise Forbidden("You can only delete your own bookings")

    if booking.status not in ACTIVE_BOOKING_STATUSES:
        raise InvalidState(f"Cannot delete a {booking.status.value} booking")

    store.delete_booking(booking_id)
    logger.info(f"Booking {booking_id} deleted by {user_id}")

    ride = store.get_ride(booking.rideId)
    if ride:
        notify_booking(store, ride.driverId, booking_id, "A rider cancelled their booking")
    return {"status": "success", "message": "Booking deleted successfully"}

async def get_booking(booking_id: str, user_id: str, store):
    """A booking as seen by its rider or by the ride's driver"""
    booking = store.get_booking(booking_id)
    if not booking:
        raise NotFound(f"Booking {booking_id} not found")

    if booking.userId != user_id:
        ride = store.get_ride(booking.rideId)
        if not ride or ride.driverId != user_id:
            raise Forbidden("Unauthorized to view this booking")
    return booking

async def get_bookings_by_rider(user_id: str, store, statuses=None):
    bookings = store.list_bookings(user_id=user_id, statuses=statuses)
    bookings.sort(key=lambda booking: booking.createdAt, reverse=True)
    return bookings

async def get_pending_bookings_for_driver(driver_id: str, store):
    """Pending requests across every ride the driver offers"""
    ride_ids = [ride.rideId for ride in store.list_rides(driver_id=driver_id)]
    if not ride_ids:
        return []
    bookings = store.list_bookings_for_rides(ride_ids, statuses=[BookingStatus.PENDING])
    bookings.sort(key=lambda booking: booking.createdAt)
    return bookings
