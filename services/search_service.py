from models import RideStatus, BookingStatus, RideSearchResult, SearchDistance
from errors import InvalidFormat
from config import settings
from .helpers import distance_miles
from .schedule import occurs_on, slot_for_ride
from .booking_service import remaining_seats

import logging
logger = logging.getLogger(__name__)

SEARCHABLE_RIDE_STATUSES = (RideStatus.ACTIVE, RideStatus.PENDING)

def _radius(max_distance, ride_radius):
    if max_distance is not None:
        return max_distance
    return ride_radius or settings.DEFAULT_SEARCH_RADIUS_MILES

def _confirmed_by_ride(rides, store):
    by_ride = {ride.rideId: [] for ride in rides}
    if by_ride:
        for booking in store.list_bookings_for_rides(list(by_ride), statuses=[BookingStatus.CONFIRMED]):
            by_ride[booking.rideId].append(booking)
    return by_ride

async def search_rides(store, seats: int = 1, pickup=None, dropoff=None,
                       max_distance: float | None = None, on_date=None):
    """Open rides with enough free seats near the rider's pickup (and dropoff).

    pickup and dropoff are validated (lat, lng) pairs. Without a pickup
    every candidate is returned, newest first. Otherwise results are ordered
    by straight-line pickup distance in miles.
    """
    if seats < 1:
        raise InvalidFormat("Number of seats must be at least 1")
    if max_distance is not None and not 0 <= max_distance <= settings.MAX_SEARCH_DISTANCE_MILES:
        raise InvalidFormat(
            f"Maximum distance must be between 0 and {settings.MAX_SEARCH_DISTANCE_MILES:g} miles"
        )

    rides = store.list_rides(statuses=SEARCHABLE_RIDE_STATUSES)
    confirmed = _confirmed_by_ride(rides, store)
    logger.info(f"Found {len(rides)} open rides before filtering")

    results = []
    for ride in rides:
        remaining = remaining_seats(ride, confirmed[ride.rideId])
        if remaining < seats:
            continue
        if on_date is not None and not occurs_on(slot_for_ride(ride), on_date):
            continue

        if pickup is None:
            results.append(RideSearchResult(ride=ride, remainingSeats=remaining))
            continue

        pickup_miles = distance_miles(pickup, (ride.pickupLocation.latitude, ride.pickupLocation.longitude))
        if pickup_miles > _radius(max_distance, ride.pickupRadius):
            continue

        dropoff_miles = None
        if dropoff is not None:
            dropoff_miles = distance_miles(
                dropoff, (ride.dropoffLocation.latitude, ride.dropoffLocation.longitude)
            )
            if dropoff_miles > _radius(max_distance, ride.dropoffRadius):
                continue

        results.append(RideSearchResult(
            ride=ride,
            remainingSeats=remaining,
            distance=SearchDistance(pickup=pickup_miles, dropoff=dropoff_miles),
        ))

    if pickup is None:
        results.sort(key=lambda result: result.ride.createdAt, reverse=True)
    else:
        results.sort(key=lambda result: result.distance.pickup)

    logger.info(f"Returning {len(results)} rides after filtering")
    return results

async def browse_rides(store, on_date=None, from_text: str | None = None, to_text: str | None = None):
    """Active rides with free seats, filtered by date and address text"""
    rides = store.list_rides(statuses=[RideStatus.ACTIVE])
    confirmed = _confirmed_by_ride(rides, store)

    results = []
    for ride in rides:
        remaining = remaining_seats(ride, confirmed[ride.rideId])
        if remaining <= 0:
            continue
        if on_date is not None and not occurs_on(slot_for_ride(ride), on_date):
            continue
        if from_text and from_text.lower() not in ride.pickupLocation.address.lower():
            continue
        if to_text and to_text.lower() not in ride.dropoffLocation.address.lower():
            continue
        results.append(RideSearchResult(ride=ride, remainingSeats=remaining))

    results.sort(key=lambda result: (result.ride.startDate, result.ride.departureTime))
    return results
