from firebase_admin import firestore
from google.api_core.exceptions import AlreadyExists
from models import Ride, Booking, Review, Notification, Car

import logging
logger = logging.getLogger(__name__)

# Firestore caps the number of values in an "in" filter
IN_FILTER_LIMIT = 30
BATCH_WRITE_LIMIT = 500

def _to_doc(model):
    return model.model_dump(mode="json")

def _chunks(values, size=IN_FILTER_LIMIT):
    for start in range(0, len(values), size):
        yield values[start:start + size]

class FirestoreStore:
    """Repository over the service's Firestore collections.

    Built once in the application lifespan and handed to the services, so
    no module keeps a global client. Seat accounting goes through
    run_booking_transaction, everything else is a plain document read or
    write.
    """

    def __init__(self, db):
        self.db = db
        self.rides_ref = db.collection("rides")
        self.bookings_ref = db.collection("bookings")
        self.reviews_ref = db.collection("reviews")
        self.notifications_ref = db.collection("notifications")
        self.cars_ref = db.collection("cars")

    def _parse_all(self, docs, model):
        items = []
        for doc in docs:
            try:
                items.append(model.model_validate(doc.to_dict()))
            except Exception as exc:
                logger.warning(f"Skipping malformed {model.__name__} document {doc.id}: {exc}")
        return items

    def _get(self, ref, doc_id, model):
        doc = ref.document(doc_id).get()
        if not doc.exists:
            return None
        return model.model_validate(doc.to_dict())

    # --- Rides ---

    def add_ride(self, ride: Ride):
        self.rides_ref.document(ride.rideId).set(_to_doc(ride))
        return ride

    def get_ride(self, ride_id: str):
        return self._get(self.rides_ref, ride_id, Ride)

    def save_ride(self, ride: Ride):
        self.rides_ref.document(ride.rideId).set(_to_doc(ride))
        return ride

    def delete_ride(self, ride_id: str):
        # Locations are embedded in the ride document and go with it
        self.rides_ref.document(ride_id).delete()

    def list_rides(self, driver_id: str | None = None, statuses=None):
        query = self.rides_ref
        if driver_id:
            query = query.where("driverId", "==", driver_id)
        if statuses:
            query = query.where("status", "in", [status.value for status in statuses])
        return self._parse_all(query.stream(), Ride)

    # --- Bookings ---

    def get_booking(self, booking_id: str):
        return self._get(self.bookings_ref, booking_id, Booking)

    def delete_booking(self, booking_id: str):
        self.bookings_ref.document(booking_id).delete()

    def list_bookings(self, user_id: str | None = None, ride_id: str | None = None, statuses=None):
        query = self.bookings_ref
        if user_id:
            query = query.where("userId", "==", user_id)
        if ride_id:
            query = query.where("rideId", "==", ride_id)
        if statuses:
            query = query.where("status", "in", [status.value for status in statuses])
        return self._parse_all(query.stream(), Booking)

    def list_bookings_for_rides(self, ride_ids, statuses=None):
        bookings = []
        for chunk in _chunks(list(ride_ids)):
            query = self.bookings_ref.where("rideId", "in", chunk)
            bookings.extend(
                booking for booking in self._parse_all(query.stream(), Booking)
                if not statuses or booking.status in statuses
            )
        return bookings

    def run_booking_transaction(self, ride_id: str, apply):
        """Read a ride and all of its bookings, then persist what apply returns.

        apply(ride, bookings) receives the ride (None when missing) and
        returns the documents to write: bookings, plus the ride itself when
        it changed. Reads and writes share a single Firestore transaction,
        which the client retries on contention, so apply must not have side
        effects beyond its return value.
        """
        ride_ref = self.rides_ref.document(ride_id)
        bookings_query = self.bookings_ref.where("rideId", "==", ride_id)

        @firestore.transactional
        def _run(transaction):
            ride_doc = ride_ref.get(transaction=transaction)
            ride = Ride.model_validate(ride_doc.to_dict()) if ride_doc.exists else None
            bookings = [
                Booking.model_validate(doc.to_dict())
                for doc in bookings_query.stream(transaction=transaction)
            ]
            changed = apply(ride, bookings)
            for item in changed:
                if isinstance(item, Ride):
                    transaction.set(self.rides_ref.document(item.rideId), _to_doc(item))
                else:
                    transaction.set(self.bookings_ref.document(item.bookingId), _to_doc(item))
            return changed

        return _run(self.db.transaction())

    # --- Reviews ---

    def add_review(self, review: Review) -> bool:
        """Insert a review unless the reviewer already reviewed this user"""
        # One document per (reviewer, reviewed) pair makes create() the uniqueness check
        doc_ref = self.reviews_ref.document(f"{review.reviewerId}__{review.reviewedId}")
        try:
            doc_ref.create(_to_doc(review))
        except AlreadyExists:
            return False
        return True

    def list_reviews(self, reviewed_id: str | None = None, ride_id: str | None = None,
                     reviewer_id: str | None = None):
        query = self.reviews_ref
        if reviewed_id:
            query = query.where("reviewedId", "==", reviewed_id)
        if reviewer_id:
            query = query.where("reviewerId", "==", reviewer_id)
        if ride_id:
            query = query.where("rideId", "==", ride_id)
        return self._parse_all(query.stream(), Review)

    # --- Notifications ---

    def add_notification(self, notification: Notification):
        self.notifications_ref.document(notification.notificationId).set(_to_doc(notification))
        return notification

    def get_notification(self, notification_id: str):
        return self._get(self.notifications_ref, notification_id, Notification)

    def save_notification(self, notification: Notification):
        self.notifications_ref.document(notification.notificationId).set(_to_doc(notification))
        return notification

    def list_notifications(self, user_id: str):
        query = self.notifications_ref.where("userId", "==", user_id)
        return self._parse_all(query.stream(), Notification)

    def mark_all_notifications_read(self, user_id: str) -> int:
        unread = self.notifications_ref.where("userId", "==", user_id).where("read", "==", False).stream()
        batch = self.db.batch()
        count = 0
        for doc in unread:
            batch.update(doc.reference, {"read": True})
            count += 1
            if count % BATCH_WRITE_LIMIT == 0:
                batch.commit()
                batch = self.db.batch()
        if count % BATCH_WRITE_LIMIT:
            batch.commit()
        return count

    # --- Cars ---

    def add_car(self, car: Car):
        self.cars_ref.document(car.carId).set(_to_doc(car))
        return car

    def get_car(self, car_id: str):
        return self._get(self.cars_ref, car_id, Car)

    def list_cars(self, user_id: str):
        return self._parse_all(self.cars_ref.where("userId", "==", user_id).stream(), Car)

    def delete_car(self, car_id: str):
        self.cars_ref.document(car_id).delete()
