from models import Review, ReviewCreate, RatingSummary, ConnectionStatus, BookingStatus, RideStatus, NotificationType
from errors import NotFound, Forbidden, Conflict
from .notification_service import notify

import logging
logger = logging.getLogger(__name__)

async def create_review(review_data: ReviewCreate, reviewer_id: str, store):
    """Leave a review about another user; one review per reviewer and reviewed user"""
    if review_data.reviewedId == reviewer_id:
        raise Forbidden("You cannot review yourself")

    if review_data.rideId and not store.get_ride(review_data.rideId):
        raise NotFound(f"Ride {review_data.rideId} not found")

    review = Review(reviewerId=reviewer_id, **review_data.model_dump())
    if not store.add_review(review):
        raise Conflict("You have already reviewed this user")

    logger.info(f"Review {review.reviewId} from {reviewer_id} about {review.reviewedId}")
    notify(store, review.reviewedId, NotificationType.SYSTEM,
           f"You received a new {review.rating}-star review")
    return review

async def get_reviews(store, reviewed_id: str | None = None, ride_id: str | None = None):
    reviews = store.list_reviews(reviewed_id=reviewed_id, ride_id=ride_id)
    reviews.sort(key=lambda review: review.createdAt, reverse=True)
    return reviews

def summarize_ratings(user_id: str, reviews) -> RatingSummary:
    ratings = [review.rating for review in reviews]
    average = sum(ratings) / len(ratings) if ratings else 0
    return RatingSummary(userId=user_id, averageRating=round(average, 2), totalReviews=len(ratings))

async def get_rating_summary(user_id: str, store):
    return summarize_ratings(user_id, store.list_reviews(reviewed_id=user_id))

async def have_ridden_together(user_id: str, other_user_id: str, store):
    """Whether a completed ride links the two users.

    Either one drove a completed ride the other rode on, or both rode the
    same completed ride. Only completed bookings count as having ridden.
    """
    rides_by_user = {
        uid: {
            booking.rideId for booking in store.list_bookings(user_id=uid)
            if booking.status == BookingStatus.COMPLETED
        }
        for uid in (user_id, other_user_id)
    }

    together = False
    for ride_id in rides_by_user[user_id] | rides_by_user[other_user_id]:
        ride = store.get_ride(ride_id)
        if not ride or ride.status != RideStatus.COMPLETED:
            continue
        riders = {uid for uid, ride_ids in rides_by_user.items() if ride_id in ride_ids}
        participants = riders | {ride.driverId}
        if user_id in participants and other_user_id in participants:
            together = True
            break

    return ConnectionStatus(userId=user_id, otherUserId=other_user_id, haveRiddenTogether=together)
