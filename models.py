from pydantic import BaseModel, Field, model_validator
from datetime import datetime, date
from typing import Annotated, List, Tuple
from enum import Enum
from uuid import uuid4

# 24h clock, zero padded so that plain string comparison orders times
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

DayOfMonth = Annotated[int, Field(ge=1, le=31)]

class RideStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"

# Bookings in these states hold (or may come to hold) seats on a ride
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)

class RecurringPattern(str, Enum):
    ONCE = "ONCE"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"

class Weekday(str, Enum):
    """Ordered like date.weekday(): MONDAY is 0"""
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

WEEKDAYS = list(Weekday)

class NotificationType(str, Enum):
    BOOKING = "booking"
    RIDE = "ride"
    SYSTEM = "system"
    PAYMENT = "payment"

class BookingAction(str, Enum):
    CONFIRM = "confirm"
    REJECT = "reject"

class Location(BaseModel):
    id: str = Field(default_factory=lambda: f"loc_{uuid4().hex}")
    address: str
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

class CarCreate(BaseModel):
    make: str
    model: str
    year: int = Field(gt=0)
    color: str
    licensePlate: str
    seats: int = Field(gt=0)

class Car(CarCreate):
    """A vehicle owned by a user and offered on rides"""
    carId: str = Field(default_factory=lambda: f"car_{uuid4().hex}")
    userId: str
    createdAt: datetime = Field(default_factory=datetime.now)
    updatedAt: datetime = Field(default_factory=datetime.now)

class TimeSlot(BaseModel):
    """A (possibly recurring) daily time window used for schedule conflicts.

    Times are kept as raw strings so malformed values surface from the
    conflict detector instead of request validation.
    """
    startTime: str
    endTime: str | None = None
    recurringPattern: RecurringPattern = RecurringPattern.ONCE
    recurringDays: List[Weekday] = Field(default_factory=list)
    recurringDates: List[DayOfMonth] = Field(default_factory=list)
    startDate: date
    endDate: date | None = None

class RideFields(BaseModel):
    """Fields a driver sets when creating or editing a ride"""
    carId: str
    startDate: date
    endDate: date | None = None
    departureTime: str = Field(pattern=TIME_PATTERN)
    returnTime: str | None = Field(default=None, pattern=TIME_PATTERN)
    pricePerSeat: float = Field(gt=0)
    seatsAvailable: int = Field(ge=0)
    recurringPattern: RecurringPattern = RecurringPattern.ONCE
    recurringDays: List[Weekday] = Field(default_factory=list)
    recurringDates: List[DayOfMonth] = Field(default_factory=list)
    pickupLocation: Location
    dropoffLocation: Location
    pickupRadius: float | None = Field(default=None, gt=0)
    dropoffRadius: float | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def check_schedule(self):
        if self.endDate is not None and self.endDate < self.startDate:
            raise ValueError("endDate must not be before startDate")
        if self.returnTime is not None and self.returnTime <= self.departureTime:
            raise ValueError("returnTime must be after departureTime")
        return self

class RideCreate(RideFields):
    status: RideStatus = RideStatus.ACTIVE

    @model_validator(mode="after")
    def check_initial_status(self):
        if self.status not in (RideStatus.PENDING, RideStatus.ACTIVE):
            raise ValueError("A new ride must be PENDING or ACTIVE")
        return self

class RideUpdate(RideFields):
    pass

class Ride(RideFields):
    """A ride offered by a driver.

    seatsAvailable is the declared capacity; seats still free are derived
    from the confirmed bookings.
    """
    rideId: str = Field(default_factory=lambda: f"ride_{uuid4().hex}")
    driverId: str
    status: RideStatus = RideStatus.ACTIVE
    createdAt: datetime = Field(default_factory=datetime.now)
    updatedAt: datetime = Field(default_factory=datetime.now)

class RideStatusUpdate(BaseModel):
    status: RideStatus

class BookingCreate(BaseModel):
    rideId: str
    seats: int = Field(gt=0)
    totalPrice: float | None = Field(default=None, gt=0)
    isRecurring: bool = False
    recurringDays: List[Weekday] = Field(default_factory=list)

class Booking(BaseModel):
    """A rider's claim on seats of a ride"""
    bookingId: str = Field(default_factory=lambda: f"book_{uuid4().hex}")
    rideId: str
    userId: str
    seats: int = Field(gt=0)
    totalPrice: float = Field(gt=0)
    status: BookingStatus = BookingStatus.PENDING
    isRecurring: bool = False
    recurringDays: List[Weekday] = Field(default_factory=list)
    isConfirmed: bool = False
    confirmedAt: datetime | None = None
    createdAt: datetime = Field(default_factory=datetime.now)
    updatedAt: datetime = Field(default_factory=datetime.now)

class BookingDecision(BaseModel):
    action: BookingAction

class BookingSummary(BaseModel):
    bookingId: str
    status: BookingStatus
    seats: int

class ReviewCreate(BaseModel):
    reviewedId: str
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1)
    rideId: str | None = None

class Review(ReviewCreate):
    reviewId: str = Field(default_factory=lambda: f"rev_{uuid4().hex}")
    reviewerId: str
    createdAt: datetime = Field(default_factory=datetime.now)

class RatingSummary(BaseModel):
    userId: str
    averageRating: float
    totalReviews: int

class ConnectionStatus(BaseModel):
    userId: str
    otherUserId: str
    haveRiddenTogether: bool

class Notification(BaseModel):
    notificationId: str = Field(default_factory=lambda: f"notif_{uuid4().hex}")
    userId: str
    type: NotificationType
    message: str
    read: bool = False
    createdAt: datetime = Field(default_factory=datetime.now)

class RideDetail(BaseModel):
    ride: Ride
    remainingSeats: int
    bookings: List[BookingSummary]
    driverRating: RatingSummary

class SearchDistance(BaseModel):
    """Straight-line distances in miles"""
    pickup: float
    dropoff: float | None = None

class RideSearchResult(BaseModel):
    ride: Ride
    remainingSeats: int
    distance: SearchDistance | None = None

class RouteSummary(BaseModel):
    rideId: str
    distanceMeters: int
    durationSeconds: float
    encodedPolyline: str
    points: List[Tuple[float, float]]

class DriverRideSummary(BaseModel):
    """A driver's ride with the riders holding confirmed seats"""
    ride: Ride
    remainingSeats: int
    confirmedBookings: List[Booking]
