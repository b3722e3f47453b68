"""Schedule expansion and time-conflict detection for rides.

A slot is a daily time window repeated according to its recurrence
pattern between its start and end dates. Every occurrence of a slot lies
within a single calendar day, so two slots can only collide on a day that
carries an occurrence of both.
"""
from datetime import date, datetime, time, timedelta
from models import TimeSlot, RecurringPattern, WEEKDAYS
from errors import InvalidFormat

DEFAULT_END_TIME = "23:59"

# Enumeration bound for recurring slots without an end date. Schedules are
# not expected to reach it; it only keeps occurrence walks finite.
FAR_FUTURE = date(2100, 12, 31)

def parse_time(time_str: str) -> time:
    parts = time_str.split(":") if isinstance(time_str, str) else []
    if len(parts) != 2:
        raise InvalidFormat(f"Invalid time format: {time_str}")
    try:
        hours, minutes = int(parts[0]), int(parts[1])
        return time(hours, minutes)
    except ValueError as exc:
        raise InvalidFormat(f"Invalid time format: {time_str}") from exc

def slot_window(slot: TimeSlot):
    """Parsed (start, end) time of day for a slot"""
    start = parse_time(slot.startTime)
    end = parse_time(slot.endTime or DEFAULT_END_TIME)
    if end < start:
        raise InvalidFormat(f"End time {slot.endTime} is before start time {slot.startTime}")
    return start, end

def last_day(slot: TimeSlot) -> date:
    if slot.recurringPattern == RecurringPattern.ONCE:
        return slot.startDate
    return slot.endDate or FAR_FUTURE

def occurs_on(slot: TimeSlot, day: date) -> bool:
    if day < slot.startDate or day > last_day(slot):
        return False

    pattern = slot.recurringPattern
    if pattern == RecurringPattern.ONCE:
        return day == slot.startDate
    if pattern == RecurringPattern.DAILY:
        return True
    if pattern == RecurringPattern.WEEKLY:
        days = slot.recurringDays or [WEEKDAYS[slot.startDate.weekday()]]
        return WEEKDAYS[day.weekday()] in days
    if pattern == RecurringPattern.MONTHLY:
        dates = slot.recurringDates or [slot.startDate.day]
        return day.day in dates
    raise InvalidFormat(f"Unsupported recurring pattern: {pattern}")

def generate_occurrences(slot: TimeSlot, first: date | None = None, last: date | None = None):
    """Yield (start, end) datetimes of the slot between first and last, inclusive"""
    start_time, end_time = slot_window(slot)
    day = max(slot.startDate, first or slot.startDate)
    until = min(last_day(slot), last or FAR_FUTURE)
    while day <= until:
        if occurs_on(slot, day):
            yield datetime.combine(day, start_time), datetime.combine(day, end_time)
        day += timedelta(days=1)

def has_overlap(start1, end1, start2, end2) -> bool:
    return (
        (start1 >= start2 and start1 < end2) or
        (end1 > start2 and end1 <= end2) or
        (start1 <= start2 and end1 >= end2)
    )

def slots_conflict(first_slot: TimeSlot, second_slot: TimeSlot) -> bool:
    first_start, first_end = slot_window(first_slot)
    second_start, second_end = slot_window(second_slot)

    day = max(first_slot.startDate, second_slot.startDate)
    until = min(last_day(first_slot), last_day(second_slot))
    if day > until:
        return False

    # The windows repeat unchanged, so a shared day either overlaps or none does
    if not has_overlap(
        datetime.combine(day, first_start), datetime.combine(day, first_end),
        datetime.combine(day, second_start), datetime.combine(day, second_end),
    ):
        return False

    # Without a monthly pattern occurrence only depends on the weekday.
    # Without a weekly one it only depends on the day of month, and any 62
    # consecutive days carry every day of month at least once.
    patterns = {first_slot.recurringPattern, second_slot.recurringPattern}
    if RecurringPattern.MONTHLY not in patterns:
        until = min(until, day + timedelta(days=6))
    elif RecurringPattern.WEEKLY not in patterns:
        until = min(until, day + timedelta(days=61))

    for occurrence_start, _ in generate_occurrences(first_slot, day, until):
        if occurs_on(second_slot, occurrence_start.date()):
            return True
    return False

def has_conflict(new_slot: TimeSlot, existing_slots) -> bool:
    return any(slots_conflict(new_slot, slot) for slot in existing_slots)

def slot_for_ride(ride) -> TimeSlot:
    return TimeSlot(
        startTime=ride.departureTime,
        endTime=ride.returnTime,
        recurringPattern=ride.recurringPattern,
        recurringDays=ride.recurringDays,
        recurringDates=ride.recurringDates,
        startDate=ride.startDate,
        endDate=ride.endDate,
    )
