from datetime import date, datetime
import pytest
from errors import InvalidFormat
from models import TimeSlot, RecurringPattern, Weekday
from services.schedule import (
    has_conflict, slots_conflict, generate_occurrences, last_day, parse_time, occurs_on, FAR_FUTURE,
)


def once(day, start, end=None):
    return TimeSlot(startDate=day, startTime=start, endTime=end)


def weekly(days, start, end, start_date, end_date=None):
    return TimeSlot(
        startDate=start_date, endDate=end_date, startTime=start, endTime=end,
        recurringPattern=RecurringPattern.WEEKLY, recurringDays=days,
    )


def test_overlapping_one_time_rides_conflict():
    existing = once(date(2024, 6, 1), "09:00", "10:00")
    new = once(date(2024, 6, 1), "09:30", "10:30")
    assert has_conflict(new, [existing])


def test_back_to_back_rides_do_not_conflict():
    existing = once(date(2024, 6, 1), "09:00", "10:00")
    new = once(date(2024, 6, 1), "10:00", "11:00")
    assert not has_conflict(new, [existing])


def test_one_time_rides_on_different_days_do_not_conflict():
    existing = once(date(2024, 6, 1), "09:00", "10:00")
    new = once(date(2024, 6, 2), "09:00", "10:00")
    assert not has_conflict(new, [existing])


def test_weekly_rides_sharing_a_wednesday_conflict():
    existing = weekly([Weekday.MONDAY, Weekday.WEDNESDAY], "08:00", "09:00", date(2024, 6, 3))
    new = weekly([Weekday.WEDNESDAY], "08:30", "09:00", date(2024, 6, 1))
    assert has_conflict(new, [existing])
    assert has_conflict(existing, [new])


def test_weekly_rides_on_different_weekdays_do_not_conflict():
    existing = weekly([Weekday.MONDAY], "08:00", "09:00", date(2024, 6, 3))
    new = weekly([Weekday.TUESDAY], "08:00", "09:00", date(2024, 6, 1))
    assert not has_conflict(new, [existing])


def test_recurring_ride_that_ended_does_not_conflict():
    existing = TimeSlot(
        startDate=date(2024, 5, 1), endDate=date(2024, 5, 31), startTime="07:00", endTime="08:00",
        recurringPattern=RecurringPattern.DAILY,
    )
    assert not has_conflict(once(date(2024, 6, 1), "07:00", "08:00"), [existing])
    assert has_conflict(once(date(2024, 5, 31), "07:30", "07:45"), [existing])


def test_one_time_ride_against_weekly_schedule():
    schedule = weekly([Weekday.WEDNESDAY], "08:00", "09:00", date(2024, 6, 1))
    wednesday = once(date(2024, 6, 12), "08:15", "08:45")
    tuesday = once(date(2024, 6, 11), "08:15", "08:45")
    assert has_conflict(wednesday, [schedule])
    assert has_conflict(schedule, [wednesday])
    assert not has_conflict(tuesday, [schedule])
    assert not has_conflict(schedule, [tuesday])


def test_monthly_schedule_uses_days_of_month():
    schedule = TimeSlot(
        startDate=date(2024, 1, 1), startTime="18:00", endTime="19:00",
        recurringPattern=RecurringPattern.MONTHLY, recurringDates=[15],
    )
    assert has_conflict(once(date(2024, 7, 15), "18:30"), [schedule])
    assert not has_conflict(once(date(2024, 7, 16), "18:30"), [schedule])


def test_monthly_schedule_defaults_to_start_day():
    schedule = TimeSlot(
        startDate=date(2024, 1, 31), startTime="18:00", endTime="19:00",
        recurringPattern=RecurringPattern.MONTHLY,
    )
    assert occurs_on(schedule, date(2024, 3, 31))
    assert not occurs_on(schedule, date(2024, 2, 29))


def monthly(dates, start_date, end_date=None):
    return TimeSlot(
        startDate=start_date, endDate=end_date, startTime="18:00", endTime="19:00",
        recurringPattern=RecurringPattern.MONTHLY, recurringDates=dates,
    )


def test_monthly_schedules_sharing_the_31st_conflict():
    # June has no 31st, so the first shared day is July 31
    first = monthly([31], date(2024, 6, 1))
    second = monthly([10, 31], date(2024, 6, 1))
    assert has_conflict(first, [second])
    assert has_conflict(second, [first])


def test_open_ended_monthly_schedules_on_different_days():
    first = monthly([1, 15], date(2024, 6, 1))
    others = [monthly([day], date(2024, 6, 1)) for day in range(2, 15)]
    assert not has_conflict(first, others)


def test_monthly_schedule_against_daily_schedule():
    daily = TimeSlot(
        startDate=date(2024, 6, 2), startTime="18:30", endTime="20:00",
        recurringPattern=RecurringPattern.DAILY,
    )
    assert has_conflict(monthly([1], date(2024, 6, 1)), [daily])
    assert not has_conflict(monthly([1], date(2024, 6, 1), date(2024, 6, 30)), [daily])


def test_missing_end_time_runs_to_end_of_day():
    existing = once(date(2024, 6, 1), "20:00")
    assert has_conflict(once(date(2024, 6, 1), "23:00", "23:30"), [existing])


def test_no_existing_slots_means_no_conflict():
    assert not has_conflict(once(date(2024, 6, 1), "09:00", "10:00"), [])


PAIRS = [
    (once(date(2024, 6, 1), "09:00", "10:00"), once(date(2024, 6, 1), "09:30", "10:30")),
    (once(date(2024, 6, 1), "09:00", "10:00"), once(date(2024, 6, 1), "10:00", "11:00")),
    (once(date(2024, 6, 1), "09:00", "09:00"), once(date(2024, 6, 1), "08:00", "10:00")),
    (once(date(2024, 6, 5), "08:00", "08:30"),
     weekly([Weekday.WEDNESDAY], "08:15", "09:00", date(2024, 6, 1))),
    (weekly([Weekday.FRIDAY], "08:00", "09:00", date(2024, 6, 1)),
     TimeSlot(startDate=date(2024, 6, 10), startTime="08:30", recurringPattern=RecurringPattern.DAILY)),
    (TimeSlot(startDate=date(2024, 6, 1), startTime="12:00", endTime="13:00",
              recurringPattern=RecurringPattern.MONTHLY, recurringDates=[3]),
     weekly([Weekday.MONDAY], "12:30", "14:00", date(2024, 6, 1))),
]


@pytest.mark.parametrize("a, b", PAIRS)
def test_conflict_detection_is_symmetric(a, b):
    assert slots_conflict(a, b) == slots_conflict(b, a)
    assert has_conflict(a, [b]) == has_conflict(b, [a])


def test_generate_occurrences_for_weekly_schedule():
    schedule = weekly(
        [Weekday.MONDAY, Weekday.WEDNESDAY], "08:00", "09:00", date(2024, 6, 3), date(2024, 6, 16),
    )
    occurrences = list(generate_occurrences(schedule))
    assert [start for start, _ in occurrences] == [
        datetime(2024, 6, 3, 8, 0),
        datetime(2024, 6, 5, 8, 0),
        datetime(2024, 6, 10, 8, 0),
        datetime(2024, 6, 12, 8, 0),
    ]
    assert occurrences[0][1] == datetime(2024, 6, 3, 9, 0)


def test_one_time_slot_occurs_once_even_with_end_date():
    slot = TimeSlot(startDate=date(2024, 6, 1), endDate=date(2024, 6, 30), startTime="09:00")
    assert len(list(generate_occurrences(slot))) == 1


def test_unterminated_recurring_slot_is_bounded():
    slot = TimeSlot(startDate=date(2024, 6, 1), startTime="09:00", recurringPattern=RecurringPattern.DAILY)
    assert last_day(slot) == FAR_FUTURE == date(2100, 12, 31)


def test_parse_time():
    assert parse_time("09:05").hour == 9
    assert parse_time("9:05").minute == 5


@pytest.mark.parametrize("value", ["9am", "25:00", "12:61", "12", "ab:cd"])
def test_malformed_times_are_rejected(value):
    with pytest.raises(InvalidFormat):
        parse_time(value)
    with pytest.raises(InvalidFormat):
        has_conflict(once(date(2024, 6, 1), value), [once(date(2024, 6, 1), "09:00")])


def test_end_before_start_is_rejected():
    with pytest.raises(InvalidFormat):
        has_conflict(once(date(2024, 6, 1), "10:00", "09:00"), [once(date(2024, 6, 1), "09:00")])
