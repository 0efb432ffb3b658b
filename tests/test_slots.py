from datetime import date, datetime

import pytest

from app.domain.scheduling.slots import WEEKDAYS, generate_slots, time_to_minutes, weekday_index


def test_single_day_half_hour_slots():
    slots = generate_slots(date(2026, 10, 19), date(2026, 10, 19), "Segunda", "08:00", "10:30", 30)

    assert slots == [
        datetime(2026, 10, 19, 8, 0),
        datetime(2026, 10, 19, 8, 30),
        datetime(2026, 10, 19, 9, 0),
        datetime(2026, 10, 19, 9, 30),
        datetime(2026, 10, 19, 10, 0),
    ]


def test_two_hour_window_half_hour_interval():
    slots = generate_slots(date(2026, 10, 19), date(2026, 10, 19), "Segunda", "08:00", "10:00", 30)
    assert [s.strftime("%H:%M") for s in slots] == ["08:00", "08:30", "09:00", "09:30"]


def test_slot_must_fit_inside_window():
    # 08:50 - 08:00 leaves room for one 30 minute slot only
    slots = generate_slots(date(2026, 10, 19), date(2026, 10, 19), "Segunda", "08:00", "08:50", 30)
    assert slots == [datetime(2026, 10, 19, 8, 0)]


def test_window_shorter_than_interval_yields_nothing():
    assert generate_slots(date(2026, 10, 19), date(2026, 10, 19), "Segunda", "08:00", "08:20", 30) == []


def test_every_date_in_range_without_weekday_filter():
    slots = generate_slots(date(2026, 10, 19), date(2026, 10, 25), "Segunda", "08:00", "09:00", 60)

    assert len(slots) == 7
    assert [s.date() for s in slots] == [date(2026, 10, d) for d in range(19, 26)]


def test_weekday_filter_keeps_matching_dates():
    slots = generate_slots(
        date(2026, 10, 19), date(2026, 11, 1), "Segunda", "08:00", "09:00", 30, filter_weekday=True
    )

    assert [s.date() for s in slots] == [
        date(2026, 10, 19),
        date(2026, 10, 19),
        date(2026, 10, 26),
        date(2026, 10, 26),
    ]


def test_weekday_filter_sunday():
    slots = generate_slots(
        date(2026, 10, 19), date(2026, 10, 25), "Domingo", "10:00", "11:00", 60, filter_weekday=True
    )
    assert slots == [datetime(2026, 10, 25, 10, 0)]


def test_slots_are_ordered_by_date_then_time():
    slots = generate_slots(date(2026, 10, 19), date(2026, 10, 21), "Segunda", "08:00", "10:00", 20)
    assert slots == sorted(slots)
    assert len(slots) == 3 * 6


def test_times_with_seconds_are_accepted():
    slots = generate_slots(date(2026, 10, 19), date(2026, 10, 19), "Segunda", "8:00:00", "09:00:00", 30)
    assert slots == [datetime(2026, 10, 19, 8, 0), datetime(2026, 10, 19, 8, 30)]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"weekday_name": "Feriado"},
        {"start_time": "25:00"},
        {"end_time": "abc"},
        {"interval_minutes": 0},
        {"interval_minutes": -15},
        {"interval_minutes": "30"},
    ],
)
def test_invalid_input_raises_value_error(kwargs):
    params = {
        "start_date": date(2026, 10, 19),
        "end_date": date(2026, 10, 19),
        "weekday_name": "Segunda",
        "start_time": "08:00",
        "end_time": "10:00",
        "interval_minutes": 30,
    }
    params.update(kwargs)

    with pytest.raises(ValueError):
        generate_slots(**params)


def test_weekday_labels():
    assert weekday_index("Domingo") == 0
    assert weekday_index("Sábado") == 6
    assert len(WEEKDAYS) == 7


def test_time_to_minutes():
    assert time_to_minutes("00:00") == 0
    assert time_to_minutes("13:45") == 13 * 60 + 45


def test_end_before_start_is_an_empty_range():
    assert generate_slots(date(2026, 10, 20), date(2026, 10, 19), "Segunda", "08:00", "10:00", 30) == []


def test_timestamps_are_unique():
    slots = generate_slots(date(2026, 10, 1), date(2026, 10, 31), "Segunda", "07:00", "19:00", 15)
    assert len(set(slots)) == len(slots)
