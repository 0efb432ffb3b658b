"""
Appointment slot generation for provider shifts (expedientes).

A shift covers a date range and a daily time window; every date in the range
gets one slot per `interval_minutes` step that fits entirely inside the
window. The generator is a pure function: persistence and duplicate
detection belong to the caller.
"""

from datetime import date, datetime, time, timedelta

from ...shared.validators import validate_time_of_day

# Weekday labels stored in expedientes.semana, indexed like date.isoweekday() % 7
WEEKDAYS = {
    "Domingo": 0,
    "Segunda": 1,
    "Terça": 2,
    "Quarta": 3,
    "Quinta": 4,
    "Sexta": 5,
    "Sábado": 6,
}


def weekday_index(weekday_name: str) -> int:
    """Sunday-based index of a weekday label; unknown labels raise ValueError"""
    if weekday_name not in WEEKDAYS:
        raise ValueError(f"Dia da semana inválido: {weekday_name}")
    return WEEKDAYS[weekday_name]


def time_to_minutes(value: str) -> int:
    """Minutes since midnight of an HH:MM[:SS] string"""
    hours, minutes = validate_time_of_day(value).split(":")
    return int(hours) * 60 + int(minutes)


def iter_dates(start_date: date, end_date: date):
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def generate_slots(
    start_date: date,
    end_date: date,
    weekday_name: str,
    start_time: str,
    end_time: str,
    interval_minutes: int,
    filter_weekday: bool = False,
) -> list[datetime]:
    """
    Timestamps of the appointment slots of a shift, date-then-time ordered.

    With filter_weekday=False every date in [start_date, end_date] produces
    slots and weekday_name is only validated (the legacy panel stores it as a
    label). With filter_weekday=True only dates falling on weekday_name do.

    An end date before the start date is an empty range and yields no slots;
    the caller decides whether that is an error.

    Raises:
        ValueError: unknown weekday, malformed times or interval <= 0
    """
    target_weekday = weekday_index(weekday_name)
    start_minutes = time_to_minutes(start_time)
    end_minutes = time_to_minutes(end_time)

    if isinstance(interval_minutes, bool) or not isinstance(interval_minutes, int):
        raise ValueError(f"Intervalo inválido: {interval_minutes}")
    if interval_minutes <= 0:
        raise ValueError("O intervalo deve ser maior que zero")

    slots = []
    for day in iter_dates(start_date, end_date):
        if filter_weekday and day.isoweekday() % 7 != target_weekday:
            continue

        minutes = start_minutes
        while minutes + interval_minutes <= end_minutes:
            slots.append(datetime.combine(day, time(minutes // 60, minutes % 60)))
            minutes += interval_minutes

    return slots
