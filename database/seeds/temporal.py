"""
Date ordering between dependent and anchor entities.

A booking is anchored on its event: when the event lies in the future the
booking date falls between now and the event. When the event is already in
the past the booking gets an arbitrary past date, unless strict mode asks
for it to stay before the event as well.
"""

import random
from datetime import UTC, datetime, timedelta

# Window used for dates drawn in the past
PAST_WINDOW = timedelta(days=365)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def random_datetime_between(start: datetime, end: datetime, rng: random.Random) -> datetime:
    """Uniform datetime in [start, end), microsecond resolution."""
    span = int((end - start) / timedelta(microseconds=1))
    if span <= 0:
        return start
    return start + timedelta(microseconds=rng.randrange(span))


def resolve_dependent_date(
    anchor: datetime,
    rng: random.Random,
    now: datetime | None = None,
    strict: bool = False,
) -> datetime:
    """
    Produce a date for an entity that depends on an anchor date.

    Args:
        anchor: Date of the anchor entity (e.g. the event date)
        rng: Random source, usually Faker.random
        now: Reference "now" (defaults to the current UTC time)
        strict: In the past-anchor branch, draw from the year ending at the
            anchor so the result never exceeds it

    Returns:
        - anchor > now: a date in [now, anchor)
        - otherwise: a date within the year before now (strict: the year
          before anchor); no ordering against anchor without strict
    """
    anchor = as_utc(anchor)
    now = as_utc(now or datetime.now(UTC))

    if anchor > now:
        return random_datetime_between(now, anchor, rng)

    upper = anchor if strict else now
    return random_datetime_between(upper - PAST_WINDOW, upper, rng)
