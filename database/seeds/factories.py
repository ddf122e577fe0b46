"""
Entity factories for the synthetic dataset.

Each factory builds one validated document model from a Faker instance and
the foreign ids it must reference. Factories never touch the database; the
orchestrator persists what they return.

Faker.random is the single random source, so seeding Faker
(Faker.seed_instance) makes a whole run reproducible.
"""

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

from bson import ObjectId
from faker import Faker

from database.models import (
    BUDGET_FIELDS,
    MAX_RATING,
    MIN_RATING,
    Address,
    Booking,
    BookingStatus,
    Budget,
    Client,
    Event,
    Inclusion,
    OrderType,
    PackageSnapshot,
    Permit,
    PermitType,
    Tag,
    TagName,
    Vendor,
    VendorPackage,
    VendorReview,
)
from database.seeds.random_subset import random_subset
from database.seeds.temporal import resolve_dependent_date

# Field ranges
MAX_BLOCKED_DAYS = 10
BLOCKED_DAYS_HORIZON_DAYS = 180
MAX_INCLUSIONS = 5
MAX_INCLUSION_QUANTITY = 20
PRICE_RANGE = (5_000.0, 250_000.0)
CAPACITY_RANGE = (10, 500)
ATTENDEES_RANGE = (20, 500)
BUDGET_RANGE = (1_000.0, 100_000.0)

# Events are spread over half a year back and a year ahead of now
EVENT_PAST_WINDOW = timedelta(days=180)
EVENT_FUTURE_WINDOW = timedelta(days=365)

# Permits expire between six months ago and two years ahead
PERMIT_PAST_WINDOW = timedelta(days=180)
PERMIT_FUTURE_WINDOW = timedelta(days=730)

EVENT_KINDS = (
    "Wedding",
    "Birthday",
    "Debut",
    "Anniversary",
    "Baptism",
    "Corporate Party",
    "Reunion",
    "Graduation",
)

PACKAGE_TIERS = ("Basic", "Classic", "Premium", "Deluxe", "Grand")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _money(fake: Faker, low: float, high: float) -> float:
    return round(fake.random.uniform(low, high), 2)


# ============================================================================
# Independent entities
# ============================================================================


def make_client(fake: Faker) -> Client:
    return Client(
        first_name=fake.first_name(),
        last_name=fake.last_name(),
        email=fake.email(),
        phone=fake.phone_number(),
        avatar=fake.image_url(width=200, height=200),
    )


def make_permits(fake: Faker, now: datetime | None = None) -> list[Permit]:
    """
    Build a vendor's credential list.

    Picks a random non-empty subset of PermitType, so each type appears at
    most once and the list holds between 1 and len(PermitType) permits.
    """
    now = now or _utcnow()
    permits = []
    for permit_type in random_subset(list(PermitType), fake.random):
        permits.append(
            Permit(
                type=permit_type,
                is_verified=fake.boolean(),
                expires_at=fake.date_time_between(
                    start_date=now - PERMIT_PAST_WINDOW,
                    end_date=now + PERMIT_FUTURE_WINDOW,
                    tzinfo=UTC,
                ),
            )
        )
    return permits


def make_blocked_days(fake: Faker, now: datetime | None = None) -> list[datetime]:
    """Random set of upcoming days (UTC midnight) the vendor is unavailable."""
    today = (now or _utcnow()).replace(hour=0, minute=0, second=0, microsecond=0)
    count = fake.random.randint(0, MAX_BLOCKED_DAYS)
    days = {
        today + timedelta(days=fake.random.randint(1, BLOCKED_DAYS_HORIZON_DAYS))
        for _ in range(count)
    }
    return sorted(days)


def make_vendor(fake: Faker, now: datetime | None = None) -> Vendor:
    return Vendor(
        name=fake.company(),
        email=fake.company_email(),
        phone=fake.phone_number(),
        address=Address(
            street=fake.street_address(),
            city=fake.city(),
            state=fake.state(),
            zip_code=fake.postcode(),
        ),
        blocked_days=make_blocked_days(fake, now),
        permits=make_permits(fake, now),
        visible=fake.boolean(chance_of_getting_true=80),
        logo=fake.image_url(),
    )


def make_tags(names: Sequence[TagName] | None = None) -> list[Tag]:
    """One tag per name; defaults to every TagName."""
    return [Tag(name=name) for name in (list(TagName) if names is None else names)]


# ============================================================================
# First-level dependents
# ============================================================================


def make_inclusions(fake: Faker) -> list[Inclusion]:
    """Build a package's inclusion list with a fixed count drawn up front."""
    count = fake.random.randint(1, MAX_INCLUSIONS)
    inclusions = []
    for _ in range(count):
        inclusions.append(
            Inclusion(
                name=fake.word().title(),
                description=fake.sentence(),
                quantity=fake.random.randint(1, MAX_INCLUSION_QUANTITY),
            )
        )
    return inclusions


def make_package(
    fake: Faker, vendor_id: ObjectId, tag_ids: Sequence[ObjectId] = ()
) -> VendorPackage:
    """
    Build a package for a vendor.

    Args:
        fake: Random source
        vendor_id: Owning vendor
        tag_ids: Candidate tag ids; a random non-empty subset is attached
            when any are given
    """
    return VendorPackage(
        vendor_id=vendor_id,
        name=f"{fake.random.choice(PACKAGE_TIERS)} {fake.word().title()} Package",
        image_url=fake.image_url(),
        price=_money(fake, *PRICE_RANGE),
        capacity=fake.random.randint(*CAPACITY_RANGE),
        order_types=random_subset(list(OrderType), fake.random),
        tags=random_subset(tag_ids, fake.random) if tag_ids else [],
        inclusions=make_inclusions(fake),
    )


def make_budget(fake: Faker) -> Budget:
    """
    Build an event budget.

    Each category is decided on its own coin flip: either a random amount
    or None.
    """
    values = {}
    for field in BUDGET_FIELDS:
        values[field] = _money(fake, *BUDGET_RANGE) if fake.boolean() else None
    return Budget(**values)


def make_event(fake: Faker, client_id: ObjectId, now: datetime | None = None) -> Event:
    now = now or _utcnow()
    return Event(
        client_id=client_id,
        name=f"{fake.last_name()} {fake.random.choice(EVENT_KINDS)}",
        date=fake.date_time_between(
            start_date=now - EVENT_PAST_WINDOW,
            end_date=now + EVENT_FUTURE_WINDOW,
            tzinfo=UTC,
        ),
        attendees=fake.random.randint(*ATTENDEES_RANGE),
        budget=make_budget(fake),
    )


# ============================================================================
# Second-level dependents
# ============================================================================


def snapshot_package(package: VendorPackage) -> PackageSnapshot:
    """Copy a package for embedding, without its vendorId."""
    return PackageSnapshot.model_validate(package.model_dump(exclude={"vendor_id"}))


def make_booking(
    fake: Faker,
    vendor_id: ObjectId,
    event_id: ObjectId,
    client_id: ObjectId,
    event_date: datetime,
    package: VendorPackage,
    now: datetime | None = None,
    strict_dates: bool = False,
) -> Booking:
    """
    Build a booking of a vendor for an event.

    The booking date is resolved against the event date: before the event
    when the event is upcoming, any past date otherwise (see
    resolve_dependent_date for strict_dates).
    """
    return Booking(
        vendor_id=vendor_id,
        event_id=event_id,
        client_id=client_id,
        date=resolve_dependent_date(event_date, fake.random, now=now, strict=strict_dates),
        status=fake.random.choice(list(BookingStatus)),
        package=snapshot_package(package),
    )


def make_review(
    fake: Faker, vendor_id: ObjectId, client_id: ObjectId, package: VendorPackage
) -> VendorReview:
    return VendorReview(
        vendor_id=vendor_id,
        client_id=client_id,
        rating=fake.random.randint(MIN_RATING, MAX_RATING),
        package=snapshot_package(package),
        comment=fake.paragraph(),
    )
