"""
Seed run orchestration.

A run drops every collection of the plan, then executes the plan's phases
strictly in order. Each phase generates its documents with the entity
factories, persists them with a single batch insert and records the new ids
in SeedState for later phases:

1. clients, vendors, tags - independent
2. events (clients), packages (vendors, tags)
3. bookings (vendors, events) - linked back onto events
4. reviews (vendors, clients, packages)

Any failure aborts the run; documents written by earlier phases are left in
place until the next run drops them.
"""

import asyncio
import logging
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime

from bson import ObjectId
from faker import Faker

from database.connection import DocumentStore, StoreConnectionError, open_store
from database.models import EVENTS, VENDORS, Booking, VendorPackage
from database.seeds.factories import (
    make_booking,
    make_client,
    make_event,
    make_package,
    make_review,
    make_tags,
    make_vendor,
)
from database.seeds.linker import fetch_by_ids, group_links, insert_and_link, link_batch
from database.seeds.plan import (
    DEFAULT_PLAN,
    PHASE_COLLECTIONS,
    LinkStrategy,
    SeedPhase,
    SeedPlan,
)
from shared.config import Settings
from shared.logging_config import configure_logging
from shared.startup_validator import StartupValidationError, validate_startup_config

logger = logging.getLogger(__name__)

# Field on events holding the ids of their bookings
EVENT_BOOKINGS_FIELD = "bookings"


@dataclass
class SeedState:
    """Ids produced so far, handed forward to later phases."""

    client_ids: list[ObjectId] = field(default_factory=list)
    vendor_ids: list[ObjectId] = field(default_factory=list)
    tag_ids: list[ObjectId] = field(default_factory=list)
    event_ids: list[ObjectId] = field(default_factory=list)
    packages_by_vendor: dict[ObjectId, list[VendorPackage]] = field(default_factory=dict)
    booking_ids: list[ObjectId] = field(default_factory=list)
    review_ids: list[ObjectId] = field(default_factory=list)


@dataclass
class SeedReport:
    """Documents inserted per collection during a run."""

    counts: dict[str, int] = field(default_factory=dict)
    dropped: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(self.counts.values())


@dataclass
class SeedContext:
    store: DocumentStore
    plan: SeedPlan
    fake: Faker
    now: datetime
    strict_dates: bool = False
    state: SeedState = field(default_factory=SeedState)


def build_faker(seed: int | None = None) -> Faker:
    """Create the run's Faker; a seed makes its random source reproducible."""
    fake = Faker()
    if seed is not None:
        fake.seed_instance(seed)
    return fake


async def drop_collections(store: DocumentStore, names: tuple[str, ...] | list[str]) -> list[str]:
    """
    Drop each named collection, skipping ones that do not exist.

    Returns:
        Names of the collections actually dropped
    """
    dropped = []
    for name in names:
        if await store.drop_collection(name):
            dropped.append(name)
    return dropped


# ============================================================================
# Phases
# ============================================================================


async def seed_clients(ctx: SeedContext) -> int:
    clients = [make_client(ctx.fake) for _ in range(ctx.plan.counts.clients)]
    ctx.state.client_ids = await ctx.store.insert_many(
        PHASE_COLLECTIONS[SeedPhase.CLIENTS], [c.to_document() for c in clients]
    )
    return len(ctx.state.client_ids)


async def seed_vendors(ctx: SeedContext) -> int:
    vendors = [make_vendor(ctx.fake, ctx.now) for _ in range(ctx.plan.counts.vendors)]
    ctx.state.vendor_ids = await ctx.store.insert_many(
        PHASE_COLLECTIONS[SeedPhase.VENDORS], [v.to_document() for v in vendors]
    )
    return len(ctx.state.vendor_ids)


async def seed_tags(ctx: SeedContext) -> int:
    tags = make_tags()
    ctx.state.tag_ids = await ctx.store.insert_many(
        PHASE_COLLECTIONS[SeedPhase.TAGS], [t.to_document() for t in tags]
    )
    return len(ctx.state.tag_ids)


async def seed_events(ctx: SeedContext) -> int:
    events = [
        make_event(ctx.fake, ctx.fake.random.choice(ctx.state.client_ids), ctx.now)
        for _ in range(ctx.plan.counts.events)
    ]
    ctx.state.event_ids = await ctx.store.insert_many(
        PHASE_COLLECTIONS[SeedPhase.EVENTS], [e.to_document() for e in events]
    )
    return len(ctx.state.event_ids)


async def seed_packages(ctx: SeedContext) -> int:
    packages = []
    for vendor_id in ctx.state.vendor_ids:
        vendor_packages = [
            make_package(ctx.fake, vendor_id, ctx.state.tag_ids)
            for _ in range(ctx.plan.counts.packages_per_vendor)
        ]
        ctx.state.packages_by_vendor[vendor_id] = vendor_packages
        packages.extend(vendor_packages)

    inserted = await ctx.store.insert_many(
        PHASE_COLLECTIONS[SeedPhase.PACKAGES], [p.to_document() for p in packages]
    )
    return len(inserted)


def _package_for(ctx: SeedContext, vendor_id: ObjectId) -> VendorPackage:
    """A seeded package of the vendor, or an unpersisted one when none exist."""
    packages = ctx.state.packages_by_vendor.get(vendor_id)
    if packages:
        return ctx.fake.random.choice(packages)
    return make_package(ctx.fake, vendor_id, ctx.state.tag_ids)


async def _build_bookings(ctx: SeedContext) -> list[Booking]:
    """Pick (vendor, event) pairs from the pools and build their bookings."""
    rng = ctx.fake.random
    pairs = [
        (rng.choice(ctx.state.vendor_ids), rng.choice(ctx.state.event_ids))
        for _ in range(ctx.plan.counts.bookings)
    ]
    if not pairs:
        return []

    await fetch_by_ids(ctx.store, VENDORS, [v for v, _ in pairs], {"_id": 1})
    events = await fetch_by_ids(
        ctx.store, EVENTS, [e for _, e in pairs], {"date": 1, "clientId": 1}
    )

    bookings = []
    for vendor_id, event_id in pairs:
        event = events[event_id]
        bookings.append(
            make_booking(
                ctx.fake,
                vendor_id=vendor_id,
                event_id=event_id,
                client_id=event["clientId"],
                event_date=event["date"],
                package=_package_for(ctx, vendor_id),
                now=ctx.now,
                strict_dates=ctx.strict_dates,
            )
        )
    return bookings


async def seed_bookings(ctx: SeedContext) -> int:
    """
    Create bookings and record their ids on the booked events.

    BATCH inserts all bookings at once, then pushes each event's complete
    id list. PER_ENTITY creates the bookings concurrently, each insert
    followed by its own atomic push onto the event.
    """
    bookings = await _build_bookings(ctx)
    documents = [b.to_document() for b in bookings]
    collection = PHASE_COLLECTIONS[SeedPhase.BOOKINGS]

    if ctx.plan.link_strategy is LinkStrategy.PER_ENTITY:
        # The first failure cancels the remaining inserts and pushes
        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [
                    tg.create_task(
                        insert_and_link(
                            ctx.store,
                            collection,
                            document,
                            EVENTS,
                            document["eventId"],
                            EVENT_BOOKINGS_FIELD,
                        )
                    )
                    for document in documents
                ]
        except ExceptionGroup as group:
            raise group.exceptions[0] from group
        ctx.state.booking_ids = [task.result() for task in tasks]
    else:
        ctx.state.booking_ids = await ctx.store.insert_many(collection, documents)
        await link_batch(ctx.store, EVENTS, EVENT_BOOKINGS_FIELD, group_links(documents, "eventId"))

    return len(ctx.state.booking_ids)


async def seed_reviews(ctx: SeedContext) -> int:
    rng = ctx.fake.random
    vendors_with_packages = [v for v, p in ctx.state.packages_by_vendor.items() if p]
    reviews = []
    for _ in range(ctx.plan.counts.reviews):
        vendor_id = rng.choice(vendors_with_packages)
        reviews.append(
            make_review(
                ctx.fake,
                vendor_id=vendor_id,
                client_id=rng.choice(ctx.state.client_ids),
                package=rng.choice(ctx.state.packages_by_vendor[vendor_id]),
            )
        )

    ctx.state.review_ids = await ctx.store.insert_many(
        PHASE_COLLECTIONS[SeedPhase.REVIEWS], [r.to_document() for r in reviews]
    )
    return len(ctx.state.review_ids)


PHASE_RUNNERS = {
    SeedPhase.CLIENTS: seed_clients,
    SeedPhase.VENDORS: seed_vendors,
    SeedPhase.TAGS: seed_tags,
    SeedPhase.EVENTS: seed_events,
    SeedPhase.PACKAGES: seed_packages,
    SeedPhase.BOOKINGS: seed_bookings,
    SeedPhase.REVIEWS: seed_reviews,
}


# ============================================================================
# Entry points
# ============================================================================


async def seed_all(
    store: DocumentStore,
    plan: SeedPlan = DEFAULT_PLAN,
    fake: Faker | None = None,
    now: datetime | None = None,
    strict_dates: bool = False,
) -> SeedReport:
    """
    Drop the plan's collections and run its phases in order.

    Args:
        store: Open store handle
        plan: Phases and counts to run
        fake: Random source (a fresh unseeded Faker by default)
        now: Reference time for generated dates (defaults to current UTC)
        strict_dates: Keep booking dates before past events too

    Returns:
        SeedReport with inserted counts per collection
    """
    ctx = SeedContext(
        store=store,
        plan=plan,
        fake=fake if fake is not None else build_faker(),
        now=now or datetime.now(UTC),
        strict_dates=strict_dates,
    )
    report = SeedReport()

    logger.info(f"Dropping {len(plan.collections_to_drop)} collection(s)...")
    report.dropped = await drop_collections(store, plan.collections_to_drop)

    for phase in plan.phases:
        collection = PHASE_COLLECTIONS[phase]
        logger.info(f"Seeding {phase.value}...", extra={"phase": phase.value})
        count = await PHASE_RUNNERS[phase](ctx)
        report.counts[collection] = count
        logger.info(
            f"✓ Seeded {count} document(s) into '{collection}'",
            extra={"phase": phase.value, "collection": collection, "count": count},
        )

    logger.info(f"Database seeding complete: {report.total} document(s)")
    return report


async def run_seed(plan: SeedPlan = DEFAULT_PLAN, settings: Settings | None = None) -> int:
    """
    Run one seeding job end to end.

    Validates configuration, connects, seeds and closes the connection.
    Every outcome is logged; nothing is raised.

    Returns:
        Process exit status: 0 on success, 1 on any failure
    """
    configure_logging()
    if settings is None:
        try:
            settings = validate_startup_config()
        except StartupValidationError as e:
            logger.critical(f"Seeding blocked due to configuration errors: {e}")
            return 1
    configure_logging(settings.LOG_LEVEL)

    fake = build_faker(settings.SEED_RANDOM_SEED)
    try:
        async with open_store(settings) as store:
            await seed_all(
                store,
                plan,
                fake=fake,
                strict_dates=settings.SEED_STRICT_PAST_DATES,
            )
    except StoreConnectionError as e:
        logger.error(f"✗ Database connection failed: {e}")
        return 1
    except Exception:
        logger.exception("✗ Database seeding failed")
        return 1

    return 0


def main() -> None:
    """Run the seeder and exit the process with its status, always."""
    sys.exit(asyncio.run(run_seed()))
