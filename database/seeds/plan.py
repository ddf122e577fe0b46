"""
Seed run configuration.

DEFAULT_PLAN is the static selection of phases a run executes, in order,
with the number of documents each phase creates. Edit it here to switch
phases on or off; it is not read from the environment.
"""

from dataclasses import dataclass, field
from enum import Enum

from database.models import (
    BOOKINGS,
    EVENTS,
    TAGS,
    TagName,
    USERS,
    VENDOR_PACKAGES,
    VENDOR_REVIEWS,
    VENDORS,
)


class SeedPlanError(Exception):
    """Raised when a seed plan orders or configures phases inconsistently."""

    pass


class SeedPhase(str, Enum):
    """One ordered step of a seed run."""

    CLIENTS = "clients"
    VENDORS = "vendors"
    TAGS = "tags"
    EVENTS = "events"
    PACKAGES = "packages"
    BOOKINGS = "bookings"
    REVIEWS = "reviews"


class LinkStrategy(str, Enum):
    """How booking ids are written back onto their events."""

    # All bookings inserted in one batch, then one $push per event
    BATCH = "batch"
    # Bookings created concurrently, each inserted and pushed on its own
    PER_ENTITY = "per_entity"


# Collection written by each phase
PHASE_COLLECTIONS: dict[SeedPhase, str] = {
    SeedPhase.CLIENTS: USERS,
    SeedPhase.VENDORS: VENDORS,
    SeedPhase.TAGS: TAGS,
    SeedPhase.EVENTS: EVENTS,
    SeedPhase.PACKAGES: VENDOR_PACKAGES,
    SeedPhase.BOOKINGS: BOOKINGS,
    SeedPhase.REVIEWS: VENDOR_REVIEWS,
}

# Phases that must run earlier in the same plan
PHASE_DEPENDENCIES: dict[SeedPhase, frozenset[SeedPhase]] = {
    SeedPhase.CLIENTS: frozenset(),
    SeedPhase.VENDORS: frozenset(),
    SeedPhase.TAGS: frozenset(),
    SeedPhase.EVENTS: frozenset({SeedPhase.CLIENTS}),
    SeedPhase.PACKAGES: frozenset({SeedPhase.VENDORS, SeedPhase.TAGS}),
    SeedPhase.BOOKINGS: frozenset({SeedPhase.VENDORS, SeedPhase.EVENTS}),
    SeedPhase.REVIEWS: frozenset({SeedPhase.VENDORS, SeedPhase.CLIENTS, SeedPhase.PACKAGES}),
}


# SeedCounts attribute holding each phase's count
PHASE_COUNT_FIELDS: dict[SeedPhase, str] = {
    SeedPhase.CLIENTS: "clients",
    SeedPhase.VENDORS: "vendors",
    SeedPhase.EVENTS: "events",
    SeedPhase.PACKAGES: "packages_per_vendor",
    SeedPhase.BOOKINGS: "bookings",
    SeedPhase.REVIEWS: "reviews",
}


@dataclass(frozen=True)
class SeedCounts:
    """Documents created per phase. Packages are per vendor."""

    clients: int = 10
    vendors: int = 10
    events: int = 25
    packages_per_vendor: int = 3
    bookings: int = 10
    reviews: int = 20


@dataclass(frozen=True)
class SeedPlan:
    """
    Ordered phases plus their counts.

    Validated on construction: phases are unique, every phase's
    dependencies appear before it, counts are non-negative.
    """

    phases: tuple[SeedPhase, ...]
    counts: SeedCounts = field(default_factory=SeedCounts)
    link_strategy: LinkStrategy = LinkStrategy.BATCH
    collections_to_drop: tuple[str, ...] = tuple(PHASE_COLLECTIONS.values())

    def __post_init__(self) -> None:
        seen: set[SeedPhase] = set()
        for phase in self.phases:
            if phase in seen:
                raise SeedPlanError(f"Phase '{phase.value}' listed twice")
            missing = PHASE_DEPENDENCIES[phase] - seen
            if missing:
                names = ", ".join(sorted(p.value for p in missing))
                raise SeedPlanError(
                    f"Phase '{phase.value}' requires earlier phase(s): {names}"
                )
            seen.add(phase)

        for name, value in vars(self.counts).items():
            if value < 0:
                raise SeedPlanError(f"Count '{name}' must be >= 0, got {value}")

        for phase in self.phases:
            if self.count_for(phase) == 0:
                continue
            empty = [p.value for p in PHASE_DEPENDENCIES[phase] if self.count_for(p) == 0]
            if empty:
                raise SeedPlanError(
                    f"Phase '{phase.value}' draws from empty phase(s): {', '.join(sorted(empty))}"
                )

    def count_for(self, phase: SeedPhase) -> int:
        """Documents a phase creates (packages: per vendor, tags: one per TagName)."""
        if phase is SeedPhase.TAGS:
            return len(TagName)
        return getattr(self.counts, PHASE_COUNT_FIELDS[phase])

    def includes(self, phase: SeedPhase) -> bool:
        return phase in self.phases


DEFAULT_PLAN = SeedPlan(
    phases=(
        SeedPhase.CLIENTS,
        SeedPhase.VENDORS,
        # SeedPhase.TAGS and SeedPhase.PACKAGES feed vendor packages and reviews
        SeedPhase.EVENTS,
        SeedPhase.BOOKINGS,
    ),
)

FULL_PLAN = SeedPlan(
    phases=(
        SeedPhase.CLIENTS,
        SeedPhase.VENDORS,
        SeedPhase.TAGS,
        SeedPhase.EVENTS,
        SeedPhase.PACKAGES,
        SeedPhase.BOOKINGS,
        SeedPhase.REVIEWS,
    ),
    link_strategy=LinkStrategy.PER_ENTITY,
)
