"""
Pydantic document models for the seeded MongoDB collections.

This module defines the persisted documents:
- users: Clients who own events
- vendors: Service providers with permits and blocked days
- tags: Upper-case service categories attached to packages
- vendorPackages: Priced offers belonging to a vendor
- events: Client events that accumulate booking ids
- bookings: A vendor booked for an event, with a package snapshot
- vendorReviews: Client ratings of a vendor package

All models use:
- BSON ObjectId primary keys stored as "_id" (auto-generated)
- camelCase field names as persisted
- Timezone-aware UTC datetimes
- Closed string enumerations validated at construction
"""

from datetime import datetime
from enum import Enum as PyEnum
from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

# ============================================================================
# Collections
# ============================================================================

USERS = "users"
VENDORS = "vendors"
VENDOR_PACKAGES = "vendorPackages"
VENDOR_REVIEWS = "vendorReviews"
EVENTS = "events"
BOOKINGS = "bookings"
TAGS = "tags"

ALL_COLLECTIONS = (USERS, VENDORS, VENDOR_PACKAGES, VENDOR_REVIEWS, EVENTS, BOOKINGS, TAGS)

MIN_RATING = 1
MAX_RATING = 5


# ============================================================================
# Enums
# ============================================================================


class BookingStatus(str, PyEnum):
    """Booking lifecycle status."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    DECLINED = "DECLINED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class PermitType(str, PyEnum):
    """Credential categories a vendor may hold, at most one of each."""

    BUSINESS_PERMIT = "BUSINESS_PERMIT"
    SANITARY_PERMIT = "SANITARY_PERMIT"
    FIRE_SAFETY_CERTIFICATE = "FIRE_SAFETY_CERTIFICATE"
    BIR_REGISTRATION = "BIR_REGISTRATION"


class OrderType(str, PyEnum):
    """How a package is delivered to the event."""

    PICKUP = "PICKUP"
    DELIVERY = "DELIVERY"
    ON_SITE = "ON_SITE"


class TagName(str, PyEnum):
    """Service category tags."""

    CATERING = "CATERING"
    PHOTOGRAPHY = "PHOTOGRAPHY"
    VIDEOGRAPHY = "VIDEOGRAPHY"
    FLORIST = "FLORIST"
    VENUE = "VENUE"
    MUSIC = "MUSIC"
    LIGHTS_AND_SOUNDS = "LIGHTS_AND_SOUNDS"
    HOST = "HOST"
    MAKEUP = "MAKEUP"
    PASTRY = "PASTRY"


# ============================================================================
# Base Class
# ============================================================================


class Document(BaseModel):
    """Base class for all persisted and embedded documents."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        use_enum_values=True,
    )

    def to_document(self) -> dict[str, Any]:
        """Return the BSON-ready dict, with "_id" and camelCase keys."""
        return self.model_dump(by_alias=True)


# ============================================================================
# Embedded Documents
# ============================================================================


class Address(Document):
    street: str
    city: str
    state: str
    zip_code: str = Field(alias="zipCode")


class Permit(Document):
    """Vendor credential with verification flag and expiry."""

    type: PermitType
    is_verified: bool = Field(alias="isVerified")
    expires_at: datetime = Field(alias="expiresAt")


class Inclusion(Document):
    """One good or service included in a package."""

    name: str
    description: str
    quantity: int = Field(ge=1)


class Budget(Document):
    """
    Event budget per spending category.

    Every field is optional on its own; None is persisted as null.
    """

    venue: float | None = None
    catering: float | None = None
    decorations: float | None = None
    photography: float | None = None
    entertainment: float | None = None
    attire: float | None = None
    miscellaneous: float | None = None


BUDGET_FIELDS = tuple(Budget.model_fields)


class PackageSnapshot(Document):
    """Copy of a vendor package embedded in bookings and reviews."""

    id: ObjectId = Field(alias="_id")
    name: str
    image_url: str = Field(alias="imageUrl")
    price: float = Field(ge=0)
    capacity: int = Field(ge=1)
    order_types: list[OrderType] = Field(alias="orderTypes", min_length=1)
    tags: list[ObjectId] = Field(default_factory=list)
    inclusions: list[Inclusion] = Field(default_factory=list)


# ============================================================================
# Core Documents
# ============================================================================


class Client(Document):
    """Client (users collection) - owns events."""

    id: ObjectId = Field(default_factory=ObjectId, alias="_id")
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    phone: str
    avatar: str


class Vendor(Document):
    """
    Vendor model - service providers booked for events.

    Permits hold at most one credential per PermitType. Blocked days are
    kept sorted and unique.
    """

    id: ObjectId = Field(default_factory=ObjectId, alias="_id")
    name: str
    email: str
    phone: str
    address: Address
    blocked_days: list[datetime] = Field(alias="blockedDays", default_factory=list)
    permits: list[Permit] = Field(min_length=1, max_length=len(PermitType))
    visible: bool = True
    logo: str

    @field_validator("permits")
    @classmethod
    def permit_types_unique(cls, permits: list[Permit]) -> list[Permit]:
        types = [permit.type for permit in permits]
        if len(types) != len(set(types)):
            raise ValueError(f"Duplicate permit types: {types}")
        return permits

    @field_validator("blocked_days")
    @classmethod
    def blocked_days_as_set(cls, days: list[datetime]) -> list[datetime]:
        return sorted(set(days))


class Tag(Document):
    id: ObjectId = Field(default_factory=ObjectId, alias="_id")
    name: TagName


class VendorPackage(Document):
    """Priced offer of a vendor."""

    id: ObjectId = Field(default_factory=ObjectId, alias="_id")
    vendor_id: ObjectId = Field(alias="vendorId")
    name: str
    image_url: str = Field(alias="imageUrl")
    price: float = Field(ge=0)
    capacity: int = Field(ge=1)
    order_types: list[OrderType] = Field(alias="orderTypes", min_length=1)
    tags: list[ObjectId] = Field(default_factory=list)
    inclusions: list[Inclusion] = Field(default_factory=list)


class Event(Document):
    """
    Event model - a client's event that vendors are booked for.

    bookings is append-only during a seed run and is written through the
    referential linker, never replaced.
    """

    id: ObjectId = Field(default_factory=ObjectId, alias="_id")
    client_id: ObjectId = Field(alias="clientId")
    name: str
    date: datetime
    attendees: int = Field(ge=1)
    budget: Budget
    bookings: list[ObjectId] = Field(default_factory=list)


class Booking(Document):
    id: ObjectId = Field(default_factory=ObjectId, alias="_id")
    vendor_id: ObjectId = Field(alias="vendorId")
    event_id: ObjectId = Field(alias="eventId")
    client_id: ObjectId = Field(alias="clientId")
    date: datetime
    status: BookingStatus
    package: PackageSnapshot


class VendorReview(Document):
    id: ObjectId = Field(default_factory=ObjectId, alias="_id")
    vendor_id: ObjectId = Field(alias="vendorId")
    client_id: ObjectId = Field(alias="clientId")
    rating: int = Field(ge=MIN_RATING, le=MAX_RATING)
    package: PackageSnapshot
    comment: str
