"""Enumeration types for catalog entities."""

from enum import Enum


class DealType(str, Enum):
    SALE = "sale"
    RENT = "rent"


class Category(str, Enum):
    NEWBUILD = "newbuild"
    SECONDARY = "secondary"
    RENT = "rent"


class Status(str, Enum):
    ACTIVE = "active"
    HIDDEN = "hidden"
    ARCHIVED = "archived"


class PricePeriod(str, Enum):
    MONTH = "month"


class EntityKind(str, Enum):
    LISTINGS = "listings"
    COMPLEXES = "complexes"


class FeedSchema(str, Enum):
    GENERIC = "generic"
    YANDEX = "yandex"


class ChangeAction(str, Enum):
    INSERTED = "inserted"
    UPDATED = "updated"
    HIDDEN = "hidden"
