"""Pytest configuration and fixtures."""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import pytest

from catalog_sync.models.catalog import Listing
from catalog_sync.models.enums import Category, DealType


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def now() -> datetime:
    """Fixed run timestamp."""
    return datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def later() -> datetime:
    """Timestamp of a second run."""
    return datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def source_id() -> str:
    """Sample feed source id."""
    return "developer-a"


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Deterministic record ids: rec-1, rec-2, ..."""
    counter = iter(range(1, 1_000_000))
    return lambda: f"rec-{next(counter)}"


@pytest.fixture
def generic_rows() -> list[dict[str, Any]]:
    """Three lots of two complexes in the generic schema."""
    return [
        {
            "external_id": "lot-1",
            "title": "1-комнатная квартира",
            "rooms": "1",
            "price": "12 500 000",
            "area": "38,5",
            "district": "САО",
            "metro": "м. Сокол; м. Аэропорт",
            "photos": "https://img/1.jpg|https://img/2.jpg",
            "complex_external_id": "zhk-sokol",
            "complex_title": "ЖК Сокол",
            "developer": "ПИК",
            "handover_date": "3 кв. 2026",
        },
        {
            "external_id": "lot-2",
            "title": "2-комнатная квартира",
            "rooms": 2,
            "price": 18_900_000,
            "area": 54.3,
            "district": "САО",
            "metro": ["м. Сокол"],
            "photos": "https://img/3.jpg",
            "complex_external_id": "zhk-sokol",
            "complex_title": "ЖК Сокол",
        },
        {
            "external_id": "lot-3",
            "title": "Студия",
            "rooms": "0",
            "price": "9 100 000",
            "area": "24",
            "district": "СВАО",
            "metro": "м. ВДНХ",
            "complex_external_id": "zhk-vdnh",
            "complex_title": "ЖК ВДНХ",
        },
    ]


@pytest.fixture
def yandex_offer() -> dict[str, Any]:
    """One Yandex Realty offer as converted from XML."""
    return {
        "@_internal-id": "Y-100500",
        "type": "продажа",
        "category": "квартира",
        "rooms": 2,
        "price": {"value": 27490000, "currency": "RUB"},
        "area": {"value": "61,2", "unit": "кв. м"},
        "location": {
            "locality-name": "Москва",
            "address": "Ленинградский проспект, 80",
            "metro": [
                {"name": "Сокол", "time-on-foot": 7},
                {"name": {"#text": "Аэропорт"}, "time-on-foot": 12},
            ],
        },
        "building-name": "ЖК Символ",
        "sales-agent": {"category": "developer", "organization": "Донстрой"},
        "built-year": 2027,
        "ready-quarter": 2,
        "deal-status": "первичная продажа",
        "image": [
            {"@_tag": "plan", "#text": "https://img/plan-1.png"},
            "https://img/plan-2.png",
        ],
        "floor": "7",
        "floors-total": 24,
        "description": "Квартира с видом на парк",
    }


def _make_listing(
    external_id: str,
    source_id: str = "developer-a",
    record_id: str = "",
    **overrides: Any,
) -> Listing:
    """Build a listing with sensible defaults for reconciliation tests."""
    values: dict[str, Any] = {
        "id": record_id,
        "source_id": source_id,
        "external_id": external_id,
        "slug": external_id,
        "title": external_id,
        "deal_type": DealType.SALE,
        "category": Category.NEWBUILD,
        "bedrooms": 1,
        "price": 10_000_000.0,
        "area_total": 40.0,
    }
    values.update(overrides)
    return Listing(**values)


@pytest.fixture
def make_listing() -> Callable[..., Listing]:
    """Factory for stored listings."""
    return _make_listing
