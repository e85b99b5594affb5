"""Yandex Realty feed normalization.

Yandex feeds are XML. After XML-to-object conversion an ``<offer>`` becomes a
nested mapping where attributes carry the ``@_`` prefix, text nodes with
attributes keep their payload under ``#text``, single-value wrappers such as
``<price><value>…</value></price>`` stay nested, and repeated elements
(``<image>``, ``<metro>``) show up either as one object or as a list.

:func:`normalize_yandex_realty` flattens that shape into a generic row. Any
missing or oddly shaped piece yields an empty or absent field, never an
exception.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from catalog_sync.ingest.coercion import as_number, as_string, unique
from catalog_sync.models.base import Row
from catalog_sync.models.enums import Category, DealType

ATTRIBUTE_PREFIX = "@_"
TEXT_KEY = "#text"

RENT_TERMS = ("аренда", "rent")
PRIMARY_MARKET_TERM = "первичн"
NEW_FLAT_FLAGS = ("1", "true", "да")
DEVELOPER_AGENT = "developer"

# Ordered source keys per target; the first non-empty one wins
EXTERNAL_ID_KEYS = (f"{ATTRIBUTE_PREFIX}internal-id", "internal_id", "id")
BUILDING_NAME_KEYS = ("building-name", "building_name")
DEAL_STATUS_KEYS = ("deal-status", "deal_status")
NEW_FLAT_KEYS = ("new-flat", "new_flat")
FLOORS_TOTAL_KEYS = ("floors-total", "floors_total")
DISTRICT_KEYS = ("address", "locality-name")


def _first(row: Row, keys: tuple[str, ...]) -> Any:
    """Return the first truthy value among ``keys``."""
    for key in keys:
        value = row.get(key)
        if value:
            return value
    return None


def _text(value: Any) -> str:
    """Read a text node that may carry attributes (``{"#text": …}``)."""
    if isinstance(value, Mapping):
        return as_string(value.get(TEXT_KEY))
    return as_string(value)


def _wrapped_number(value: Any) -> float | int | None:
    """Read ``<x><value>…</value></x>`` or a bare number."""
    if isinstance(value, Mapping) and "value" in value:
        return as_number(value["value"])
    return as_number(value)


def _as_list(value: Any) -> list[Any]:
    """A repeated element as a list, whatever shape it arrived in."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _metro_names(location: Mapping[str, Any]) -> list[str]:
    names = []
    for station in _as_list(location.get("metro")):
        if isinstance(station, Mapping):
            names.append(_text(station.get("name")).strip())
        elif isinstance(station, str):
            names.append(station.strip())
    return unique(name for name in names if name)


def _image_urls(images: Any) -> list[str]:
    urls = []
    for image in _as_list(images):
        if isinstance(image, str):
            urls.append(image.strip())
        elif isinstance(image, Mapping):
            if TEXT_KEY in image:
                urls.append(as_string(image[TEXT_KEY]).strip())
            elif "url" in image:
                urls.append(as_string(image["url"]).strip())
    return unique(url for url in urls if url)


def normalize_yandex_realty(row: Row) -> dict[str, Any]:
    """Flatten one Yandex Realty offer into a generic feed row.

    Parameters
    ----------
    row : Row
        Offer converted from XML.

    Returns
    -------
    dict[str, Any]
        Generic row keyed by canonical field names.
    """
    normalized: dict[str, Any] = {}

    normalized["external_id"] = as_string(_first(row, EXTERNAL_ID_KEYS))
    normalized["crm_id"] = row.get("crm_id")

    deal_type = DealType.RENT if _text(row.get("type")).strip().lower() in RENT_TERMS else DealType.SALE
    normalized["deal_type"] = deal_type.value

    rooms = as_number(row.get("rooms"))
    normalized["bedrooms"] = rooms
    normalized["price"] = _wrapped_number(row.get("price"))
    normalized["area_total"] = _wrapped_number(row.get("area"))

    location = row.get("location")
    if isinstance(location, Mapping):
        normalized["district"] = _text(_first(location, DISTRICT_KEYS))
        normalized["metro"] = ",".join(_metro_names(location))
    else:
        normalized["district"] = ""
        normalized["metro"] = ""

    building_name = _text(_first(row, BUILDING_NAME_KEYS)).strip()
    if building_name:
        normalized["complex_external_id"] = building_name
        normalized["complex_title"] = building_name

    sales_agent = row.get("sales-agent")
    if isinstance(sales_agent, Mapping) and _text(sales_agent.get("category")).strip() == DEVELOPER_AGENT:
        normalized["developer"] = _text(sales_agent.get("organization"))

    built_year = as_number(row.get("built-year"))
    ready_quarter = as_number(row.get("ready-quarter"))
    if built_year:
        if ready_quarter:
            normalized["handover_date"] = f"{as_string(ready_quarter)} кв. {as_string(built_year)}"
        else:
            normalized["handover_date"] = as_string(built_year)

    # Usually floor plans rather than photos
    normalized["images"] = ",".join(_image_urls(row.get("image")))

    deal_status = _text(_first(row, DEAL_STATUS_KEYS)).lower()
    new_flat = _text(_first(row, NEW_FLAT_KEYS)).strip().lower()
    if deal_type == DealType.RENT:
        category = Category.RENT
    elif new_flat in NEW_FLAT_FLAGS or PRIMARY_MARKET_TERM in deal_status:
        category = Category.NEWBUILD
    else:
        category = Category.SECONDARY
    normalized["category"] = category.value

    rooms_title = f"{as_string(rooms)}-комнатная" if rooms else "квартира"
    normalized["title"] = f"{rooms_title} в {building_name}" if building_name else rooms_title

    normalized["description"] = _text(row.get("description"))
    normalized["floor"] = as_number(row.get("floor"))
    normalized["floors_total"] = as_number(_first(row, FLOORS_TOTAL_KEYS))
    normalized["renovation"] = _text(row.get("renovation"))

    return normalized
