"""Synthetic listing feeds in the generic and Yandex Realty shapes."""

from __future__ import annotations

from typing import Any, Iterator

from catalog_sync.generators.base import BaseGenerator
from catalog_sync.models.enums import FeedSchema

METRO_STATIONS = [
    "Сокол",
    "Аэропорт",
    "Динамо",
    "Белорусская",
    "Маяковская",
    "Тверская",
    "Савёловская",
    "Дмитровская",
    "Тимирязевская",
    "Войковская",
    "Водный стадион",
    "Речной вокзал",
]

DISTRICTS = ["САО", "СВАО", "ЦАО", "ЗАО", "СЗАО", "ЮЗАО"]

# Rooms -> (area range m2, price per m2 range RUB)
ROOM_PROFILES = {
    0: ((22.0, 32.0), (380_000, 520_000)),
    1: ((34.0, 45.0), (350_000, 480_000)),
    2: ((50.0, 70.0), (320_000, 450_000)),
    3: ((72.0, 105.0), (300_000, 430_000)),
}
ROOM_WEIGHTS = [0.10, 0.35, 0.35, 0.20]


class FeedGenerator(BaseGenerator):
    """Generate feed rows for a handful of residential complexes.

    Every complex gets a developer, district, metro stations and handover
    date; lots inherit them and vary rooms, area and price.
    """

    def __init__(
        self,
        seed: int | None = None,
        num_complexes: int = 3,
        rent_share: float = 0.0,
    ) -> None:
        super().__init__(seed)
        self.rent_share = rent_share
        self.complexes = [self._generate_complex() for _ in range(num_complexes)]

    def _generate_complex(self) -> dict[str, Any]:
        name = f"ЖК {self.fake.last_name()}"
        return {
            "name": name,
            "developer": self.fake.company(),
            "district": self.random.choice(DISTRICTS),
            "metro": self.random.sample(METRO_STATIONS, k=2),
            "built_year": self.random.randint(2025, 2029),
            "ready_quarter": self.random.randint(1, 4),
            "address": self.fake.street_address(),
        }

    def _lot(self) -> tuple[dict[str, Any], int, float, int, bool]:
        complex_ = self.random.choice(self.complexes)
        rooms = self.random.choices(list(ROOM_PROFILES), weights=ROOM_WEIGHTS, k=1)[0]
        (area_min, area_max), (ppm_min, ppm_max) = ROOM_PROFILES[rooms]
        area = round(self.random.uniform(area_min, area_max), 1)
        is_rent = self.random.random() < self.rent_share
        if is_rent:
            price = int(round(area * self.random.uniform(1_500, 2_500), -3))
        else:
            price = int(round(area * self.random.uniform(ppm_min, ppm_max), -4))
        return complex_, rooms, area, price, is_rent

    def generate_generic(self, count: int) -> Iterator[dict[str, Any]]:
        """Generate rows of the generic tabular schema.

        Numbers are written the way spreadsheets export them
        (``"12 500 000"``, ``"54,3"``).
        """
        for i in range(count):
            complex_, rooms, area, price, is_rent = self._lot()
            yield {
                "external_id": f"lot-{i + 1:05d}",
                "lot_number": str(self.random.randint(1, 999)),
                "title": f"{rooms}-комнатная квартира" if rooms else "Студия",
                "deal_type": "rent" if is_rent else "sale",
                "category": "rent" if is_rent else "newbuild",
                "rooms": rooms,
                "price": f"{price:,}".replace(",", " "),
                "area": str(area).replace(".", ","),
                "district": complex_["district"],
                "metro": "; ".join(f"м. {station}" for station in complex_["metro"]),
                "photos": "|".join(self.fake.image_url() for _ in range(2)),
                "complex_external_id": complex_["name"],
                "complex_title": complex_["name"],
                "developer": complex_["developer"],
                "handover_date": f"{complex_['ready_quarter']} кв. {complex_['built_year']}",
            }

    def generate_yandex(self, count: int) -> Iterator[dict[str, Any]]:
        """Generate offers in the converted Yandex Realty XML shape."""
        for i in range(count):
            complex_, rooms, area, price, is_rent = self._lot()
            metro = [{"name": station, "time-on-foot": self.random.randint(3, 20)} for station in complex_["metro"]]
            yield {
                "@_internal-id": str(100_000 + i),
                "type": "аренда" if is_rent else "продажа",
                "category": "квартира",
                "rooms": rooms,
                "price": {"value": price, "currency": "RUB"},
                "area": {"value": area, "unit": "кв. м"},
                "location": {
                    "locality-name": "Москва",
                    "address": complex_["address"],
                    # A single station arrives as an object, several as a list
                    "metro": metro[0] if len(metro) == 1 else metro,
                },
                "building-name": complex_["name"],
                "sales-agent": {"category": "developer", "organization": complex_["developer"]},
                "built-year": complex_["built_year"],
                "ready-quarter": complex_["ready_quarter"],
                "deal-status": "первичная продажа",
                "new-flat": "1",
                "image": [{"@_tag": "plan", "#text": self.fake.image_url()}],
                "floor": self.random.randint(1, 25),
                "floors-total": 25,
                "description": self.fake.sentence(nb_words=10),
            }

    def generate(self, count: int, schema: FeedSchema = FeedSchema.GENERIC) -> list[dict[str, Any]]:
        """Generate ``count`` rows of the given schema."""
        if FeedSchema(schema) == FeedSchema.YANDEX:
            return list(self.generate_yandex(count))
        return list(self.generate_generic(count))
