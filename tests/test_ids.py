"""Tests for record ids and slugs."""

import pytest

from catalog_sync.utils import new_id, slugify


class TestNewId:
    """Tests for new_id."""

    def test_unique(self) -> None:
        assert len({new_id() for _ in range(100)}) == 100

    def test_hex(self) -> None:
        value = new_id()

        assert len(value) == 32
        int(value, 16)


class TestSlugify:
    """Tests for slugify."""

    @pytest.mark.parametrize(
        "title, expected",
        [
            ("ЖК Сокол", "zhk-sokol"),
            ("2-комнатная в ЖК Символ", "2-komnatnaya-v-zhk-simvol"),
            ("Щёлковская, 5", "schelkovskaya-5"),
            ("Café  Crème!", "cafe-creme"),
            ("  --Lot 7--  ", "lot-7"),
        ],
    )
    def test_titles(self, title: str, expected: str) -> None:
        assert slugify(title) == expected

    @pytest.mark.parametrize("title", ["", "!!!", "Ъ"])
    def test_fallback(self, title: str) -> None:
        assert slugify(title) == "item"

    def test_truncated(self) -> None:
        slug = slugify("квартира " * 20)

        assert len(slug) <= 80
        assert not slug.endswith("-")
