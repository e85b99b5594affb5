"""Record identifiers and URL slugs."""

import re
import unicodedata
import uuid

# Russian transliteration, close to the Yandex scheme used in listing URLs
_CYRILLIC = {
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e", "ё": "e",
    "ж": "zh", "з": "z", "и": "i", "й": "y", "к": "k", "л": "l", "м": "m",
    "н": "n", "о": "o", "п": "p", "р": "r", "с": "s", "т": "t", "у": "u",
    "ф": "f", "х": "h", "ц": "ts", "ч": "ch", "ш": "sh", "щ": "sch", "ъ": "",
    "ы": "y", "ь": "", "э": "e", "ю": "yu", "я": "ya",
}

SLUG_MAX_LENGTH = 80


def new_id() -> str:
    """Return a new unique record id."""
    return uuid.uuid4().hex


def slugify(value: str) -> str:
    """Build a URL-safe slug from a title.

    Cyrillic is transliterated, other accents are stripped and every run of
    non-alphanumerics becomes a single dash.
    """
    text = "".join(_CYRILLIC.get(ch, ch) for ch in (value or "").lower())
    text = unicodedata.normalize("NFKD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = re.sub(r"[^a-z0-9]+", "-", text).strip("-")
    return text[:SLUG_MAX_LENGTH].rstrip("-") or "item"
