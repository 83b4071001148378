"""
Category Classifier

Pure functions turning raw category codes (FOOD_AND_DRINK) into display
names (Food And Drink) and stable color themes.

DESIGN DECISION: Upstream classification sometimes hands us a raw code and
sometimes a human label for the same category. CategoryKey is the single
place that knows both forms are the same category; the budget engine and the
transaction filter never compare category strings directly.
"""

from typing import Optional, Union

from finboard.models.ledger import CategoryTagTheme


TAG_THEMES: tuple[CategoryTagTheme, ...] = (
    CategoryTagTheme(key="sky", ring="ring-sky-400", ring_hex="#38bdf8"),
    CategoryTagTheme(key="emerald", ring="ring-emerald-400", ring_hex="#34d399"),
    CategoryTagTheme(key="cyan", ring="ring-cyan-400", ring_hex="#22d3ee"),
    CategoryTagTheme(key="violet", ring="ring-violet-400", ring_hex="#a78bfa"),
    CategoryTagTheme(key="amber", ring="ring-amber-400", ring_hex="#fbbf24"),
    CategoryTagTheme(key="rose", ring="ring-rose-400", ring_hex="#fb7185"),
    CategoryTagTheme(key="indigo", ring="ring-indigo-400", ring_hex="#818cf8"),
    CategoryTagTheme(key="fuchsia", ring="ring-fuchsia-400", ring_hex="#e879f9"),
    CategoryTagTheme(key="teal", ring="ring-teal-400", ring_hex="#2dd4bf"),
    CategoryTagTheme(key="lime", ring="ring-lime-400", ring_hex="#a3e635"),
)


def format_category_name(raw: Optional[str]) -> str:
    """
    Format a raw category code for display.

    "FOOD_AND_DRINK" -> "Food And Drink"; None or "" -> "Other".
    """
    if not raw:
        return "Other"
    return " ".join(word[:1].upper() + word[1:].lower() for word in raw.split("_"))


def _hash_name(text: str) -> int:
    """32-bit rolling hash (h * 31 + unit) over UTF-16 code units."""
    h = 0
    encoded = text.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def get_tag_theme_for_category(name: Optional[str]) -> CategoryTagTheme:
    """
    Get the color theme for a category name.

    Case-insensitive and deterministic across sessions.
    """
    key = (name or "Uncategorized").lower()
    return TAG_THEMES[_hash_name(key) % len(TAG_THEMES)]


class CategoryKey:
    """
    A category as both its raw code and its display name.

    Two keys are equal when their raw codes match case-insensitively
    or their display names match case-insensitively.
    """

    __slots__ = ("raw", "display")

    def __init__(self, value: Optional[str]):
        self.raw = (value or "").strip()
        self.display = format_category_name(self.raw)

    def matches(self, other: Union["CategoryKey", str, None]) -> bool:
        if not isinstance(other, CategoryKey):
            other = CategoryKey(other)
        if self.raw.lower() == other.raw.lower():
            return True
        return self.display.lower() == other.display.lower()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (CategoryKey, str)):
            return self.matches(other)
        return NotImplemented

    # Equality is not transitive across forms, so keys are not hashable.
    __hash__ = None

    def __repr__(self) -> str:
        return f"CategoryKey({self.raw!r})"
