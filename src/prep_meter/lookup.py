"""Name-based entity matching.

Chapters and teachers are referenced by display name throughout the records.
Every place that joins on those names goes through ``KeyIndex`` so the
matching rule lives in one spot.
"""


def entity_key(name: str | None) -> str:
    return (name or "").strip()


class KeyIndex:
    """Insertion-ordered mapping keyed by entity name."""

    def __init__(self, factory):
        self._factory = factory
        self._items: dict[str, object] = {}

    def get(self, name: str):
        """Return the entry for ``name``, creating it on first sight. Blank names give None."""
        key = entity_key(name)
        if not key:
            return None
        if key not in self._items:
            self._items[key] = self._factory(key)
        return self._items[key]

    def find(self, name: str):
        return self._items.get(entity_key(name))

    def __contains__(self, name: str) -> bool:
        return entity_key(name) in self._items

    def items(self):
        return self._items.items()

    def to_dict(self) -> dict:
        return dict(self._items)


def matches(name: str | None, other: str | None) -> bool:
    key = entity_key(name)
    return bool(key) and key == entity_key(other)


def mentions(text: str | None, name: str | None) -> bool:
    """True when ``name`` appears in free text, case-insensitively."""
    key = entity_key(name)
    return bool(key) and key.casefold() in (text or "").casefold()
