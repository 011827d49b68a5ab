"""Case-insensitive, order-preserving HTTP header store.

HTTP header names are case-insensitive (RFC 7230): ``Content-Length``,
``content-length`` and ``CONTENT-LENGTH`` all name the same header.  But
the order headers were sent in, and the casing they were first written
with, are worth keeping for display.  So the store holds two things:

- a list of ``(name, value)`` slots in insertion order, and
- an index from the case-folded name to its slot, for O(1) lookups.

Adding a name that already exists overwrites the value in place (the
original casing and position stay).  Removing a name deletes its slot and
shifts every later slot's index down by one.
"""

from collections.abc import Iterable, Iterator


def _key(name: str) -> str:
    """Return the lookup key for a header name."""
    return name.casefold()


class Headers:
    """An ordered mapping of header names to values, ignoring name case."""

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        """Create a header store, optionally pre-populated.

        Args:
            pairs: Initial ``(name, value)`` pairs, added in order.

        """
        self._slots: list[tuple[str, str]] = []
        self._index: dict[str, int] = {}
        for name, value in pairs:
            self.add(name, value)

    def get(self, name: str) -> str | None:
        """Return the value stored for *name*, or None."""
        slot = self._index.get(_key(name))
        if slot is None:
            return None
        return self._slots[slot][1]

    def add(self, name: str, value: str) -> None:
        """Store *value* under *name*, replacing any existing value.

        The display casing of a name is whatever was used the first time
        it was added.
        """
        key = _key(name)
        slot = self._index.get(key)
        if slot is None:
            self._index[key] = len(self._slots)
            self._slots.append((name, value))
        else:
            original_name = self._slots[slot][0]
            self._slots[slot] = (original_name, value)

    def remove(self, name: str) -> str | None:
        """Remove *name* and return its value, or None if it was absent."""
        slot = self._index.pop(_key(name), None)
        if slot is None:
            return None
        _, value = self._slots.pop(slot)
        for key, index in self._index.items():
            if index > slot:
                self._index[key] = index - 1
        return value

    def items(self) -> list[tuple[str, str]]:
        """Return all ``(name, value)`` pairs in insertion order."""
        return list(self._slots)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        """Iterate over ``(name, value)`` pairs in insertion order."""
        return iter(list(self._slots))

    def __len__(self) -> int:
        """Return the number of distinct header names."""
        return len(self._slots)

    def __contains__(self, name: object) -> bool:
        """Return True if a header with this name (any case) is stored."""
        return isinstance(name, str) and _key(name) in self._index

    def __eq__(self, other: object) -> bool:
        """Compare names case-insensitively and values exactly, ignoring order."""
        if not isinstance(other, Headers):
            return NotImplemented
        mine = {_key(name): value for name, value in self._slots}
        theirs = {_key(name): value for name, value in other._slots}
        return mine == theirs

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return f"Headers({self._slots!r})"
