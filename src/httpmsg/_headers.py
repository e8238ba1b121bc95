"""Headers — immutable, case-insensitive, multi-valued header bag.

Names compare with ASCII case folding only. The casing of the first
occurrence of a name is kept for display, and distinct names iterate in
insertion order. Every operation returns a new bag.
"""

from __future__ import annotations

import string
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TypeAlias

from httpmsg._grammar import validate_header_name, validate_header_value

_ASCII_FOLD = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

HeaderValues: TypeAlias = "str | Iterable[str]"
HeaderSource: TypeAlias = (
    "Mapping[str, HeaderValues] | Iterable[tuple[str, str]] | Headers"
)


def fold(name: str) -> str:
    """Case-fold a header name (ASCII letters only)."""
    return name.translate(_ASCII_FOLD)


def _key(name: str) -> str:
    return fold(validate_header_name(name))


def _as_values(name: str, values: HeaderValues) -> tuple[str, ...]:
    if isinstance(values, str) or not isinstance(values, Iterable):
        values = (values,)
    return tuple(validate_header_value(name, v) for v in values)


@dataclass(frozen=True, slots=True)
class Headers:
    """Ordered, case-insensitive mapping of header name to values.

    ``entries`` holds one ``(name, values)`` pair per distinct name. Use
    ``Headers.of()`` to build a bag from a mapping or from raw pairs.

    Raises:
        InvalidHeader: If a name is not a token or a value contains control
            characters.
        ValueError: If ``entries`` names the same header twice.
    """

    entries: tuple[tuple[str, tuple[str, ...]], ...] = ()
    _index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[str, int] = {}
        entries: list[tuple[str, tuple[str, ...]]] = []
        for position, (name, values) in enumerate(self.entries):
            key = _key(name)
            if key in index:
                msg = f"duplicate header entry {name!r}"
                raise ValueError(msg)
            entries.append((name, _as_values(name, values)))
            index[key] = position
        object.__setattr__(self, "entries", tuple(entries))
        object.__setattr__(self, "_index", index)

    @classmethod
    def _from_validated(
        cls,
        entries: tuple[tuple[str, tuple[str, ...]], ...],
        index: dict[str, int],
    ) -> Headers:
        # Entries and index must already agree; nothing is re-checked.
        headers = object.__new__(cls)
        object.__setattr__(headers, "entries", entries)
        object.__setattr__(headers, "_index", index)
        return headers

    @classmethod
    def of(cls, source: HeaderSource | None = None) -> Headers:
        """Build a bag from a mapping of name to value(s) or from pairs.

        Pairs with a repeated name are merged in order, so
        ``Headers.of([("A", "1"), ("a", "2")]).get("A") == ("1", "2")``.
        """
        if source is None:
            return cls()
        if isinstance(source, Headers):
            return source
        pairs = source.items() if isinstance(source, Mapping) else source
        index: dict[str, int] = {}
        names: list[str] = []
        values: list[list[str]] = []
        for name, raw in pairs:
            key = _key(name)
            position = index.get(key)
            if position is None:
                index[key] = position = len(names)
                names.append(name)
                values.append([])
            values[position].extend(_as_values(name, raw))
        # A mapping entry with no values contributes no header.
        if any(not v for v in values):
            kept = [(n, v) for n, v in zip(names, values, strict=True) if v]
            names = [n for n, _ in kept]
            values = [v for _, v in kept]
            index = {fold(n): i for i, n in enumerate(names)}
        entries = tuple((n, tuple(v)) for n, v in zip(names, values, strict=True))
        return cls._from_validated(entries, index)

    # ── Queries ──────────────────────────────────────────────────────────────

    def get(self, name: str) -> tuple[str, ...]:
        """All values for ``name`` in order; empty when absent."""
        position = self._index.get(_key(name))
        if position is None:
            return ()
        return self.entries[position][1]

    def has(self, name: str) -> bool:
        return _key(name) in self._index

    def line(self, name: str) -> str:
        """Values for ``name`` joined with ", "; empty string when absent."""
        return ", ".join(self.get(name))

    def items(self) -> Iterator[tuple[str, tuple[str, ...]]]:
        return iter(self.entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and fold(name) in self._index

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    # ── Copy-on-write updates ────────────────────────────────────────────────

    def with_values(self, name: str, values: HeaderValues) -> Headers:
        """Replace every value of ``name``.

        An existing header keeps its position and display casing; a new one
        is appended. An empty ``values`` removes the header.
        """
        key = _key(name)
        new_values = _as_values(name, values)
        if not new_values:
            return self.without(name)
        position = self._index.get(key)
        if position is None:
            return self._appended(key, name, new_values)
        display = self.entries[position][0]
        return self._replaced(position, (display, new_values))

    def with_added(self, name: str, value: str) -> Headers:
        """Append ``value`` to ``name``, creating the header when absent."""
        key = _key(name)
        validate_header_value(name, value)
        position = self._index.get(key)
        if position is None:
            return self._appended(key, name, (value,))
        display, existing = self.entries[position]
        return self._replaced(position, (display, (*existing, value)))

    def without(self, name: str) -> Headers:
        """Remove every value of ``name``. Absent names return ``self``."""
        position = self._index.get(_key(name))
        if position is None:
            return self
        entries = self.entries[:position] + self.entries[position + 1 :]
        index = {
            k: (p if p < position else p - 1)
            for k, p in self._index.items()
            if p != position
        }
        return Headers._from_validated(entries, index)

    def _appended(self, key: str, name: str, values: tuple[str, ...]) -> Headers:
        index = dict(self._index)
        index[key] = len(self.entries)
        return Headers._from_validated((*self.entries, (name, values)), index)

    def _replaced(self, position: int, entry: tuple[str, tuple[str, ...]]) -> Headers:
        entries = (*self.entries[:position], entry, *self.entries[position + 1 :])
        return Headers._from_validated(entries, self._index)
