"""Immutable records for a parsed changelog."""

import re
from dataclasses import dataclass, field

HANDLE_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9-]{0,38}")


@dataclass(frozen=True)
class ChangeEntry:
    description: str
    author: str | None = None
    reference: int | None = None

    def __post_init__(self):
        if not self.description.strip():
            raise ValueError("entry description must not be empty")
        if self.author is not None and not HANDLE_RE.fullmatch(self.author):
            raise ValueError(f"malformed author handle: {self.author!r}")
        if self.reference is not None and (
            isinstance(self.reference, bool) or self.reference <= 0
        ):
            raise ValueError(f"reference must be a positive number: {self.reference!r}")


@dataclass(frozen=True)
class Category:
    name: str
    entries: tuple[ChangeEntry, ...] = ()

    def __post_init__(self):
        if not self.name.strip():
            raise ValueError("category name must not be empty")
        # entries may arrive as a list
        object.__setattr__(self, "entries", tuple(self.entries))


@dataclass(frozen=True)
class Changelog:
    categories: tuple[Category, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "categories", tuple(self.categories))

    def entries(self):
        for category in self.categories:
            yield from category.entries

    def authors(self) -> list[str]:
        """Unique author handles, sorted case-insensitively."""
        return sorted({e.author for e in self.entries() if e.author}, key=lambda a: (a.lower(), a))

    def references(self) -> list[int]:
        """Unique reference numbers in order of first appearance."""
        seen: dict[int, None] = {}
        for e in self.entries():
            if e.reference is not None:
                seen.setdefault(e.reference, None)
        return list(seen)
