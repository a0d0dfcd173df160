"""Parse the plain-text change notation into a Changelog.

Notation (default markers, see Config for overrides):

    ### Fixes
    - Fix crash on startup @alice #42

A category line is the category marker (repeatable, so "#", "##" and "###"
all work) followed by whitespace and a name. An entry line is the entry marker
followed by whitespace and a description. An author (``@handle``) and a
reference (``#123``) are taken from the trailing tokens of an entry line, in
either order, at most one of each. Every other line is ignored.
"""

import logging
import re

from .config import Config
from .errors import (
    EmptyCategoryNameError,
    EmptyEntryDescriptionError,
    EntryBeforeCategoryError,
)
from .model import HANDLE_RE, Category, ChangeEntry, Changelog

log = logging.getLogger(__name__)

_LAST_TOKEN = re.compile(r"(\S+)$")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_REPO_URL_RE = re.compile(r"^\s*<!--\s*repo_url:\s*(\S+)\s*-->\s*$", re.MULTILINE)


class Notation:
    """Compiled line patterns for one Config."""

    def __init__(self, cfg: Config):
        self.category = re.compile(
            rf"^\s*(?:{re.escape(cfg.category_marker)})+(?=\s|$)(.*)$"
        )
        self.entry = re.compile(rf"^\s*{re.escape(cfg.entry_marker)}(?=\s|$)(.*)$")
        self.author = re.compile(rf"{re.escape(cfg.author_prefix)}({HANDLE_RE.pattern})")
        self.reference = re.compile(rf"{re.escape(cfg.reference_prefix)}(\d+)")


def split_entry(text: str, notation: Notation) -> tuple[str, str | None, int | None]:
    """Peel author/reference tokens off the end of an entry's text.

    Returns (description, author, reference). Stops at the first trailing token
    that is neither, or that repeats a kind already taken.
    """
    author: str | None = None
    reference: int | None = None
    desc = text.strip()
    while desc:
        m = _LAST_TOKEN.search(desc)
        token = m.group(1)
        am = notation.author.fullmatch(token)
        rm = notation.reference.fullmatch(token)
        if am and author is None:
            author = am.group(1)
        elif rm and reference is None and int(rm.group(1)) > 0:
            reference = int(rm.group(1))
        else:
            break
        desc = desc[: m.start()].rstrip()
    return desc, author, reference


def parse(text: str, cfg: Config | None = None) -> Changelog:
    """Parse notation text into a Changelog. Raises a ParseError subclass on the first bad line."""
    notation = Notation(cfg or Config())
    sections: list[tuple[str, list[ChangeEntry]]] = []
    seen: dict[str, int] = {}

    for line_no, line in enumerate(_LINE_BREAK.split(text), start=1):
        m = notation.category.match(line)
        if m:
            name = m.group(1).strip()
            if not name:
                raise EmptyCategoryNameError(
                    "expected a category name after the marker, found nothing",
                    line_no,
                    line,
                )
            if name in seen:
                log.warning(
                    "line %d: category %r already opened on line %d; keeping both",
                    line_no,
                    name,
                    seen[name],
                )
            else:
                seen[name] = line_no
            sections.append((name, []))
            continue

        m = notation.entry.match(line)
        if m:
            if not sections:
                raise EntryBeforeCategoryError(
                    "expected a category line before the first entry, found an entry",
                    line_no,
                    line,
                )
            desc, author, reference = split_entry(m.group(1), notation)
            if not desc:
                raise EmptyEntryDescriptionError(
                    "expected a description, found only author/reference notation"
                    if author or reference
                    else "expected a description after the marker, found nothing",
                    line_no,
                    line,
                )
            sections[-1][1].append(ChangeEntry(desc, author, reference))
            continue

        if line.strip():
            log.debug("line %d: ignoring unrecognised text", line_no)

    return Changelog(tuple(Category(name, tuple(entries)) for name, entries in sections))


def find_repo_url(text: str) -> str | None:
    """Repository URL from a ``<!-- repo_url: URL -->`` line, as written by `relnotes retrieve`."""
    m = _REPO_URL_RE.search(text)
    return m.group(1) if m else None
