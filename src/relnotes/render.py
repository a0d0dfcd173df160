"""Render a Changelog as GitHub release-notes markdown."""

from .config import Config
from .model import ChangeEntry, Changelog

THANKS_HEADER = "Thanks to the following for their contributions:"


def _mention(handle: str, cfg: Config) -> str:
    return f"[@{handle}]" if cfg.link_mode else f"@{handle}"


def _ref(number: int, cfg: Config) -> str:
    return f"[#{number}]" if cfg.link_mode else f"#{number}"


def render_entry(entry: ChangeEntry, cfg: Config) -> str:
    """One bullet: description, then the author credit, then the reference."""
    line = f"- {entry.description}"
    if entry.author:
        line += f" by {_mention(entry.author, cfg)}"
    if entry.reference is not None:
        line += f" ({_ref(entry.reference, cfg)})"
    return line


def render_link_definitions(changelog: Changelog, cfg: Config) -> list[str]:
    lines = [f"[@{a}]: {cfg.author_link(a)}" for a in changelog.authors()]
    lines += [f"[#{n}]: {cfg.reference_link(n)}" for n in changelog.references()]
    return lines


def render(changelog: Changelog, cfg: Config | None = None) -> str:
    """Render a parsed Changelog as markdown.

    Categories keep their input order. A category without entries is still
    emitted as a bare heading. With ``repo_url`` set, credits and references
    are reference-style links and the definitions follow the last category.
    """
    cfg = cfg or Config()
    blocks: list[str] = []

    authors = changelog.authors()
    if cfg.thanks and authors:
        thanks = "\n".join(f"- {_mention(a, cfg)}" for a in authors)
        blocks.append(f"{THANKS_HEADER}\n\n{thanks}")

    prefix = "#" * cfg.heading_level
    for category in changelog.categories:
        heading = f"{prefix} {category.name}"
        if category.entries:
            bullets = "\n".join(render_entry(e, cfg) for e in category.entries)
            blocks.append(f"{heading}\n\n{bullets}")
        else:
            blocks.append(heading)

    if cfg.link_mode:
        defs = render_link_definitions(changelog, cfg)
        if defs:
            blocks.append("\n".join(defs))

    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"
