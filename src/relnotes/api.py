"""Core functions for relnotes. Used by both CLI and MCP server."""

from dataclasses import replace
from pathlib import Path

from .config import Config
from .git import retrieve
from .parse import find_repo_url, parse
from .render import render
from .texts import EXAMPLE, GOTCHAS, explanation


def generate_core(text: str, cfg: Config) -> str:
    """Parse notation text and render it as markdown. Raises ParseError.

    A ``<!-- repo_url: URL -->`` line in the text turns on link mode unless
    the config already names a repository.
    """
    if not cfg.repo_url:
        url = find_repo_url(text)
        if url:
            cfg = replace(cfg, repo_url=url)
    return render(parse(text, cfg), cfg)


def explain_core(cfg: Config) -> str:
    return explanation(cfg)


def example_core() -> str:
    return EXAMPLE


def gotchas_core() -> str:
    return GOTCHAS


def retrieve_core(
    path: Path,
    since: str | None,
    cfg: Config,
    *,
    end: str | None = None,
    branch: str | None = None,
    start: str | None = None,
) -> str:
    """Draft notation text from git commits. Raises RetrieveError."""
    return retrieve(path, since, cfg, end=end, branch=branch, start=start)
