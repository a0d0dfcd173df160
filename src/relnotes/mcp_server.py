"""MCP server exposing relnotes rendering as tools for AI agents."""

import sys
from dataclasses import replace

from mcp.server.fastmcp import FastMCP

from .api import example_core, explain_core, generate_core, gotchas_core
from .config import find_config
from .errors import ParseError, ReleaseNotesError

mcp = FastMCP(
    "relnotes",
    instructions=(
        "Release notes tools. Convert plain-text change notes (categories and "
        "bullet entries with @author and #PR tokens) into GitHub release markdown."
    ),
)


def _get_config():
    return find_config()


@mcp.tool()
def relnotes_render(text: str, repo_url: str | None = None, thanks: bool = False) -> dict:
    """Render change notes as GitHub release-notes markdown.

    Input notation (default markers):
      ### Fixes
      - Fix crash on startup @alice #42

    Call relnotes_explain for the full notation.

    Args:
        text: The change notes.
        repo_url: Repository URL. When given, credits and PR numbers become links.
        thanks: Open the document with a list of contributors.
    """
    try:
        cfg = _get_config()
        if repo_url is not None:
            cfg = replace(cfg, repo_url=repo_url)
        if thanks:
            cfg = replace(cfg, thanks=True)
        return {"markdown": generate_core(text, cfg)}
    except ParseError as e:
        return e.to_dict()
    except ReleaseNotesError as e:
        return {"error": str(e)}


@mcp.tool()
def relnotes_explain() -> dict:
    """Describe the input notation, with an example and known quirks."""
    try:
        cfg = _get_config()
    except ReleaseNotesError as e:
        return {"error": str(e)}
    return {
        "explanation": explain_core(cfg),
        "example": example_core(),
        "gotchas": gotchas_core(),
    }


def main():
    print("relnotes MCP server starting (stdio transport)...", file=sys.stderr)
    mcp.run(transport="stdio")
