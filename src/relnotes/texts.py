"""Static documents printed by `relnotes generate --example/--explain/--gotchas`."""

from .config import Config

EXAMPLE = """\
### Added

- Add a `retrieve` command that drafts notes from git history @alice #101
- Support custom heading levels @bob #104

### Fixed

- Fix crash on startup when stdin is empty @alice #42
- Stop dropping the last line of input without a newline #97

### Removed
"""

EXPLANATION = """\
Input is plain text, read from a file or from standard input. Each line is
one of:

  {category_marker} <name>
      Opens a category. The marker may be repeated ("{category_marker}{category_marker}{category_marker} Fixes"
      works too) but must be followed by whitespace. Every following entry
      belongs to this category until the next category line.

  {entry_marker} <description> [{author_prefix}<handle>] [{reference_prefix}<number>]
      Adds an entry to the current category. The author handle and the
      pull-request/issue number are optional and are only recognised as the
      last tokens of the line, in either order. They are removed from the
      description.

Any other line, including blank lines, is ignored.

Output is GitHub markdown. Each category becomes a level-{heading_level} heading, each
entry a bullet:

  - <description> by @<handle> (#<number>)

Categories and entries keep the order they were written in. A category with
no entries is kept as a heading with nothing under it.

With `repo_url` set (or --repo-url), credits and numbers become links
("by [@alice] ([#42])") and the link targets are listed at the end of the
document. A line "<!-- repo_url: URL -->" in the input does the same; `relnotes
retrieve` writes one from the origin remote. With `thanks = true` (or --thanks) the document opens with a list of
everyone credited.

Markers, heading level and links can be changed in .relnotes.toml
(see `relnotes init`).
"""

GOTCHAS = """\
- A category name used twice produces two separate headings. Entries are not
  merged into the first one.
- Author and reference tokens are only taken from the end of a line. In
  "Fix @alice's parser #12 edge case" nothing is extracted.
- Only one author and one reference are taken per entry. With
  "Fix it @alice @bob" only @bob is credited and "@alice" stays in the text.
- A marker must be followed by a space: "#Added" and "-Fix" are ignored as
  plain text, and so is an entry like "#42" on its own line.
- `relnotes retrieve` wraps a commit subject's trailing "@word" or "#N" in
  backticks so it is not read as a credit; a subject made only of such words
  is left out of the draft.
- Handles and numbers are not checked against GitHub.
- The first malformed line stops the run; nothing is printed to stdout.
"""


def explanation(cfg: Config | None = None) -> str:
    cfg = cfg or Config()
    return EXPLANATION.format(
        category_marker=cfg.category_marker,
        entry_marker=cfg.entry_marker,
        author_prefix=cfg.author_prefix,
        reference_prefix=cfg.reference_prefix,
        heading_level=cfg.heading_level,
    )
