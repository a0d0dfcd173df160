"""Draft change notation from local git history.

Collects commits since a revision (the most recent tag by default),
categorizes them by conventional commit prefix and prints entries in the
input notation, ready to be edited and fed back to `relnotes generate`.
"""

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .config import Config
from .errors import RetrieveError
from .model import HANDLE_RE
from .parse import Notation, split_entry

log = logging.getLogger(__name__)

# Map conventional commit prefixes to changelog categories
PREFIX_MAP = {
    "feat": "added",
    "fix": "fixed",
    "refactor": "changed",
    "perf": "changed",
    "breaking": "breaking",
    "deprecate": "deprecated",
    "remove": "removed",
    "revert": "removed",
}

SKIP_PREFIXES = ("chore", "docs", "style", "test", "ci")

CATEGORY_TITLES = {
    "added": "Added",
    "changed": "Changed",
    "fixed": "Fixed",
    "removed": "Removed",
    "deprecated": "Deprecated",
    "breaking": "Breaking Changes",
}

_PREFIX_RE = re.compile(r"(\w+)(?:\([^)]*\))?(!)?\s*:\s*")
_PR_SUFFIX_RE = re.compile(r"\s*\(#(\d+)\)\s*$")
_NOREPLY_RE = re.compile(
    r"(?:\d+\+)?(?P<handle>[A-Za-z0-9-]+)@users\.noreply\.github\.com", re.IGNORECASE
)

_SCP_REMOTE_RE = re.compile(r"(?:[^@/]+@)?(?P<host>[^:/]+):(?P<path>[^/].*)")
_URL_REMOTE_RE = re.compile(r"(?:https?|ssh|git)://(?:[^@/]+@)?(?P<host>[^/:]+)(?::\d+)?/(?P<path>.+)")

_FIELD_SEP = "\x1f"
_LOG_FORMAT = "%H%x1f%an%x1f%ae%x1f%s"


@dataclass(frozen=True)
class Commit:
    sha: str
    author_name: str
    author_email: str
    subject: str


def run(cmd: list[str], cwd: Path) -> str:
    log.debug("running %s in %s", " ".join(cmd), cwd)
    try:
        return subprocess.check_output(
            cmd,
            cwd=cwd,
            text=True,
            encoding="utf-8",
            errors="replace",
            stderr=subprocess.PIPE,
        ).strip()
    except FileNotFoundError as e:
        raise RetrieveError("git executable not found") from e


def _git_error(path: Path, what: str, e: subprocess.CalledProcessError) -> RetrieveError:
    detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
    return RetrieveError(f"{what} failed in {path}: {detail}")


def get_last_tag(path: Path, tip: str = "HEAD") -> str | None:
    """Get the most recent git tag reachable from tip."""
    try:
        return run(["git", "describe", "--tags", "--abbrev=0", tip], path) or None
    except subprocess.CalledProcessError:
        return None


def has_parent(path: Path, rev: str) -> bool:
    """Whether rev names a commit with a parent. Raises RetrieveError if rev is unknown."""
    try:
        run(["git", "rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}"], path)
    except subprocess.CalledProcessError as e:
        raise RetrieveError(f"unknown revision {rev!r} in {path}") from e
    try:
        run(["git", "rev-parse", "--verify", "--quiet", f"{rev}^"], path)
    except subprocess.CalledProcessError:
        return False
    return True


def get_commits_since(path: Path, rev: str | None, tip: str = "HEAD") -> list[Commit]:
    """Return commits after rev up to tip (or all of tip if rev is None), oldest first."""
    range_arg = f"{rev}..{tip}" if rev else tip
    try:
        out = run(["git", "log", "--reverse", f"--format={_LOG_FORMAT}", range_arg, "--"], path)
    except subprocess.CalledProcessError as e:
        raise _git_error(path, "git log", e) from e
    commits = []
    for line in out.splitlines():
        parts = line.split(_FIELD_SEP)
        if len(parts) != 4:
            log.debug("skipping unparseable log line: %r", line)
            continue
        commits.append(Commit(*parts))
    return commits


def normalize_remote_url(remote: str) -> str | None:
    """Web URL of a git remote (https, ssh or scp-style), or None for local paths."""
    remote = remote.strip()
    m = _URL_REMOTE_RE.fullmatch(remote)
    if not m and "://" not in remote:
        m = _SCP_REMOTE_RE.fullmatch(remote)
    if not m:
        return None
    repo = m.group("path").rstrip("/")
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not repo:
        return None
    return f"https://{m.group('host')}/{repo}"


def get_remote_url(path: Path, remote: str = "origin") -> str | None:
    """Web URL of the named remote, or None if there is none."""
    try:
        url = run(["git", "remote", "get-url", remote], path)
    except subprocess.CalledProcessError:
        log.debug("no %s remote in %s", remote, path)
        return None
    return normalize_remote_url(url)


def categorize(subject: str) -> str | None:
    """Map a commit subject to a category key, or None if it should be skipped."""
    m = _PREFIX_RE.match(subject)
    if not m:
        return "changed"
    prefix = m.group(1).lower()
    if m.group(2):
        return "breaking"
    if prefix in SKIP_PREFIXES:
        return None
    return PREFIX_MAP.get(prefix, "changed")


def clean_subject(subject: str) -> tuple[str, int | None]:
    """Strip the conventional commit prefix and a trailing "(#N)".

    Returns (description, pull request number).
    """
    number = None
    m = _PR_SUFFIX_RE.search(subject)
    if m:
        number = int(m.group(1)) or None
        subject = subject[: m.start()]
    m = _PREFIX_RE.match(subject)
    if m:
        subject = subject[m.end() :]
    cleaned = subject.strip()
    if cleaned:
        cleaned = cleaned[0].upper() + cleaned[1:]
    return cleaned, number


def commit_author(commit: Commit) -> str | None:
    """GitHub handle of the commit author, when one can be told from the log."""
    m = _NOREPLY_RE.fullmatch(commit.author_email.strip())
    if m and HANDLE_RE.fullmatch(m.group("handle")):
        return m.group("handle")
    name = commit.author_name.strip()
    if HANDLE_RE.fullmatch(name):
        return name
    return None


def safe_description(desc: str, notation: Notation) -> str:
    """Quote trailing words the parser would take as author/reference tokens.

    Returns "" when nothing but such tokens is left.
    """
    kept, author, reference = split_entry(desc, notation)
    if author is None and reference is None:
        return desc
    if not kept:
        return ""
    tail = desc[len(kept) :].split()
    return kept + " " + " ".join(f"`{word}`" for word in tail)


def build_notes(commits: list[Commit], cfg: Config, repo_url: str | None = None) -> str:
    """Render commits as notation text, one category block per non-empty category.

    With repo_url, the text opens with a ``<!-- repo_url: URL -->`` line that
    `relnotes generate` uses to turn on link mode.
    """
    notation = Notation(cfg)
    categories: dict[str, list[str]] = {key: [] for key in CATEGORY_TITLES}

    for commit in commits:
        cat = categorize(commit.subject)
        if cat is None:
            log.debug("skipping %s: %s", commit.sha[:7], commit.subject)
            continue
        desc, number = clean_subject(commit.subject)
        desc = safe_description(desc, notation)
        if not desc:
            log.debug("skipping %s: no description in %r", commit.sha[:7], commit.subject)
            continue
        line = f"{cfg.entry_marker} {desc}"
        author = commit_author(commit)
        if author:
            line += f" {cfg.author_prefix}{author}"
        if number:
            line += f" {cfg.reference_prefix}{number}"
        categories[cat].append(line)

    marker = cfg.category_marker * cfg.heading_level
    blocks = [
        f"{marker} {CATEGORY_TITLES[key]}\n\n" + "\n".join(lines)
        for key, lines in categories.items()
        if lines
    ]
    if not blocks:
        return ""
    if repo_url:
        blocks.insert(0, f"<!-- repo_url: {repo_url} -->")
    return "\n\n".join(blocks) + "\n"


def retrieve(
    path: Path,
    since: str | None = None,
    cfg: Config | None = None,
    *,
    end: str | None = None,
    branch: str | None = None,
    start: str | None = None,
) -> str:
    """Draft notation text from git commits.

    The walk begins at `start`, else the tip of `branch`, else HEAD. It stops
    after `end` (inclusive) when given, otherwise at `since` (exclusive) or the
    most recent tag reachable from the starting commit.
    """
    cfg = cfg or Config()
    path = Path(path)
    if not path.is_dir():
        raise RetrieveError(f"Not a directory: {path}")
    if end and since:
        raise RetrieveError("end and since cannot be combined")
    tip = start or branch or "HEAD"
    if end:
        rev = f"{end}^" if has_parent(path, end) else None
    else:
        rev = since or get_last_tag(path, tip)
    commits = get_commits_since(path, rev, tip)
    log.info("%d commits in %s", len(commits), f"{rev}..{tip}" if rev else tip)
    return build_notes(commits, cfg, get_remote_url(path))
