"""CLI entry point for relnotes."""

import logging
import sys
from dataclasses import replace
from pathlib import Path

from . import __version__
from .api import example_core, explain_core, generate_core, gotchas_core, retrieve_core
from .config import PROJECT_CONFIG_FILE, PROJECT_CONFIG_TEMPLATE, Config, find_config
from .errors import ConfigError, ParseError, RetrieveError

log = logging.getLogger(__name__)

USAGE = """\
relnotes - turn plain-text change notes into GitHub release markdown

Usage:
  relnotes [generate] [FILE]       Render notes from FILE (or stdin) to stdout
  relnotes retrieve [DIR]          Draft notes from git commits since the last tag
  relnotes init                    Create .relnotes.toml in current directory

Generate options:
  --repo-url URL                   Link credits and PR numbers (link mode)
  --thanks                         Open with a list of contributors
  --example                        Print example input
  --explain                        Explain the input notation and the output
  --gotchas                        Print known quirks

Retrieve options:
  --since REV                      Start after REV instead of the last tag
  --end REV                        Include commits back to REV (inclusive)
  --branch NAME                    Read NAME instead of HEAD
  --start REV                      Begin the walk at REV instead of the branch tip

Global options:
  -v, --verbose                    Debug logging on stderr
  -h, --help                       Show this help
  --version                        Show version

Examples:
  relnotes --example > notes.txt
  relnotes notes.txt
  relnotes retrieve --since v0.2.0 > notes.txt
  relnotes notes.txt
"""


def _usage_error(msg: str):
    print(f"error: {msg}", file=sys.stderr)
    print(USAGE, file=sys.stderr)
    sys.exit(2)


def _take_value(args: list[str], i: int, flag: str) -> tuple[str, int]:
    """Value of `flag` given as `flag VALUE` or `flag=VALUE`; returns (value, next index)."""
    arg = args[i]
    if arg.startswith(flag + "="):
        return arg[len(flag) + 1 :], i + 1
    if i + 1 >= len(args):
        _usage_error(f"{flag} requires a value")
    return args[i + 1], i + 2


def _read_input(path: str | None) -> str:
    stdin = path is None or path == "-"
    try:
        if stdin:
            return sys.stdin.read()
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        source = "standard input" if stdin else path
        print(f"error: cannot read {source}: {e}", file=sys.stderr)
        sys.exit(1)


def cmd_init():
    cfg_path = Path.cwd() / PROJECT_CONFIG_FILE
    if cfg_path.exists():
        print(f"{PROJECT_CONFIG_FILE} already exists at {cfg_path}")
        sys.exit(1)
    cfg_path.write_text(PROJECT_CONFIG_TEMPLATE)
    print(f"Created {cfg_path}")
    print("Uncomment settings to change the notation or enable links.")


def cmd_generate(cfg: Config, args: list[str]):
    path = None
    docs = []
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("--example", "--explain", "--gotchas"):
            docs.append(arg)
            i += 1
        elif arg == "--thanks":
            cfg = replace(cfg, thanks=True)
            i += 1
        elif arg == "--repo-url" or arg.startswith("--repo-url="):
            url, i = _take_value(args, i, "--repo-url")
            cfg = replace(cfg, repo_url=url)
        elif arg.startswith("-") and arg != "-":
            _usage_error(f"unknown option: {arg}")
        elif path is not None:
            _usage_error(f"unexpected argument: {arg}")
        else:
            path = arg
            i += 1

    if docs:
        texts = {
            "--example": example_core,
            "--explain": lambda: explain_core(cfg),
            "--gotchas": gotchas_core,
        }
        # Fixed order regardless of how the flags were given
        order = [f for f in ("--example", "--explain", "--gotchas") if f in docs]
        print("\n".join(texts[f]() for f in order), end="")
        return

    text = _read_input(path)
    try:
        md = generate_core(text, cfg)
    except ParseError as e:
        where = f"{path}: " if path and path != "-" else ""
        print(f"error: {where}{e}", file=sys.stderr)
        if e.line.strip():
            print(f"  {e.line.strip()}", file=sys.stderr)
        sys.exit(1)
    sys.stdout.write(md)


def cmd_retrieve(cfg: Config, args: list[str]):
    path = None
    opts: dict[str, str | None] = {"since": None, "end": None, "branch": None, "start": None}
    i = 0
    while i < len(args):
        arg = args[i]
        name = arg[2:].split("=", 1)[0] if arg.startswith("--") else None
        if name in opts:
            opts[name], i = _take_value(args, i, f"--{name}")
        elif arg.startswith("-"):
            _usage_error(f"unknown option: {arg}")
        elif path is not None:
            _usage_error(f"unexpected argument: {arg}")
        else:
            path = Path(arg)
            i += 1
    if opts["since"] and opts["end"]:
        _usage_error("--since and --end cannot be combined")

    try:
        notes = retrieve_core(
            path or Path("."),
            opts["since"],
            cfg,
            end=opts["end"],
            branch=opts["branch"],
            start=opts["start"],
        )
    except RetrieveError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)

    if not notes:
        print(f"No commits found since {opts['since'] or opts['end'] or 'the last tag'}.", file=sys.stderr)
        return
    sys.stdout.write(notes)


def main(argv: list[str] | None = None):
    args = list(sys.argv[1:] if argv is None else argv)

    verbose = False
    for flag in ("-v", "--verbose"):
        while flag in args:
            args.remove(flag)
            verbose = True
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )

    cmd = args[0] if args else "generate"

    if cmd in ("-h", "--help", "help"):
        print(USAGE)
        sys.exit(0)

    if cmd == "--version":
        print(f"relnotes {__version__}")
        sys.exit(0)

    if cmd == "init":
        cmd_init()
        sys.exit(0)

    # All other commands need config
    try:
        cfg = find_config()
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    if cfg.config_path:
        log.debug("config: %s", cfg.config_path)

    if cmd == "retrieve":
        cmd_retrieve(cfg, args[1:])
    elif cmd == "generate":
        cmd_generate(cfg, args[1:])
    else:
        # Bare `relnotes FILE` / `relnotes --thanks < notes.txt`
        cmd_generate(cfg, args)
