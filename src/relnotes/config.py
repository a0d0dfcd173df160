"""Configuration loading from .relnotes.toml / ~/.config/relnotes/config.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigError

PROJECT_CONFIG_FILE = ".relnotes.toml"

GLOBAL_CONFIG_DIR = Path.home() / ".config" / "relnotes"
GLOBAL_CONFIG_FILE = GLOBAL_CONFIG_DIR / "config.toml"

PROJECT_CONFIG_TEMPLATE = """\
# relnotes config (project-local)
# Run `relnotes --explain` to see how these markers are used.

# Input notation
# category_marker = "#"     # "### Fixes" opens a category
# entry_marker = "-"        # "- Fix crash @alice #42" adds an entry
# author_prefix = "@"
# reference_prefix = "#"

# Output
# heading_level = 3
# thanks = false            # open with a contributors section

# Link mode: credits and references become markdown links
# repo_url = "https://github.com/owner/repo"
# profile_url = "https://github.com"
"""

_MARKER_FIELDS = ("category_marker", "entry_marker", "author_prefix", "reference_prefix")


@dataclass
class Config:
    category_marker: str = "#"
    entry_marker: str = "-"
    author_prefix: str = "@"
    reference_prefix: str = "#"
    heading_level: int = 3
    repo_url: str = ""
    profile_url: str = "https://github.com"
    thanks: bool = False

    # Resolved path (set by find_config)
    config_path: Path | None = None

    @property
    def link_mode(self) -> bool:
        return bool(self.repo_url)

    def author_link(self, handle: str) -> str:
        return f"{self.profile_url.rstrip('/')}/{handle}"

    def reference_link(self, number: int) -> str:
        return f"{self.repo_url.rstrip('/')}/pull/{number}"


def validate(cfg: Config) -> Config:
    """Check field values, raising ConfigError on the first bad one."""
    where = f" in {cfg.config_path}" if cfg.config_path else ""
    for name in _MARKER_FIELDS:
        val = getattr(cfg, name)
        if not isinstance(val, str) or not val.strip() or val != val.strip():
            raise ConfigError(f"{name} must be a non-empty string with no surrounding whitespace{where}")
    if cfg.category_marker == cfg.entry_marker:
        raise ConfigError(f"category_marker and entry_marker must differ{where}")
    if cfg.author_prefix == cfg.reference_prefix:
        raise ConfigError(f"author_prefix and reference_prefix must differ{where}")
    level = cfg.heading_level
    if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= 6:
        raise ConfigError(f"heading_level must be between 1 and 6{where}")
    for name in ("repo_url", "profile_url"):
        if not isinstance(getattr(cfg, name), str):
            raise ConfigError(f"{name} must be a string{where}")
    if not isinstance(cfg.thanks, bool):
        raise ConfigError(f"thanks must be true or false{where}")
    return cfg


def _load_toml(cfg_path: Path) -> Config:
    """Load a TOML config file and return a Config."""
    try:
        with open(cfg_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {cfg_path}: {e}") from e
    cfg = Config(**{k: v for k, v in data.items() if k in Config.__dataclass_fields__ and k != "config_path"})
    cfg.config_path = cfg_path
    return validate(cfg)


def find_config(start: Path | None = None) -> Config:
    """Find config: project .relnotes.toml (walk-up) then global ~/.config/relnotes/config.toml."""
    # 1. Walk up from cwd for project config
    cwd = start or Path.cwd()
    for parent in [cwd, *cwd.parents]:
        cfg_path = parent / PROJECT_CONFIG_FILE
        if cfg_path.is_file():
            return _load_toml(cfg_path)
        if parent == parent.parent:
            break

    # 2. Fall back to global config
    if GLOBAL_CONFIG_FILE.is_file():
        return _load_toml(GLOBAL_CONFIG_FILE)

    # 3. No config found
    return Config()
