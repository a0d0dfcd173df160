"""Shared fixtures for relnotes tests."""

import pytest

from relnotes.config import Config


@pytest.fixture
def cfg():
    return Config()


@pytest.fixture
def link_config():
    """Config with link mode on."""
    return Config(repo_url="https://github.com/owner/repo")


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run from an empty directory with no global config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("relnotes.config.GLOBAL_CONFIG_FILE", tmp_path / "no-global.toml")
    return tmp_path


@pytest.fixture
def sample_notes():
    return """\
### Additions

- Add the retrieve command @alice #101
- Support custom heading levels @bob #104

### Fixes

- Fix crash on startup @alice #42
- Keep the last line of input #97
"""
