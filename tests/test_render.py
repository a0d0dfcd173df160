"""Tests for relnotes.render - markdown output."""

from relnotes.config import Config
from relnotes.model import Category, ChangeEntry, Changelog
from relnotes.parse import parse
from relnotes.render import THANKS_HEADER, render, render_entry


class TestRenderEntry:
    def test_full(self, cfg):
        assert render_entry(ChangeEntry("Fix crash", "alice", 42), cfg) == "- Fix crash by @alice (#42)"

    def test_author_only(self, cfg):
        assert render_entry(ChangeEntry("Fix crash", "alice"), cfg) == "- Fix crash by @alice"

    def test_reference_only(self, cfg):
        assert render_entry(ChangeEntry("Fix crash", reference=7), cfg) == "- Fix crash (#7)"

    def test_bare(self, cfg):
        assert render_entry(ChangeEntry("Fix crash"), cfg) == "- Fix crash"

    def test_link_mode(self, link_config):
        e = ChangeEntry("Fix crash", "alice", 42)
        assert render_entry(e, link_config) == "- Fix crash by [@alice] ([#42])"


class TestRender:
    def test_single_fix(self):
        cl = parse("# Fixes\n- Fix crash on startup @alice #42\n")
        assert render(cl) == "### Fixes\n\n- Fix crash on startup by @alice (#42)\n"

    def test_two_categories_in_order(self, sample_notes):
        assert render(parse(sample_notes)) == (
            "### Additions\n"
            "\n"
            "- Add the retrieve command by @alice (#101)\n"
            "- Support custom heading levels by @bob (#104)\n"
            "\n"
            "### Fixes\n"
            "\n"
            "- Fix crash on startup by @alice (#42)\n"
            "- Keep the last line of input (#97)\n"
        )

    def test_empty_categories_kept_as_headings(self):
        cl = Changelog([Category("Added"), Category("Fixed", [ChangeEntry("x")]), Category("Removed")])
        assert render(cl) == "### Added\n\n### Fixed\n\n- x\n\n### Removed\n"

    def test_empty_changelog(self):
        assert render(Changelog()) == ""

    def test_heading_level(self):
        cl = Changelog([Category("Fixes", [ChangeEntry("x")])])
        assert render(cl, Config(heading_level=2)).startswith("## Fixes\n")

    def test_output_prefixes_fixed_regardless_of_input_notation(self):
        cfg = Config(author_prefix="~", reference_prefix="!")
        cl = parse("# Fixes\n- Fix it ~alice !5\n", cfg)
        assert render(cl, cfg) == "### Fixes\n\n- Fix it by @alice (#5)\n"

    def test_deterministic(self, sample_notes):
        assert render(parse(sample_notes)) == render(parse(sample_notes))


class TestLinkMode:
    def test_definitions_follow_categories(self, link_config):
        cl = parse("# Fixes\n- a @bob #9\n- b @Alice #3\n- c @bob #9\n")
        out = render(cl, link_config)
        assert out.endswith(
            "- c by [@bob] ([#9])\n"
            "\n"
            "[@Alice]: https://github.com/Alice\n"
            "[@bob]: https://github.com/bob\n"
            "[#9]: https://github.com/owner/repo/pull/9\n"
            "[#3]: https://github.com/owner/repo/pull/3\n"
        )
        assert out.count("[#9]:") == 1

    def test_no_definitions_without_credits(self, link_config):
        cl = Changelog([Category("Fixes", [ChangeEntry("x")])])
        assert render(cl, link_config) == "### Fixes\n\n- x\n"

    def test_trailing_slash_in_repo_url(self):
        cfg = Config(repo_url="https://github.com/owner/repo/")
        cl = Changelog([Category("Fixes", [ChangeEntry("x", reference=1)])])
        assert "[#1]: https://github.com/owner/repo/pull/1" in render(cl, cfg)


class TestThanks:
    def test_contributors_first(self, sample_notes):
        out = render(parse(sample_notes), Config(thanks=True))
        assert out.startswith(f"{THANKS_HEADER}\n\n- @alice\n- @bob\n\n### Additions\n")

    def test_linked_in_link_mode(self, sample_notes):
        cfg = Config(thanks=True, repo_url="https://github.com/owner/repo")
        out = render(parse(sample_notes), cfg)
        assert out.startswith(f"{THANKS_HEADER}\n\n- [@alice]\n- [@bob]\n")

    def test_omitted_without_authors(self):
        cl = Changelog([Category("Fixes", [ChangeEntry("x", reference=1)])])
        assert THANKS_HEADER not in render(cl, Config(thanks=True))
