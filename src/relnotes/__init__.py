"""relnotes: plain-text change notes to GitHub release markdown."""

__version__ = "0.3.0"
