"""Exceptions raised by relnotes. The CLI and MCP server format them."""


class ReleaseNotesError(Exception):
    """Base error for relnotes operations."""


class ConfigError(ReleaseNotesError):
    """Raised when a config file holds an invalid value."""


class RetrieveError(ReleaseNotesError):
    """Raised when commits cannot be read from a git repository."""


# ---------------------------------------------------------------------------
# Parse errors
# ---------------------------------------------------------------------------


class ParseError(ReleaseNotesError):
    """A malformed input line. Parsing stops at the first one."""

    kind = "ParseError"

    def __init__(self, message: str, line_no: int, line: str = ""):
        super().__init__(message)
        self.message = message
        self.line_no = line_no
        self.line = line

    def __str__(self) -> str:
        return f"line {self.line_no}: {self.kind}: {self.message}"

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "kind": self.kind,
            "line": self.line_no,
            "text": self.line,
        }


class EntryBeforeCategoryError(ParseError):
    """An entry line appeared before any category line."""

    kind = "EntryBeforeCategory"


class EmptyCategoryNameError(ParseError):
    """A category marker with nothing after it."""

    kind = "EmptyCategoryName"


class EmptyEntryDescriptionError(ParseError):
    """An entry with no description left once author/reference are removed."""

    kind = "EmptyEntryDescription"
