"""neols — ls-compatible directory lister with aligned long-format output."""

__version__ = "0.1.0"

PROG = "nls"


class NlsError(Exception):
    """User-facing CLI error.

    Base class for every error the listing pipeline raises on purpose.
    """


class PathNotAccessible(NlsError):
    """A path could not be stat-ed or its directory could not be read.

    Attributes:
        path: The path as it was given.
        message: Human-readable reason, already including the path.
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.message = message


class MalformedName(NlsError):
    """An entry name cannot be represented as displayable text."""


class ListingError(NlsError):
    """One or more input paths failed during a listing run.

    Attributes:
        failures: Every ``PathNotAccessible`` raised, in input order.
    """

    def __init__(self, failures: list[PathNotAccessible]) -> None:
        paths = ", ".join(f"'{f.path}'" for f in failures)
        super().__init__(f"cannot list {paths}")
        self.failures = failures
