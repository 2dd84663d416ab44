"""Exception types shared by the find-in-jars components."""

from __future__ import annotations

__all__ = [
    "FindInJarsError",
    "UsageError",
    "ValidationError",
    "NoArchivesError",
    "DependencyMissingError",
    "ConfigError",
    "ListingError",
]


class FindInJarsError(RuntimeError):
    """Base error; ``exit_code`` is the process status the CLI exits with."""

    exit_code = 1


class UsageError(FindInJarsError):
    """Bad command line: missing/extra pattern, conflicting flags, bad regex."""


class ValidationError(FindInJarsError):
    pass


class NoArchivesError(FindInJarsError):
    pass


class DependencyMissingError(FindInJarsError):
    pass


class ConfigError(FindInJarsError):
    pass


class ListingError(FindInJarsError):
    """Listing a single archive failed; the runner skips that archive."""

    def __init__(self, archive: str, reason: str):
        super().__init__(f"{archive}: {reason}")
        self.archive = archive
        self.reason = reason
