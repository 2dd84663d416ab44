"""Directory validation and archive discovery."""

from __future__ import annotations

import os
import stat
from typing import Iterable, Iterator, Sequence

from loguru import logger

from .config import SearchOptions
from .errors import NoArchivesError, ValidationError

__all__ = [
    "validate_directories",
    "iter_archives",
    "gather_archives",
    "has_extension",
]


def validate_directories(options: SearchOptions) -> SearchOptions:
    """Check every ``-d`` directory and return options ready for the walk.

    With ``absolute_path`` set the returned options carry the resolved
    absolute directories instead of the ones given on the command line.
    """
    resolved: list[str] = []
    for directory in options.directories:
        if not os.path.exists(directory):
            raise ValidationError(f"file {directory}(specified by option -d) does not exist!")
        if not os.path.isdir(directory):
            raise ValidationError(
                f"file {directory}(specified by option -d) exists but is not a directory!"
            )
        if not os.access(directory, os.R_OK):
            raise ValidationError(
                f"directory {directory}(specified by option -d) exists but is not readable!"
            )
        resolved.append(os.path.realpath(directory) if options.absolute_path else directory)

    if options.absolute_path:
        logger.debug("absolute directories: {}", resolved)
        return options.with_directories(resolved)
    return options


def has_extension(name: str, extensions: Iterable[str]) -> bool:
    lower = name.lower()
    return any(lower.endswith(f".{ext}") for ext in extensions)


def _is_regular_file(path: str) -> bool:
    try:
        mode = os.lstat(path).st_mode
    except OSError:
        return False
    return stat.S_ISREG(mode)


def iter_archives(directory: str, extensions: Sequence[str]) -> Iterator[str]:
    """Yield archive paths under ``directory``, depth first, sorted per level.

    Paths keep the directory prefix exactly as given, so ``.`` yields
    ``./a.jar``. Symlinked directories are not followed.
    """

    def _on_error(error: OSError) -> None:
        logger.debug("skipping unreadable path {}: {}", error.filename, error.strerror)

    for root, dirnames, filenames in os.walk(directory, onerror=_on_error):
        dirnames.sort()
        for filename in sorted(filenames):
            if not has_extension(filename, extensions):
                continue
            path = os.path.join(root, filename)
            if _is_regular_file(path):
                yield path


def gather_archives(options: SearchOptions) -> list[str]:
    archives: list[str] = []
    for directory in options.directories:
        archives.extend(iter_archives(directory, options.extensions))

    if not archives:
        raise NoArchivesError(f"No {' '.join(options.extensions)} file found!")
    logger.debug("found {} archive(s) under {}", len(archives), list(options.directories))
    return archives
