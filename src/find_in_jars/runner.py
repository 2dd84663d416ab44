from __future__ import annotations

from typing import Sequence

from loguru import logger

from .errors import ListingError
from .listers import ArchiveLister
from .matcher import Matcher
from .model import EntryMatch, SearchSummary
from .reporter import StatusReporter


def scan_archive(archive: str, lister: ArchiveLister, matcher: Matcher) -> list[EntryMatch]:
    names = lister.list_entries(archive)
    return [EntryMatch(archive=archive, entry=name, spans=spans) for name, spans in matcher.filter(names)]


def run_search(
    archives: Sequence[str],
    lister: ArchiveLister,
    matcher: Matcher,
    reporter: StatusReporter,
) -> SearchSummary:
    """List and match the archives one after another, reporting as it goes.

    An archive that cannot be listed is skipped with a warning.
    """
    summary = SearchSummary(archives=len(archives))
    total = len(archives)
    for index, archive in enumerate(archives, start=1):
        reporter.progress(index, total, archive)
        try:
            matches = scan_archive(archive, lister, matcher)
        except ListingError as error:
            reporter.done()
            logger.warning("failed to list {}: {}", error.archive, error.reason)
            summary.failed.append(archive)
            continue
        for match in matches:
            reporter.match(match)
        summary.matches += len(matches)
        reporter.done()

    logger.debug(
        "searched {} archive(s): {} match(es), {} failed",
        summary.archives,
        summary.matches,
        summary.total_errors(),
    )
    return summary
