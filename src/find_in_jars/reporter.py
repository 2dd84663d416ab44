"""Match and progress output.

On a terminal the current archive is shown on a transient status line that
is cleared before each match and after each archive. Anywhere else only the
match lines are written, uncolored.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rich.console import Console
from rich.live import Live
from rich.text import Text

from .model import EntryMatch

__all__ = [
    "StatusReporter",
    "ConsoleReporter",
    "PlainReporter",
    "create_reporter",
    "ARCHIVE_STYLE",
    "SEPARATOR_STYLE",
    "MATCH_STYLE",
]

ARCHIVE_STYLE = "bold magenta"
SEPARATOR_STYLE = "bold green"
MATCH_STYLE = "bold red"


class StatusReporter(ABC):
    def __init__(self, separator: str = "!", console: Console | None = None):
        self.separator = separator
        self.console = console or Console()

    def __enter__(self) -> "StatusReporter":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def start(self) -> None:
        pass

    def close(self) -> None:
        pass

    def progress(self, index: int, total: int, archive: str) -> None:
        pass

    def done(self) -> None:
        pass

    @abstractmethod
    def match(self, match: EntryMatch) -> None:
        ...


class PlainReporter(StatusReporter):
    def match(self, match: EntryMatch) -> None:
        # raw line, tabs and control characters kept
        self.console.file.write(match.line(self.separator) + "\n")


class ConsoleReporter(StatusReporter):
    def __init__(self, separator: str = "!", console: Console | None = None):
        super().__init__(separator, console)
        self._live: Live | None = None

    def start(self) -> None:
        if self._live is None:
            self._live = Live(
                Text(""),
                console=self.console,
                transient=True,
                auto_refresh=False,
                # log records go to the real stderr, not above the status line
                redirect_stderr=False,
            )
            self._live.start()

    def close(self) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    def _status(self, text: Text) -> None:
        if self._live is None:
            self.start()
        self._live.update(text, refresh=True)

    def progress(self, index: int, total: int, archive: str) -> None:
        message = Text(f"finding in archive ({index}/{total}): {archive}", no_wrap=True, overflow="crop")
        message.truncate(max(self.console.width, 1))
        self._status(message)

    def done(self) -> None:
        self._status(Text(""))

    def render(self, match: EntryMatch) -> Text:
        entry = Text(match.entry)
        for start, end in match.spans:
            entry.stylize(MATCH_STYLE, start, end)
        return Text.assemble(
            (match.archive, ARCHIVE_STYLE),
            (self.separator, SEPARATOR_STYLE),
            entry,
        )

    def match(self, match: EntryMatch) -> None:
        self.done()
        self.console.print(self.render(match), soft_wrap=True)


def create_reporter(separator: str = "!", console: Console | None = None) -> StatusReporter:
    """Pick the reporter once, based on whether stdout is a terminal."""
    console = console or Console()
    if console.is_terminal:
        return ConsoleReporter(separator, console)
    return PlainReporter(separator, console)
