"""Command-line interface for find-in-jars."""

from typing import List, Optional, Sequence

import typer
from loguru import logger
from rich.console import Console

from . import __version__
from . import config as config_file
from .config import (
    LISTER_CHOICES,
    Defaults,
    RegexMode,
    SearchOptions,
    load_config,
    normalize_extensions,
    write_default_config,
)
from .core import gather_archives, validate_directories
from .errors import FindInJarsError, UsageError
from .listers import probe_lister
from .log import setup_logger
from .matcher import Matcher
from .model import SearchSummary
from .reporter import create_reporter
from .runner import run_search

PROG = "find-in-jars"

USAGE = f"""\
Usage: {PROG} [OPTION]... PATTERN
Find file in the jar files under specified directory(recursive, include subdirectory).
The pattern default is *extended* regex.
Try '{PROG} --help' for more information."""

app = typer.Typer(
    name=PROG,
    help="Find file entries matching a pattern inside the jar/zip files under directories",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()
err_console = Console(stderr=True)


def resolve_regex_mode(
    extended: bool,
    fixed: bool,
    basic: bool,
    perl: bool,
    default: RegexMode = RegexMode.EXTENDED,
) -> RegexMode:
    chosen = [
        mode
        for flag, mode in (
            (extended, RegexMode.EXTENDED),
            (fixed, RegexMode.FIXED),
            (basic, RegexMode.BASIC),
            (perl, RegexMode.PERL),
        )
        if flag
    ]
    if len(chosen) > 1:
        flags = " ".join(mode.grep_flag for mode in chosen)
        raise UsageError(f"conflicting matchers specified: {flags}")
    return chosen[0] if chosen else default


def build_options(
    patterns: Sequence[str],
    dirs: Sequence[str],
    extensions: Sequence[str],
    regex_mode: RegexMode,
    ignore_case: bool,
    absolute_path: bool,
    separator: Optional[str],
    defaults: Defaults,
) -> SearchOptions:
    """Merge command-line values over the config defaults into one immutable value."""
    if not patterns:
        raise UsageError("No find file pattern!")
    if len(patterns) > 1:
        raise UsageError(f"More than 1 file pattern: {' '.join(patterns)}")

    directories = list(dict.fromkeys(dirs or defaults.dirs or ["."]))
    normalized = normalize_extensions(extensions or defaults.extensions)
    if not normalized:
        raise UsageError("No valid file extension given by option -e!")

    return SearchOptions(
        pattern=patterns[0],
        directories=tuple(directories),
        extensions=tuple(normalized),
        regex_mode=regex_mode,
        ignore_case=ignore_case or defaults.ignore_case,
        separator=separator or defaults.separator or "!",
        absolute_path=absolute_path or defaults.absolute_path,
    )


def search(options: SearchOptions, lister_choice: str = "auto") -> SearchSummary:
    """Validate, probe, enumerate and search. Raises ``FindInJarsError`` on fatal problems."""
    options = validate_directories(options)
    matcher = Matcher(options.pattern, options.regex_mode, options.ignore_case)
    lister = probe_lister(lister_choice)
    archives = gather_archives(options)
    logger.debug("{!r} over {} archive(s) with {}", matcher, len(archives), lister.describe())

    with create_reporter(options.separator) as reporter:
        return run_search(archives, lister, matcher, reporter)


def _print_usage_error(message: str) -> None:
    err_console.print(message, markup=False, highlight=False, soft_wrap=True)
    err_console.print()
    err_console.print(USAGE, markup=False, highlight=False, soft_wrap=True)


def _print_error(message: str) -> None:
    err_console.print(f"Error: {message}", style="bold red", markup=False, highlight=False, soft_wrap=True)


@app.command()
def main(
    patterns: Optional[List[str]] = typer.Argument(
        None,
        metavar="PATTERN",
        help="Pattern matched against the entry names",
        show_default=False,
    ),
    dirs: Optional[List[str]] = typer.Option(
        None,
        "-d",
        "--dir",
        help="the directory that find jar files, default is current directory. "
        "Can be given multiple times to find in multiple directories.",
        show_default=False,
    ),
    extensions: Optional[List[str]] = typer.Option(
        None,
        "-e",
        "--extension",
        help="find file extension, default is jar. Can be given multiple times.",
        show_default=False,
    ),
    extended: bool = typer.Option(False, "-E", "--extended-regexp", help="PATTERN is an extended regular expression (*default*)"),
    fixed: bool = typer.Option(False, "-F", "--fixed-strings", help="PATTERN is a set of newline-separated strings"),
    basic: bool = typer.Option(False, "-G", "--basic-regexp", help="PATTERN is a basic regular expression"),
    perl: bool = typer.Option(False, "-P", "--perl-regexp", help="PATTERN is a Perl regular expression"),
    ignore_case: bool = typer.Option(False, "-i", "--ignore-case", help="ignore case distinctions"),
    absolute_path: bool = typer.Option(False, "-a", "--absolute-path", help="always print absolute path of jar file"),
    separator: Optional[str] = typer.Option(
        None,
        "-s",
        "--seperator",
        "--separator",
        help="seperator for jar file and file entry, default is `!'.",
        show_default=False,
    ),
    lister: Optional[str] = typer.Option(
        None,
        "-l",
        "--lister",
        help=f"how to list archive entries: {'/'.join(LISTER_CHOICES)} (default auto)",
        show_default=False,
    ),
    config: Optional[str] = typer.Option(None, "--config", help="TOML defaults file"),
    init_config: bool = typer.Option(
        False,
        "--init-config",
        help=f"write a default config file (to --config or {config_file.DEFAULT_CONFIG_PATH}) and exit",
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="debug logging to stderr"),
    version: bool = typer.Option(False, "-V", "--version", help="Show version information"),
) -> None:
    """
    Find file in the jar files under specified directory(recursive, include subdirectory).
    The pattern default is *extended* regex.

    Examples:

        find-in-jars 'log4j\\.properties'

        find-in-jars '^log4j\\.(properties|xml)$'

        find-in-jars 'log4j\\.properties$' -d /path/to/find/directory

        find-in-jars '\\.properties$' -d /path/to/find/dir1 -d path/to/find/dir2

        find-in-jars 'Service\\.class$' -e jar -e zip

        find-in-jars 'Mon[^$/]*Service\\.class$' -s ' <-> '
    """
    if version:
        console.print(f"[bold cyan]{PROG}[/bold cyan] version {__version__}")
        return

    setup_logger(verbose)

    try:
        if init_config:
            path = write_default_config(config or config_file.DEFAULT_CONFIG_PATH)
            console.print(f"[green]default config written to[/green] {path}")
            return

        defaults = load_config(config)
        if defaults.source is not None:
            logger.debug("defaults loaded from {}", defaults.source)

        lister_choice = (lister or defaults.lister).lower()
        if lister_choice not in LISTER_CHOICES:
            raise UsageError(f"unknown lister {lister_choice!r}, expected one of {', '.join(LISTER_CHOICES)}")

        options = build_options(
            patterns or [],
            dirs or [],
            extensions or [],
            resolve_regex_mode(extended, fixed, basic, perl, defaults.regex_mode),
            ignore_case,
            absolute_path,
            separator,
            defaults,
        )
        logger.debug("options: {}", options)
        search(options, lister_choice)
    except UsageError as error:
        _print_usage_error(str(error))
        raise typer.Exit(code=error.exit_code)
    except FindInJarsError as error:
        _print_error(str(error))
        raise typer.Exit(code=error.exit_code)
    except KeyboardInterrupt:
        err_console.print("interrupted", style="yellow")
        raise typer.Exit(code=130)


def run() -> None:
    app(prog_name=PROG)


if __name__ == "__main__":
    run()
