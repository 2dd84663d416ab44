"""Configuration model and TOML defaults loading for find-in-jars."""

from __future__ import annotations

import enum
import os
import textwrap
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, Sequence

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - Python <3.11 fallback
    import tomli as tomllib  # type: ignore

from .errors import ConfigError

__all__ = [
    "RegexMode",
    "SearchOptions",
    "Defaults",
    "LISTER_CHOICES",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_CONFIG_TOML",
    "normalize_extensions",
    "load_config",
    "write_default_config",
]

CONFIG_ENV_VAR = "FIND_IN_JARS_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "find-in-jars" / "config.toml"

LISTER_CHOICES = ("auto", "zipinfo", "unzip", "jar", "python")

DEFAULT_CONFIG_TOML = textwrap.dedent(
    """
    [defaults]
    dirs = ["."]
    extensions = ["jar"]
    # extended | basic | fixed | perl
    regex_mode = "extended"
    ignore_case = false
    absolute_path = false
    separator = "!"
    # auto | zipinfo | unzip | jar | python
    lister = "auto"
    """
)


class RegexMode(str, enum.Enum):
    """Pattern dialects, named after the matching grep flags."""

    EXTENDED = "extended"
    BASIC = "basic"
    FIXED = "fixed"
    PERL = "perl"

    @property
    def grep_flag(self) -> str:
        return {
            RegexMode.EXTENDED: "-E",
            RegexMode.BASIC: "-G",
            RegexMode.FIXED: "-F",
            RegexMode.PERL: "-P",
        }[self]


@dataclass(frozen=True, slots=True)
class SearchOptions:
    """Everything one search run needs. Built once by the CLI, never mutated."""

    pattern: str
    directories: tuple[str, ...] = (".",)
    extensions: tuple[str, ...] = ("jar",)
    regex_mode: RegexMode = RegexMode.EXTENDED
    ignore_case: bool = False
    separator: str = "!"
    absolute_path: bool = False

    def with_directories(self, directories: Iterable[str]) -> "SearchOptions":
        return replace(self, directories=tuple(directories))


@dataclass(slots=True)
class Defaults:
    """Values read from the optional TOML file; flags on the command line win."""

    dirs: list[str] = field(default_factory=lambda: ["."])
    extensions: list[str] = field(default_factory=lambda: ["jar"])
    regex_mode: RegexMode = RegexMode.EXTENDED
    ignore_case: bool = False
    absolute_path: bool = False
    separator: str = "!"
    lister: str = "auto"
    source: Path | None = None


def normalize_extensions(extensions: Sequence[str]) -> list[str]:
    """Strip whitespace and a leading dot, lower-case, drop empties and dupes."""
    normalized: list[str] = []
    for ext in extensions:
        ext = ext.strip().lower()
        if ext.startswith("."):
            ext = ext[1:]
        if ext and ext not in normalized:
            normalized.append(ext)
    return normalized


def load_config(config_path: str | Path | None = None) -> Defaults:
    """Load defaults from the first TOML file found.

    Resolution order:
        1. explicit ``config_path`` argument (must exist)
        2. ``FIND_IN_JARS_CONFIG`` environment variable
        3. ``~/.config/find-in-jars/config.toml``
        4. built-in defaults
    """

    if config_path:
        explicit = Path(config_path).expanduser()
        if not explicit.is_file():
            raise ConfigError(f"config file {explicit} does not exist!")
        return _config_from_path(explicit)

    candidates: list[Path] = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidates.append(Path(env_path).expanduser())
    candidates.append(DEFAULT_CONFIG_PATH)

    for candidate in candidates:
        if candidate.is_file():
            return _config_from_path(candidate)

    return Defaults()


def _config_from_path(path: Path) -> Defaults:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as error:
        raise ConfigError(f"cannot read config file {path}: {error}") from error
    defaults = _config_from_toml(raw, origin=str(path))
    defaults.source = path
    return defaults


def _config_from_toml(content: str, origin: str = "<string>") -> Defaults:
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as error:
        raise ConfigError(f"malformed config file {origin}: {error}") from error

    section = data.get("defaults", {})
    if not isinstance(section, dict):
        raise ConfigError(f"malformed config file {origin}: [defaults] must be a table")

    regex_mode = str(section.get("regex_mode", RegexMode.EXTENDED.value)).lower()
    try:
        mode = RegexMode(regex_mode)
    except ValueError:
        choices = ", ".join(m.value for m in RegexMode)
        raise ConfigError(
            f"malformed config file {origin}: regex_mode must be one of {choices}, got {regex_mode!r}"
        ) from None

    lister = str(section.get("lister", "auto")).lower()
    if lister not in LISTER_CHOICES:
        raise ConfigError(
            f"malformed config file {origin}: lister must be one of {', '.join(LISTER_CHOICES)}, got {lister!r}"
        )

    return Defaults(
        dirs=_list_or_default(section.get("dirs"), ["."]),
        extensions=normalize_extensions(_list_or_default(section.get("extensions"), ["jar"])) or ["jar"],
        regex_mode=mode,
        ignore_case=bool(section.get("ignore_case", False)),
        absolute_path=bool(section.get("absolute_path", False)),
        separator=str(section.get("separator", "!")),
        lister=lister,
    )


def _list_or_default(values: Iterable[str] | str | None, fallback: Iterable[str]) -> list[str]:
    if values is None:
        return list(fallback)
    if isinstance(values, str):
        return [values]
    return [str(item) for item in values]


def write_default_config(target_path: str | Path) -> Path:
    """Write the default configuration to ``target_path``.

    Creates parent directories if needed and returns the absolute path
    to the created file.
    """

    target = Path(target_path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(DEFAULT_CONFIG_TOML, encoding="utf-8")
    return target.resolve()
