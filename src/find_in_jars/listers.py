"""Archive entry listers.

``zipinfo -1`` / ``unzip -Z1`` are much faster than ``jar tf``, so they are
probed first. The ``python`` lister reads the central directory with
:mod:`zipfile` and needs no external tool.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import zipfile
from abc import ABC, abstractmethod
from typing import Mapping, Sequence

from loguru import logger

from .errors import DependencyMissingError, ListingError

__all__ = [
    "ArchiveLister",
    "CommandLister",
    "ZipInfoLister",
    "UnzipLister",
    "JarLister",
    "PythonLister",
    "probe_lister",
]


class ArchiveLister(ABC):
    name: str = ""

    @abstractmethod
    def list_entries(self, archive: str) -> list[str]:
        """Return the entry names of ``archive``, in archive order."""

    def describe(self) -> str:
        return self.name


class CommandLister(ArchiveLister):
    """Runs ``<executable> <args...> <archive>`` and reads one name per line."""

    args: tuple[str, ...] = ()
    ok_codes: tuple[int, ...] = (0,)

    def __init__(self, executable: str):
        self.executable = executable

    @property
    def command(self) -> list[str]:
        return [self.executable, *self.args]

    def describe(self) -> str:
        return " ".join(self.command)

    def list_entries(self, archive: str) -> list[str]:
        try:
            completed = subprocess.run(
                [*self.command, archive],
                check=False,
                capture_output=True,
            )
        except OSError as error:
            raise ListingError(archive, f"cannot run {self.executable}: {error}") from error

        if completed.returncode not in self.ok_codes:
            reason = completed.stderr.decode("utf-8", errors="replace").strip()
            raise ListingError(
                archive,
                reason or f"{self.name} exited with status {completed.returncode}",
            )
        text = completed.stdout.decode("utf-8", errors="replace")
        return [line for line in text.splitlines() if line]


class ZipInfoLister(CommandLister):
    name = "zipinfo"
    args = ("-1",)
    # 1 means "warnings, but listing completed"
    ok_codes = (0, 1)


class UnzipLister(CommandLister):
    name = "unzip"
    args = ("-Z1",)
    ok_codes = (0, 1)


class JarLister(CommandLister):
    name = "jar"
    args = ("tf",)


class PythonLister(ArchiveLister):
    name = "python"

    def describe(self) -> str:
        return "python zipfile"

    def list_entries(self, archive: str) -> list[str]:
        try:
            with zipfile.ZipFile(archive) as zf:
                return zf.namelist()
        except (zipfile.BadZipFile, OSError) as error:
            raise ListingError(archive, str(error)) from error


_COMMAND_LISTERS: dict[str, type[CommandLister]] = {
    "zipinfo": ZipInfoLister,
    "unzip": UnzipLister,
    "jar": JarLister,
}
AUTO_ORDER: Sequence[str] = ("zipinfo", "unzip", "jar")


def _jar_from_java_home(environ: Mapping[str, str]) -> str:
    java_home = environ.get("JAVA_HOME", "")
    if not java_home:
        raise DependencyMissingError("jar not found on PATH and JAVA_HOME env var is blank!")
    jar = os.path.join(java_home, "bin", "jar")
    if not os.path.isfile(jar):
        raise DependencyMissingError(
            f"jar not found on PATH and $JAVA_HOME/bin/jar({jar}) file does NOT exists!"
        )
    if not os.access(jar, os.X_OK):
        raise DependencyMissingError(
            f"jar not found on PATH and $JAVA_HOME/bin/jar({jar}) is NOT executable!"
        )
    return jar


def probe_lister(choice: str = "auto", environ: Mapping[str, str] | None = None) -> ArchiveLister:
    """Pick the lister once, before any archive is touched.

    ``auto`` tries zipinfo, unzip and jar on PATH, then ``$JAVA_HOME/bin/jar``.
    """
    environ = os.environ if environ is None else environ

    if choice == "python":
        lister: ArchiveLister = PythonLister()
    elif choice in _COMMAND_LISTERS:
        executable = shutil.which(choice)
        if executable is None and choice == "jar":
            executable = _jar_from_java_home(environ)
        if executable is None:
            raise DependencyMissingError(f"{choice} not found on PATH!")
        lister = _COMMAND_LISTERS[choice](executable)
    elif choice == "auto":
        for name in AUTO_ORDER:
            executable = shutil.which(name)
            if executable:
                lister = _COMMAND_LISTERS[name](executable)
                break
        else:
            lister = JarLister(_jar_from_java_home(environ))
    else:
        raise ValueError(f"unknown lister: {choice}")

    logger.debug("listing archives with `{}`", lister.describe())
    return lister
