import zipfile
from pathlib import Path
from typing import Iterable

import pytest

from find_in_jars import config as config_module


def write_zip(path: Path, entries: Iterable[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        for name in entries:
            if name.endswith("/"):
                zf.writestr(name, "")
            else:
                zf.writestr(name, f"content of {name}")
    return path


@pytest.fixture
def make_zip():
    return write_zip


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep a user's own config file out of the tests."""
    home_config = tmp_path_factory.mktemp("home") / "config.toml"
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", home_config)
    monkeypatch.delenv(config_module.CONFIG_ENV_VAR, raising=False)
    return home_config


@pytest.fixture
def jar_tree(tmp_path, make_zip):
    """A small tree of archives:

    tmp/a.jar          log4j.properties, META-INF/MANIFEST.MF
    tmp/lib/b.ZIP      com/foo/UserService.class
    tmp/lib/deep/c.jar com/foo/MonitorService.class, log4j.xml
    tmp/notes.txt
    """
    make_zip(tmp_path / "a.jar", ["log4j.properties", "META-INF/", "META-INF/MANIFEST.MF"])
    make_zip(tmp_path / "lib" / "b.ZIP", ["com/", "com/foo/", "com/foo/UserService.class"])
    make_zip(
        tmp_path / "lib" / "deep" / "c.jar",
        ["com/foo/MonitorService.class", "conf/log4j.xml"],
    )
    (tmp_path / "notes.txt").write_text("not an archive")
    return tmp_path


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    """CliRunner output is never a terminal, whatever the CI environment says."""
    for name in ("FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE"):
        monkeypatch.delenv(name, raising=False)
