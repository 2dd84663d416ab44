"""Lister probing and listing."""

import shutil
import subprocess
import sys

import pytest

from find_in_jars import listers
from find_in_jars.errors import DependencyMissingError, ListingError
from find_in_jars.listers import (
    JarLister,
    PythonLister,
    UnzipLister,
    ZipInfoLister,
    probe_lister,
)


def fake_which(available):
    def which(name):
        return f"/usr/bin/{name}" if name in available else None

    return which


class TestProbe:
    def test_zipinfo_first(self, monkeypatch):
        monkeypatch.setattr(listers.shutil, "which", fake_which({"zipinfo", "unzip", "jar"}))
        lister = probe_lister()
        assert isinstance(lister, ZipInfoLister)
        assert lister.command == ["/usr/bin/zipinfo", "-1"]

    def test_unzip_second(self, monkeypatch):
        monkeypatch.setattr(listers.shutil, "which", fake_which({"unzip", "jar"}))
        lister = probe_lister()
        assert isinstance(lister, UnzipLister)
        assert lister.command == ["/usr/bin/unzip", "-Z1"]

    def test_jar_on_path(self, monkeypatch):
        monkeypatch.setattr(listers.shutil, "which", fake_which({"jar"}))
        assert probe_lister().command == ["/usr/bin/jar", "tf"]

    def test_java_home_blank(self, monkeypatch):
        monkeypatch.setattr(listers.shutil, "which", fake_which(set()))
        with pytest.raises(DependencyMissingError, match="JAVA_HOME env var is blank"):
            probe_lister(environ={})

    def test_java_home_without_jar(self, monkeypatch, tmp_path):
        monkeypatch.setattr(listers.shutil, "which", fake_which(set()))
        with pytest.raises(DependencyMissingError, match="file does NOT exists"):
            probe_lister(environ={"JAVA_HOME": str(tmp_path)})

    @pytest.mark.skipif(sys.platform == "win32", reason="posix permissions")
    def test_java_home_jar_not_executable(self, monkeypatch, tmp_path):
        monkeypatch.setattr(listers.shutil, "which", fake_which(set()))
        (tmp_path / "bin").mkdir()
        (tmp_path / "bin" / "jar").write_text("#!/bin/sh\n")
        with pytest.raises(DependencyMissingError, match="is NOT executable"):
            probe_lister(environ={"JAVA_HOME": str(tmp_path)})

    @pytest.mark.skipif(sys.platform == "win32", reason="posix permissions")
    def test_java_home_jar(self, monkeypatch, tmp_path):
        monkeypatch.setattr(listers.shutil, "which", fake_which(set()))
        jar = tmp_path / "bin" / "jar"
        jar.parent.mkdir()
        jar.write_text("#!/bin/sh\n")
        jar.chmod(0o755)
        lister = probe_lister(environ={"JAVA_HOME": str(tmp_path)})
        assert isinstance(lister, JarLister)
        assert lister.executable == str(jar)

    def test_forced_tool_missing(self, monkeypatch):
        monkeypatch.setattr(listers.shutil, "which", fake_which(set()))
        with pytest.raises(DependencyMissingError, match="zipinfo not found on PATH!"):
            probe_lister("zipinfo")

    def test_forced_python(self, monkeypatch):
        monkeypatch.setattr(listers.shutil, "which", fake_which(set()))
        assert isinstance(probe_lister("python"), PythonLister)

    def test_unknown_choice(self):
        with pytest.raises(ValueError):
            probe_lister("7z")


class TestPythonLister:
    def test_lists_in_archive_order(self, tmp_path, make_zip):
        archive = make_zip(tmp_path / "a.jar", ["META-INF/", "META-INF/MANIFEST.MF", "log4j.properties"])
        assert PythonLister().list_entries(str(archive)) == [
            "META-INF/",
            "META-INF/MANIFEST.MF",
            "log4j.properties",
        ]

    def test_bad_zip(self, tmp_path):
        broken = tmp_path / "broken.jar"
        broken.write_bytes(b"not a zip at all")
        with pytest.raises(ListingError) as info:
            PythonLister().list_entries(str(broken))
        assert info.value.archive == str(broken)


class TestCommandLister:
    def test_output_split_into_names(self, monkeypatch):
        seen = {}

        def fake_run(command, **kwargs):
            seen["command"] = command
            return subprocess.CompletedProcess(command, 0, b"a/\na/B.class\n\nc\xff.txt\n", b"")

        monkeypatch.setattr(listers.subprocess, "run", fake_run)
        names = ZipInfoLister("/usr/bin/zipinfo").list_entries("x.jar")
        assert seen["command"] == ["/usr/bin/zipinfo", "-1", "x.jar"]
        assert names == ["a/", "a/B.class", "c\ufffd.txt"]

    def test_warning_status_accepted_for_zipinfo(self, monkeypatch):
        monkeypatch.setattr(
            listers.subprocess,
            "run",
            lambda command, **kwargs: subprocess.CompletedProcess(command, 1, b"a.txt\n", b"warning"),
        )
        assert UnzipLister("unzip").list_entries("x.zip") == ["a.txt"]

    def test_failure_raises_with_stderr(self, monkeypatch):
        monkeypatch.setattr(
            listers.subprocess,
            "run",
            lambda command, **kwargs: subprocess.CompletedProcess(command, 1, b"", b"java.util.zip.ZipException\n"),
        )
        with pytest.raises(ListingError, match="ZipException"):
            JarLister("jar").list_entries("x.jar")

    def test_failure_without_stderr(self, monkeypatch):
        monkeypatch.setattr(
            listers.subprocess,
            "run",
            lambda command, **kwargs: subprocess.CompletedProcess(command, 9, b"", b""),
        )
        with pytest.raises(ListingError, match="exited with status 9"):
            ZipInfoLister("zipinfo").list_entries("x.jar")

    @pytest.mark.skipif(shutil.which("zipinfo") is None, reason="zipinfo not installed")
    def test_real_zipinfo(self, tmp_path, make_zip):
        archive = make_zip(tmp_path / "a.jar", ["log4j.properties", "com/Foo.class"])
        lister = ZipInfoLister(shutil.which("zipinfo"))
        assert lister.list_entries(str(archive)) == ["log4j.properties", "com/Foo.class"]

    @pytest.mark.skipif(shutil.which("unzip") is None, reason="unzip not installed")
    def test_real_unzip(self, tmp_path, make_zip):
        archive = make_zip(tmp_path / "a.jar", ["log4j.properties", "com/Foo.class"])
        lister = UnzipLister(shutil.which("unzip"))
        assert lister.list_entries(str(archive)) == ["log4j.properties", "com/Foo.class"]
