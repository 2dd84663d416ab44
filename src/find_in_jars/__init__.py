"""find-in-jars - find file entries matching a pattern inside jar/zip files.

Archives are discovered recursively under one or more directories and listed
with zipinfo/unzip/jar (or Python's zipfile); every matching entry is printed
as ``<archive><separator><entry>``.
"""

__version__ = "0.1.0"

from .config import RegexMode, SearchOptions  # noqa: E402
from .matcher import Matcher  # noqa: E402

__all__ = ["RegexMode", "SearchOptions", "Matcher", "__version__"]
