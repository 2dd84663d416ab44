"""Entry-name matching in grep's four pattern dialects.

Everything compiles down to :mod:`re`. POSIX extended and basic patterns are
rewritten first: bracket expressions with ``[:class:]`` names, the GNU word
anchors ``\\<``/``\\>``, repetition with nothing to repeat as a literal,
stacked repetitions such as ``a**`` and, for basic patterns, the swapped
meaning of escaped and bare ``( ) { } | + ?``.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from .config import RegexMode
from .errors import UsageError
from .model import Span

__all__ = ["Matcher", "translate_posix", "compile_pattern"]

POSIX_CLASSES = {
    "alpha": "a-zA-Z",
    "digit": "0-9",
    "alnum": "a-zA-Z0-9",
    "upper": "A-Z",
    "lower": "a-z",
    "xdigit": "0-9A-Fa-f",
    "space": " \\t\\n\\r\\f\\v",
    "blank": " \\t",
    "punct": re.escape("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~"),
    "cntrl": "\\x00-\\x1f\\x7f",
    "print": "\\x20-\\x7e",
    "graph": "\\x21-\\x7e",
}

WORD_START = r"\b(?=\w)"
WORD_END = r"\b(?<=\w)"

_CLASS_MEMBER_ESCAPES = set("\\[]^&~|")


def _translate_bracket(pattern: str, start: int) -> tuple[str, int]:
    """Translate the bracket expression opening at ``pattern[start]``.

    Returns the Python character class and the index just past the closing
    ``]``.
    """
    i = start + 1
    negate = False
    if i < len(pattern) and pattern[i] == "^":
        negate = True
        i += 1

    members: list[str] = []
    first = True
    while i < len(pattern):
        char = pattern[i]
        if char == "]" and not first:
            body = "".join(members)
            return f"[{'^' if negate else ''}{body}]", i + 1
        first = False

        if char == "[" and i + 1 < len(pattern) and pattern[i + 1] in ":=.":
            kind = pattern[i + 1]
            close = pattern.find(kind + "]", i + 2)
            if close == -1:
                raise re.error("unterminated character class name", pattern, i)
            name = pattern[i + 2:close]
            if kind == ":":
                if name not in POSIX_CLASSES:
                    raise re.error(f"invalid character class {name!r}", pattern, i)
                members.append(POSIX_CLASSES[name])
            else:
                # collating symbols and equivalence classes: the character itself
                members.append("".join(f"\\{c}" if c in _CLASS_MEMBER_ESCAPES else c for c in name))
            i = close + 2
            continue

        members.append(f"\\{char}" if char in _CLASS_MEMBER_ESCAPES else char)
        i += 1

    raise re.error("unmatched [", pattern, start)


class _Emitter:
    """Collects translated tokens and remembers where the last atom starts."""

    def __init__(self):
        self.out: list[str] = []
        self.groups: list[int] = []
        self.atom_start: int | None = None
        self.quantified = False

    def atom(self, token: str) -> None:
        self.atom_start = len(self.out)
        self.quantified = False
        self.out.append(token)

    def anchor(self, token: str) -> None:
        self.out.append(token)
        self.atom_start = None

    def quantifier(self, token: str, literal: str) -> None:
        # nothing to repeat (pattern start, after ``(``, ``|`` or an anchor)
        if self.atom_start is None:
            self.atom(literal)
            return
        if self.quantified:
            # grep applies stacked repetitions in turn, re rejects "multiple repeat"
            inner = "".join(self.out[self.atom_start:])
            del self.out[self.atom_start:]
            self.out.append(f"(?:{inner})")
        self.out.append(token)
        self.quantified = True

    def open_group(self) -> None:
        self.groups.append(len(self.out))
        self.anchor("(")

    def close_group(self) -> None:
        start = self.groups.pop() if self.groups else None
        self.out.append(")")
        self.atom_start = start
        self.quantified = False

    def text(self) -> str:
        return "".join(self.out)


_ERE_INTERVAL = re.compile(r"\{(\d+(?:,\d*)?|,\d*)\}")
_BRE_INTERVAL = re.compile(r"\\\{(\d+(?:,\d*)?|,\d*)\\\}")


def translate_posix(pattern: str, basic: bool = False) -> str:
    """Rewrite a POSIX extended (or, with ``basic``, basic) regex for :mod:`re`."""
    emit = _Emitter()
    interval = _BRE_INTERVAL if basic else _ERE_INTERVAL
    i = 0
    while i < len(pattern):
        char = pattern[i]

        if char == "[":
            cls, i = _translate_bracket(pattern, i)
            emit.atom(cls)
            continue

        bounds = interval.match(pattern, i)
        if bounds:
            token = "{" + bounds.group(1) + "}"
            emit.quantifier(token, re.escape(token))
            i = bounds.end()
            continue

        if char == "\\":
            if i + 1 >= len(pattern):
                raise re.error("trailing backslash", pattern, i)
            nxt = pattern[i + 1]
            i += 2
            if nxt == "<":
                emit.anchor(WORD_START)
            elif nxt == ">":
                emit.anchor(WORD_END)
            elif nxt in "bB":
                emit.anchor("\\" + nxt)
            elif basic and nxt == "(":
                emit.open_group()
            elif basic and nxt == ")":
                emit.close_group()
            elif basic and nxt == "|":
                emit.anchor("|")
            elif basic and nxt in "+?":
                emit.quantifier(nxt, "\\" + nxt)
            else:
                emit.atom("\\" + nxt)
            continue

        i += 1
        if basic and char in "(){}|+?":
            emit.atom("\\" + char)
        elif char in "*+?":
            emit.quantifier(char, "\\" + char)
        elif char == "(":
            emit.open_group()
        elif char == ")":
            emit.close_group()
        elif char == "|":
            emit.anchor("|")
        elif char in "^$":
            emit.anchor(char)
        elif char in "{}":
            emit.atom("\\" + char)
        else:
            emit.atom(char)
    return emit.text()



def _join_alternatives(parts: list[str]) -> str:
    if len(parts) == 1:
        return parts[0]
    return "|".join(f"(?:{part})" for part in parts)


def compile_pattern(pattern: str, mode: RegexMode = RegexMode.EXTENDED, ignore_case: bool = False) -> re.Pattern[str]:
    """Compile ``pattern`` in the given dialect.

    As with grep, a pattern containing newlines is a list of alternatives
    (not for perl mode).
    """
    flags = re.IGNORECASE if ignore_case else 0
    try:
        if mode is RegexMode.FIXED:
            source = "|".join(re.escape(part) for part in pattern.split("\n"))
        elif mode is RegexMode.PERL:
            source = pattern
        else:
            basic = mode is RegexMode.BASIC
            source = _join_alternatives([translate_posix(part, basic) for part in pattern.split("\n")])
        return re.compile(source, flags)
    except re.error as error:
        raise UsageError(f"invalid PATTERN {pattern!r}: {error}") from error


class Matcher:
    """Filters entry names with one compiled pattern."""

    def __init__(self, pattern: str, mode: RegexMode = RegexMode.EXTENDED, ignore_case: bool = False):
        self.pattern = pattern
        self.mode = mode
        self.ignore_case = ignore_case
        self.regex = compile_pattern(pattern, mode, ignore_case)

    def match(self, name: str) -> tuple[Span, ...] | None:
        """``None`` when ``name`` does not match, else the non-empty match spans."""
        if self.regex.search(name) is None:
            return None
        return tuple(m.span() for m in self.regex.finditer(name) if m.end() > m.start())

    def filter(self, names: Iterable[str]) -> Iterator[tuple[str, tuple[Span, ...]]]:
        for name in names:
            spans = self.match(name)
            if spans is not None:
                yield name, spans

    def __repr__(self) -> str:
        return f"Matcher({self.pattern!r}, {self.mode.grep_flag}{' -i' if self.ignore_case else ''})"
