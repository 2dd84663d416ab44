from __future__ import annotations

from dataclasses import dataclass, field

Span = tuple[int, int]


@dataclass(frozen=True)
class EntryMatch:
    archive: str
    entry: str
    spans: tuple[Span, ...] = ()

    def line(self, separator: str) -> str:
        return f"{self.archive}{separator}{self.entry}"


@dataclass
class SearchSummary:
    archives: int = 0
    matches: int = 0
    failed: list[str] = field(default_factory=list)

    def total_errors(self) -> int:
        return len(self.failed)

    def to_dict(self):
        return {
            "archives": self.archives,
            "matches": self.matches,
            "failed": list(self.failed),
        }
