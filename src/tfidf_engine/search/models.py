"""Search data models."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, order=True)
class DocumentId:
    """Caller-facing document identifier ordered lexicographically by ``id``."""

    id: str

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class RankedDocument:
    """A document paired with its relevance score for one term."""

    doc_id: Any
    score: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"doc_id": str(self.doc_id), "score": self.score}


class TermFrequencyTable(Mapping[str, int]):
    """Per-document term counts; missing terms read as 0."""

    __slots__ = ("_counts",)

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}

    def increment(self, term: str) -> int:
        count = self._counts.get(term, 0) + 1
        self._counts[term] = count
        return count

    def __getitem__(self, term: str) -> int:
        return self._counts.get(term, 0)

    def get(self, term: str, default: int = 0) -> int:  # type: ignore[override]
        return self._counts.get(term, default)

    def __contains__(self, term: object) -> bool:
        return term in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def terms(self) -> list[str]:
        """Snapshot of the terms, safe while the owning insertion is still running."""
        return list(self._counts.copy())

    @property
    def total_terms(self) -> int:
        return sum(self._counts.values())

    def __repr__(self) -> str:
        return f"TermFrequencyTable({self._counts!r})"
