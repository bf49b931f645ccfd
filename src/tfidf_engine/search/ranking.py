"""Relevance ranking over an :class:`IndexStore`."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping
import logging
from typing import Any, Union

from tfidf_engine.observability.tracing import create_span
from tfidf_engine.search.index_store import IndexStore
from tfidf_engine.search.models import RankedDocument


logger = logging.getLogger(__name__)

ScoreLookup = Union[Callable[[Any], float], Mapping[Any, float]]


def rank_by_score(candidates: Iterable[Hashable], score: ScoreLookup) -> list[Hashable]:
    """Order candidates by descending score, breaking ties by ascending id.

    ``score`` is either a callable or a mapping from candidate to score. Each
    candidate is scored exactly once.
    """

    lookup = score.__getitem__ if isinstance(score, Mapping) else score
    keyed = [(-lookup(doc_id), doc_id) for doc_id in candidates]
    keyed.sort()
    return [doc_id for _neg_score, doc_id in keyed]


class RelevanceRanker:
    """Rank the documents containing a term by their tf-idf for that term."""

    def __init__(self, store: IndexStore) -> None:
        self.store = store

    def scores(self, term: str) -> dict[Hashable, float]:
        """Return tf-idf for every document containing ``term``."""

        return {doc_id: self.store.tf_idf(doc_id, term) for doc_id in self.store.index_lookup(term)}

    def relevance_lookup(self, term: str) -> list[Hashable]:
        return rank_by_score(*self._candidates(term))

    def ranked(self, term: str, limit: int | None = None) -> list[RankedDocument]:
        """Return ranked documents with their scores, optionally truncated."""

        if limit is not None and limit <= 0:
            return []

        with create_span("index.ranked", attributes={"term": term}):
            candidates, scores = self._candidates(term)
            ordered = rank_by_score(candidates, scores)
            if limit is not None:
                ordered = ordered[:limit]
            logger.debug(
                "Ranked %d of %d candidates for %r",
                len(ordered),
                len(scores),
                term,
                extra={"term": term, "results": len(ordered), "candidates": len(scores)},
            )
            return [RankedDocument(doc_id=doc_id, score=scores[doc_id]) for doc_id in ordered]

    def _candidates(self, term: str) -> tuple[list[Hashable], dict[Hashable, float]]:
        scores = self.scores(term)
        return list(scores), scores
