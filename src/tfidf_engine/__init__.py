"""In-memory document indexing and tf-idf relevance ranking."""

from tfidf_engine.search.index_store import IndexStore, UnknownDocumentError
from tfidf_engine.search.models import DocumentId, RankedDocument, TermFrequencyTable
from tfidf_engine.search.ranking import RelevanceRanker, rank_by_score


__all__ = [
    "DocumentId",
    "IndexStore",
    "RankedDocument",
    "RelevanceRanker",
    "TermFrequencyTable",
    "UnknownDocumentError",
    "rank_by_score",
]

__version__ = "0.1.0"
