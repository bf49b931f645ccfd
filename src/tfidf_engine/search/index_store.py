"""In-memory forward index with tf-idf scoring.

Each document owns a term-frequency table. Posting sets and inverse document
frequencies are derived from those tables on every query, so there is no
separate inverted index to keep in sync with insertions.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
import io
import logging
import threading
from types import MappingProxyType

from tfidf_engine.observability.tracing import create_span
from tfidf_engine.search.analyzers import Analyzer, get_analyzer, normalize_term
from tfidf_engine.search.models import TermFrequencyTable
from tfidf_engine.search.stats import calculate_idf, tf_idf


logger = logging.getLogger(__name__)


class UnknownDocumentError(ValueError):
    """Raised when a per-document query names an id that was never indexed."""

    def __init__(self, doc_id: Hashable) -> None:
        super().__init__(f"Document {doc_id!r} has not been added to the index")
        self.doc_id = doc_id


class IndexStore:
    """Map of document id to term-frequency table.

    Insertion is first-write-wins: adding an id that is already present leaves
    the existing table untouched and does not read the new stream.
    """

    def __init__(self, analyzer: Analyzer | None = None) -> None:
        self.analyzer = analyzer or get_analyzer("default")
        self._tables: dict[Hashable, TermFrequencyTable] = {}
        # Serializes insertions; held for the whole tokenization.
        self._write_lock = threading.Lock()
        # Guards the id -> table registry; readers hold it only to copy.
        self._registry_lock = threading.Lock()

    def add_document(self, doc_id: Hashable, stream: Iterable[str] | str) -> None:
        """Tokenize ``stream`` line by line into a new table for ``doc_id``.

        Errors raised while reading ``stream`` propagate unchanged; lines
        counted before the failure remain in the table.
        """

        if isinstance(stream, str):
            stream = io.StringIO(stream)

        with self._write_lock:
            if doc_id in self._tables:
                logger.debug("Ignoring duplicate insertion of %r", doc_id, extra={"doc_id": doc_id})
                return

            table = TermFrequencyTable()
            with self._registry_lock:
                self._tables[doc_id] = table
            with create_span("index.add_document", attributes={"doc_id": str(doc_id)}):
                try:
                    for line in stream:
                        for token in self.analyzer(line):
                            table.increment(token.text)
                except Exception:
                    logger.warning(
                        "Read failed while indexing %r; keeping %d partial terms",
                        doc_id,
                        len(table),
                        extra={"doc_id": doc_id, "distinct_terms": len(table)},
                    )
                    raise

        logger.debug(
            "Indexed %r: %d terms, %d distinct",
            doc_id,
            table.total_terms,
            len(table),
            extra={"doc_id": doc_id, "terms": table.total_terms, "distinct_terms": len(table)},
        )

    def index_lookup(self, term: str) -> set[Hashable]:
        """Return the ids of every document whose table contains ``term``."""

        normalized = normalize_term(term)
        return {doc_id for doc_id, table in self._snapshot().items() if normalized in table}

    def term_frequency(self, doc_id: Hashable, term: str) -> int:
        table = self._require(doc_id)
        return table[normalize_term(term)]

    def inverse_document_frequency(self, term: str) -> float:
        """Return ``ln((1 + N) / (1 + M))``; 0.0 for an empty index."""

        normalized = normalize_term(term)
        tables = self._snapshot()
        matching = sum(1 for table in tables.values() if normalized in table)
        return calculate_idf(matching, len(tables))

    def tf_idf(self, doc_id: Hashable, term: str) -> float:
        self._require(doc_id)
        return tf_idf(self.term_frequency(doc_id, term), self.inverse_document_frequency(term))

    def table(self, doc_id: Hashable) -> Mapping[str, int]:
        """Read-only view of one document's term counts."""

        return MappingProxyType(self._require(doc_id))

    def document_ids(self) -> list[Hashable]:
        return sorted(self._snapshot())

    def vocabulary(self) -> list[str]:
        terms: set[str] = set()
        for table in self._snapshot().values():
            terms.update(table.terms())
        return sorted(terms)

    def _snapshot(self) -> dict[Hashable, TermFrequencyTable]:
        with self._registry_lock:
            return self._tables.copy()

    def _require(self, doc_id: Hashable) -> TermFrequencyTable:
        table = self._tables.get(doc_id)
        if table is None:
            raise UnknownDocumentError(doc_id)
        return table

    def __len__(self) -> int:
        return len(self._tables)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._tables
