"""Unit tests for the in-memory index store."""

import io
import logging
import math
import threading

import pytest

from tfidf_engine.search.analyzers import AnalyzerPipeline, RegexTokenizer
from tfidf_engine.search.index_store import IndexStore, UnknownDocumentError
from tfidf_engine.search.models import DocumentId


D1 = DocumentId("d1")
D2 = DocumentId("d2")
D3 = DocumentId("d3")


class FailingStream:
    """Yields the given lines, then raises ``OSError``."""

    def __init__(self, lines):
        self.lines = list(lines)
        self.reads = 0

    def __iter__(self):
        for line in self.lines:
            self.reads += 1
            yield line
        raise OSError("disk went away")


class TestAddDocument:
    def test_counts_terms_per_document(self, pets_store):
        assert pets_store.term_frequency(D1, "dog") == 2
        assert pets_store.term_frequency(D2, "dog") == 3
        assert pets_store.term_frequency(D1, "cat") == 1

    def test_terms_are_case_insensitive(self, store):
        store.add_document(D1, io.StringIO("Dog DOG dog"))

        assert store.term_frequency(D1, "dog") == 3
        assert store.term_frequency(D1, "DoG") == 3

    def test_line_is_lowercased_before_tokenizing(self, store):
        store.add_document(D1, "\u212Aelvin \u0130stanbul")

        assert store.term_frequency(D1, "kelvin") == 1
        assert store.index_lookup("i") == {D1}
        assert store.index_lookup("stanbul") == {D1}

    def test_reads_every_line(self, store):
        store.add_document(D1, io.StringIO("alpha beta\n\nbeta-gamma\nalpha"))

        assert dict(store.table(D1)) == {"alpha": 2, "beta": 2, "gamma": 1}

    def test_words_are_not_joined_across_lines(self, store):
        store.add_document(D1, io.StringIO("foo\nbar"))

        assert store.index_lookup("foobar") == set()
        assert store.term_frequency(D1, "foo") == 1

    def test_accepts_plain_string(self, store):
        store.add_document(D1, "one two two")

        assert store.term_frequency(D1, "two") == 2

    def test_accepts_any_iterable_of_lines(self, store):
        store.add_document(D1, ["a b", "b"])

        assert store.term_frequency(D1, "b") == 2

    def test_empty_document_is_indexed(self, store):
        store.add_document(D1, io.StringIO(""))

        assert D1 in store
        assert len(store) == 1
        assert store.term_frequency(D1, "anything") == 0

    def test_second_insertion_is_ignored(self, pets_store):
        before = dict(pets_store.table(D1))

        pets_store.add_document(D1, io.StringIO("fish fish fish dog"))

        assert dict(pets_store.table(D1)) == before
        assert pets_store.term_frequency(D1, "fish") == 0
        assert pets_store.index_lookup("fish") == set()
        assert len(pets_store) == 2

    def test_second_insertion_does_not_read_stream(self, store):
        store.add_document(D1, "first")
        stream = FailingStream(["second"])

        store.add_document(D1, stream)

        assert stream.reads == 0

    def test_duplicate_insertion_is_logged(self, store, caplog):
        store.add_document(D1, "first")

        with caplog.at_level(logging.DEBUG, logger="tfidf_engine.search.index_store"):
            store.add_document(D1, "second")

        assert "Ignoring duplicate insertion" in caplog.text
        assert caplog.records[-1].doc_id == D1

    def test_read_failure_propagates_and_keeps_partial_table(self, store):
        with pytest.raises(OSError, match="disk went away"):
            store.add_document(D1, FailingStream(["cat dog", "dog"]))

        assert D1 in store
        assert store.term_frequency(D1, "dog") == 2

    def test_read_failure_does_not_affect_other_documents(self, pets_store):
        with pytest.raises(OSError):
            pets_store.add_document(D3, FailingStream([]))

        assert pets_store.term_frequency(D2, "dog") == 3
        assert pets_store.index_lookup("dog") == {D1, D2}

    def test_custom_analyzer(self):
        store = IndexStore(AnalyzerPipeline(RegexTokenizer(r"[0-9]+")))

        store.add_document(D1, "v1 v22 v1")

        assert dict(store.table(D1)) == {"1": 2, "22": 1}

    def test_plain_strings_work_as_ids(self, store):
        store.add_document("readme", "hello")

        assert store.term_frequency("readme", "hello") == 1


class TestIndexLookup:
    def test_returns_documents_containing_term(self, pets_store):
        assert pets_store.index_lookup("dog") == {D1, D2}
        assert pets_store.index_lookup("cat") == {D1}

    def test_is_case_insensitive(self, pets_store):
        assert pets_store.index_lookup("CAT") == {D1}

    def test_unknown_term_is_empty(self, pets_store):
        assert pets_store.index_lookup("zebra") == set()

    def test_term_with_non_word_characters_never_matches(self, pets_store):
        assert pets_store.index_lookup("cat dog") == set()
        assert pets_store.index_lookup("dog!") == set()
        assert pets_store.index_lookup("") == set()

    def test_empty_store(self, store):
        assert store.index_lookup("dog") == set()

    def test_agrees_with_term_frequency(self, store):
        store.add_document(D1, "red green")
        store.add_document(D2, "green blue")
        store.add_document(D3, "")

        for term in store.vocabulary() + ["purple"]:
            expected = {doc_id for doc_id in store.document_ids() if store.term_frequency(doc_id, term) > 0}
            assert store.index_lookup(term) == expected


class TestTermFrequency:
    def test_absent_term_is_zero(self, pets_store):
        assert pets_store.term_frequency(D2, "cat") == 0

    @pytest.mark.parametrize("term", ["dog", "", "never seen"])
    def test_unknown_document_raises(self, pets_store, term):
        with pytest.raises(UnknownDocumentError) as excinfo:
            pets_store.term_frequency(D3, term)

        assert excinfo.value.doc_id == D3
        assert isinstance(excinfo.value, ValueError)

    def test_unknown_document_on_empty_store(self, store):
        with pytest.raises(UnknownDocumentError):
            store.term_frequency(D1, "")


class TestInverseDocumentFrequency:
    def test_empty_store_is_zero(self, store):
        assert store.inverse_document_frequency("dog") == 0.0
        assert store.inverse_document_frequency("") == 0.0

    def test_term_in_every_document_is_zero(self, pets_store):
        assert pets_store.inverse_document_frequency("dog") == 0.0

    def test_partial_coverage(self, pets_store):
        assert pets_store.inverse_document_frequency("cat") == pytest.approx(math.log(3 / 2))

    def test_unseen_term(self, pets_store):
        assert pets_store.inverse_document_frequency("zebra") == pytest.approx(math.log(3))

    def test_reflects_new_documents_immediately(self, pets_store):
        pets_store.add_document(D3, "bird")

        assert pets_store.inverse_document_frequency("dog") == pytest.approx(math.log(4 / 3))


class TestTfIdf:
    def test_product_of_tf_and_idf(self, pets_store):
        assert pets_store.tf_idf(D1, "cat") == pytest.approx(math.log(3 / 2))
        assert pets_store.tf_idf(D2, "cat") == 0.0

    def test_term_in_every_document_scores_zero(self, pets_store):
        assert pets_store.tf_idf(D1, "dog") == 0.0
        assert pets_store.tf_idf(D2, "dog") == 0.0

    @pytest.mark.parametrize("term", ["dog", ""])
    def test_unknown_document_raises(self, pets_store, term):
        with pytest.raises(UnknownDocumentError):
            pets_store.tf_idf(D3, term)

    def test_never_negative(self, store):
        store.add_document(D1, "a a b")
        store.add_document(D2, "a c")

        for doc_id in store.document_ids():
            for term in ("a", "b", "c", "d"):
                assert store.tf_idf(doc_id, term) >= 0.0


class TestInspection:
    def test_document_ids_are_sorted(self, store):
        store.add_document(D2, "x")
        store.add_document(D1, "y")

        assert store.document_ids() == [D1, D2]

    def test_vocabulary(self, pets_store):
        assert pets_store.vocabulary() == ["cat", "dog"]

    def test_table_is_read_only(self, pets_store):
        view = pets_store.table(D1)

        with pytest.raises(TypeError):
            view["dog"] = 10  # type: ignore[index]
        assert view["dog"] == 2

    def test_table_unknown_document(self, store):
        with pytest.raises(UnknownDocumentError):
            store.table(D1)

    def test_contains_and_len(self, pets_store):
        assert D1 in pets_store
        assert D3 not in pets_store
        assert len(pets_store) == 2


class TestConcurrentAccess:
    def test_reads_during_inserts_do_not_fail(self, store):
        stop = threading.Event()
        errors = []

        def read_loop():
            while not stop.is_set():
                try:
                    store.index_lookup("word")
                    store.vocabulary()
                    store.document_ids()
                    store.inverse_document_frequency("word")
                except Exception as exc:
                    errors.append(exc)
                    return

        reader = threading.Thread(target=read_loop)
        reader.start()
        try:
            for i in range(5000):
                store.add_document(DocumentId(f"doc{i:05d}"), f"word term{i}\nterm{i} again")
        finally:
            stop.set()
            reader.join()

        assert errors == []
        assert len(store) == 5000
        assert store.index_lookup("word") == set(store.document_ids())
