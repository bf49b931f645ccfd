"""
Search indexing and ranking package.

This package provides a pure-Python tf-idf stack:
- analyzers: Tokenizers and filters (word splitting, lowercase)
- models: Document ids, term-frequency tables, ranked results
- stats: IDF and tf-idf scoring helpers
- index_store: Per-document term tables and derived lookups
- ranking: Relevance ordering of matching documents
"""
