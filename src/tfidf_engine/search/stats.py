"""Statistical helpers for tf-idf scoring.

The functions here stay independent of the index store so the scoring
formula can be unit tested on plain integers.
"""

from __future__ import annotations

import math


def calculate_idf(doc_freq: int, total_docs: int) -> float:
    """Return ``ln((1 + N) / (1 + M))`` for ``M`` matching out of ``N`` documents.

    ``doc_freq`` is clamped to ``[0, total_docs]`` so the ratio never drops
    below one and the result is never negative. An empty collection yields 0.
    """

    total = max(total_docs, 0)
    df = max(0, min(doc_freq, total))
    return math.log((1 + total) / (1 + df))


def tf_idf(term_freq: int, idf: float) -> float:
    """Combine a raw term count with an inverse document frequency."""

    if term_freq <= 0:
        return 0.0
    return term_freq * idf
