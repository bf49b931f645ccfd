"""Analyzer utilities for the tf-idf engine.

Analyzers follow a composable tokenizer/filter design: a tokenizer turns a
line of text into tokens and filters transform the token stream. The default
analyzer lowercases the whole line and then splits it on runs of non-word
characters.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
import re
from typing import Protocol


# ASCII word characters only; non-ASCII letters act as separators.
WORD_PATTERN = r"[A-Za-z0-9_]+"


@dataclass
class Token:
    """Represents a token emitted by analyzers."""

    text: str
    position: int
    start_char: int
    end_char: int

    def copy_with(self, **updates: object) -> Token:
        data = {
            "text": self.text,
            "position": self.position,
            "start_char": self.start_char,
            "end_char": self.end_char,
        }
        data.update(updates)
        return Token(**data)


class Analyzer(Protocol):
    """Protocol implemented by analyzers."""

    def __call__(self, text: str) -> list[Token]:  # pragma: no cover - interface definition
        ...


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class RegexTokenizer:
    """Regex-based tokenizer that yields every maximal match as a token."""

    def __init__(self, pattern: str = WORD_PATTERN) -> None:
        self.pattern = re.compile(pattern)

    def __call__(self, text: str) -> Iterator[Token]:
        for position, match in enumerate(self.pattern.finditer(text)):
            yield Token(
                text=match.group(0),
                position=position,
                start_char=match.start(),
                end_char=match.end(),
            )


class LowercaseFilter:
    """Filter that lowercases token text."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            lowered = token.text.lower()
            if lowered == token.text:
                yield token
            else:
                yield token.copy_with(text=lowered)


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def __call__(self, text: str) -> list[Token]:
        stream: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        tokens = [token for token in stream if token.text]
        for idx, token in enumerate(tokens):  # normalize positions post-filtering
            token.position = idx
        return tokens


class WordAnalyzer:
    """Default analyzer: lowercase the line, then split on non-word characters.

    Token offsets refer to the lowercased line, which can be longer than the
    original when a character lowercases to several code points.
    """

    def __init__(self, pattern: str = WORD_PATTERN) -> None:
        self.pipeline = AnalyzerPipeline(RegexTokenizer(pattern), [LowercaseFilter()])

    def __call__(self, text: str) -> list[Token]:
        return self.pipeline(text.lower())


_ANALYZER_FACTORIES: dict[str, Callable[[], Analyzer]] = {
    "default": lambda: WordAnalyzer(),
    "word": lambda: WordAnalyzer(),
}


def get_analyzer(name: str | None) -> Analyzer:
    """Return analyzer by name, defaulting to the word analyzer."""

    if name is None:
        return _ANALYZER_FACTORIES["default"]()
    normalized = name.lower()
    if normalized not in _ANALYZER_FACTORIES:
        msg = f"Unknown analyzer '{name}'. Available: {sorted(_ANALYZER_FACTORIES)}"
        raise ValueError(msg)
    return _ANALYZER_FACTORIES[normalized]()


def normalize_term(term: str) -> str:
    """Lowercase a query term the same way indexed tokens are lowercased."""

    return term.lower()
