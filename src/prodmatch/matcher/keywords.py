"""Keyword lookup by alias voting.

Every token of every canonical keyword becomes an alias of that keyword.
A query votes for keywords through the aliases it contains:

  Token aliases one keyword       → +1.0 to that keyword
  Token shared by N keywords      → +1/N to each of them
  Keyword tokens absent in query  → score *= 1 - missing/total

Votes may then be reduced onto higher-level keys (model variant → product
name).  The best key is accepted only when it leads the runner-up by at
least ``margin``; anything closer is treated as "no opinion".
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from ..config import settings
from .text import tokenize

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Alias table entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SingleAlias:
    """Token that points at exactly one keyword."""

    keyword: str

    @property
    def keywords(self) -> tuple[str, ...]:
        return (self.keyword,)


@dataclass
class SharedAlias:
    """Token that several keywords have in common; a vote is split between them."""

    keywords: set[str] = field(default_factory=set)


Alias = SingleAlias | SharedAlias


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------


class AliasIndex:
    """Read-only (after construction) keyword lookup with an ambiguity margin."""

    def __init__(
        self,
        keywords: Iterable[str],
        margin: float | None = None,
        ignorable_words: Iterable[str] | None = None,
    ) -> None:
        self.margin = settings.manufacturer_match_delta if margin is None else margin
        self.ignorable_words = frozenset(
            settings.ignorable_words if ignorable_words is None else ignorable_words
        )
        self._keyword_tokens: dict[str, frozenset[str]] = {}
        self._aliases: dict[str, Alias] = {}

        for keyword in keywords:
            tokens = tokenize(keyword)
            self._keyword_tokens[keyword] = frozenset(tokens)
            for token in tokens:
                self.register(token, keyword)

        logger.debug(
            "Alias index built: %d keywords, %d aliases (margin=%.2f)",
            len(self._keyword_tokens), len(self._aliases), self.margin,
        )

    def __len__(self) -> int:
        return len(self._keyword_tokens)

    def __contains__(self, keyword: object) -> bool:
        return keyword in self._keyword_tokens

    @property
    def keywords(self) -> list[str]:
        return list(self._keyword_tokens)

    def alias(self, token: str) -> Alias | None:
        return self._aliases.get(token)

    def register(self, token: str, keyword: str) -> None:
        """Make ``token`` vote for ``keyword``.

        A token moves from unregistered to single to shared and never back.
        """
        if token in self.ignorable_words:
            return

        current = self._aliases.get(token)
        if isinstance(current, SharedAlias):
            current.keywords.add(keyword)
        elif isinstance(current, SingleAlias):
            if current.keyword != keyword:
                self._aliases[token] = SharedAlias({current.keyword, keyword})
        else:
            self._aliases[token] = SingleAlias(keyword)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def scores(
        self,
        query: str,
        reduce: Mapping[str, Sequence[str]] | None = None,
    ) -> dict[str, float]:
        """Vote, penalize incomplete keywords and optionally reduce.

        ``query`` must already be normalized.
        """
        words = tokenize(query)
        result: dict[str, float] = {}

        for word in words:
            entry = self._aliases.get(word)
            if entry is None:
                continue
            _add_split(result, entry.keywords, 1.0)

        self._apply_missing_penalty(result, frozenset(words))

        if reduce is not None:
            reduced: dict[str, float] = {}
            for keyword, value in result.items():
                _add_split(reduced, reduce.get(keyword, ()), value)
            result = reduced

        return result

    def lookup(
        self,
        query: str,
        reduce: Mapping[str, Sequence[str]] | None = None,
    ) -> str | None:
        """Return the decisively best key for ``query``, or None."""
        return self.select_best(self.scores(query, reduce))

    def select_best(self, scored: Mapping[str, float]) -> str | None:
        """Accept the top key only if ``top >= second + margin``."""
        if not scored:
            return None
        ranked = sorted(scored.items(), key=lambda kv: (-kv[1], kv[0]))
        best_key, best = ranked[0]
        second = ranked[1][1] if len(ranked) > 1 else 0.0
        if best >= second + self.margin:
            return best_key
        return None

    def _apply_missing_penalty(self, result: dict[str, float], words: frozenset[str]) -> None:
        for keyword in result:
            tokens = self._keyword_tokens.get(keyword, frozenset())
            total = len(tokens)
            missing = len(tokens - words)
            if total > 0 and missing > 0:
                result[keyword] *= 1.0 - missing / total


def _add_split(scores: dict[str, float], keys: Iterable[str], amount: float) -> None:
    """Add ``amount`` divided equally across ``keys``."""
    keys = list(keys)
    if not keys:
        return
    share = amount / len(keys)
    for key in keys:
        scores[key] = scores.get(key, 0.0) + share
