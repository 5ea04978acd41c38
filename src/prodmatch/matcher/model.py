"""Model (and family) identification within one manufacturer."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..config import settings
from ..schemas import Listing, Product
from .keywords import AliasIndex
from .text import normalize, tokenize

logger = logging.getLogger(__name__)


def spacing_combinations(model: str, small_word_size: int | None = None) -> list[str]:
    """Return ``model`` plus renderings with spaces removed around short words.

    Free text is inconsistent about spacing in model numbers ("Power Shot A70",
    "PowerShot A70", "PowerShot A 70").  Each word of at most
    ``small_word_size`` characters gets variants with the space to its left,
    to its right, or both removed.  A single boundary between two longer
    words may also be joined, alone or together with one of those.  Case is
    preserved and the original spacing comes first.
    """
    if small_word_size is None:
        small_word_size = settings.small_word_size

    words = tokenize(model)
    if len(words) < 2:
        return [" ".join(words)]

    last_gap = len(words) - 2
    short_joins: list[set[int]] = []
    touched: set[int] = set()
    for i, word in enumerate(words):
        if len(word) > small_word_size:
            continue
        left = {i - 1} if i > 0 else set()
        right = {i} if i <= last_gap else set()
        for gaps in (left, right, left | right):
            if gaps:
                short_joins.append(gaps)
        touched |= left | right
    long_gaps = [i for i in range(last_gap + 1) if i not in touched]

    result: dict[str, None] = {" ".join(words): None}
    for gaps in short_joins:
        result.setdefault(_join(words, gaps), None)
    for extra in long_gaps:
        result.setdefault(_join(words, {extra}), None)
        for gaps in short_joins:
            result.setdefault(_join(words, gaps | {extra}), None)
    return list(result)


def _join(words: list[str], gaps: set[int]) -> str:
    parts = [words[0]]
    for i, word in enumerate(words[1:]):
        if i not in gaps:
            parts.append(" ")
        parts.append(word)
    return "".join(parts)


class ModelMatcher:
    """Alias lookup over model variants of one manufacturer's products.

    Variant keys reduce to the product names they may denote, so votes land
    directly on products.  Two products sharing a variant split its votes and
    stay unmatched unless something else (usually the family) separates them.
    """

    def __init__(
        self,
        products: Iterable[Product],
        margin: float | None = None,
        small_word_size: int | None = None,
        ignorable_words: Iterable[str] | None = None,
    ) -> None:
        if margin is None:
            margin = settings.model_match_delta

        self._product_names: dict[str, list[str]] = {}
        for product in products:
            model = normalize(product.model).strip()
            family = normalize(product.family).strip()
            for variant in spacing_combinations(model, small_word_size):
                self._add(variant, product.name)
                if family:
                    self._add(f"{variant} {family}", product.name)

        self._index = AliasIndex(
            self._product_names, margin=margin, ignorable_words=ignorable_words,
        )

    def _add(self, key: str, product_name: str) -> None:
        self._product_names.setdefault(key, []).append(product_name)

    @property
    def variants(self) -> dict[str, list[str]]:
        """Variant key → product names it may denote."""
        return self._product_names

    def lookup(self, title: str) -> str | None:
        """Return the decisively matching product name for a normalized title."""
        return self._index.lookup(title, self._product_names)

    def scores(self, title: str) -> dict[str, float]:
        return self._index.scores(title, self._product_names)

    def lookup_listing(self, listing: Listing) -> str | None:
        return self.lookup(normalize(listing.title))
