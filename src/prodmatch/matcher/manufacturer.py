"""Manufacturer identification, first stage of listing classification."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..config import Settings, settings as default_settings
from ..schemas import Listing, Product
from .keywords import AliasIndex
from .model import ModelMatcher
from .text import normalize

logger = logging.getLogger(__name__)


class ManufacturerMatcher:
    """Canonical manufacturer lookup plus one ModelMatcher per manufacturer."""

    def __init__(self, products: Iterable[Product], settings: Settings | None = None) -> None:
        cfg = settings if settings is not None else default_settings

        grouped: dict[str, list[Product]] = {}
        for product in products:
            grouped.setdefault(normalize(product.manufacturer).strip(), []).append(product)

        self._product_names: dict[str, list[str]] = {
            manufacturer: [p.name for p in group] for manufacturer, group in grouped.items()
        }
        self._index = AliasIndex(
            grouped,
            margin=cfg.manufacturer_match_delta,
            ignorable_words=cfg.ignorable_words,
        )
        self._models: dict[str, ModelMatcher] = {
            manufacturer: ModelMatcher(
                group,
                margin=cfg.model_match_delta,
                small_word_size=cfg.small_word_size,
                ignorable_words=cfg.ignorable_words,
            )
            for manufacturer, group in grouped.items()
        }

        logger.info(
            "Manufacturer index built: %d manufacturers, %d products",
            len(self._product_names), sum(len(v) for v in self._product_names.values()),
        )

    @property
    def manufacturers(self) -> list[str]:
        return list(self._product_names)

    def product_names(self, manufacturer: str) -> list[str]:
        return list(self._product_names.get(manufacturer, ()))

    def model_matcher(self, manufacturer: str) -> ModelMatcher | None:
        return self._models.get(manufacturer)

    def lookup_text(self, manufacturer: str, title: str) -> str | None:
        """Match on the manufacturer alone, then on manufacturer + title.

        Both arguments must already be normalized.
        """
        result = self._index.lookup(manufacturer)
        if result is None:
            result = self._index.lookup(f"{manufacturer} {title}")
        return result

    def lookup(self, listing: Listing) -> str | None:
        """Return the canonical manufacturer for ``listing``, or None."""
        return self.lookup_text(normalize(listing.manufacturer), normalize(listing.title))
