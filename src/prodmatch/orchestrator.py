"""Concurrent listing classification against a prebuilt catalog index.

Indices are built once, before any worker starts, and only read afterwards.
The per-product listing collections are the only shared mutable state.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from .config import Settings, settings as default_settings
from .matcher.manufacturer import ManufacturerMatcher
from .matcher.text import normalize
from .schemas import Listing, Product

logger = logging.getLogger(__name__)


class ListingState(str, Enum):
    UNMATCHED = "unmatched"
    ASSIGNED = "assigned"


@dataclass
class ListingOutcome:
    """Where a single listing ended up.  ``error`` marks a listing whose classification raised."""

    state: ListingState
    manufacturer: str | None = None
    product_name: str | None = None
    error: bool = False

    @property
    def is_match(self) -> bool:
        return self.state is ListingState.ASSIGNED


class WorkQueue:
    """Thread-safe queue of (input position, listing) pairs."""

    def __init__(self, listings: Iterable[Listing]) -> None:
        self._lock = threading.Lock()
        self._items: deque[tuple[int, Listing]] = deque(enumerate(listings))

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def try_pop(self) -> tuple[int, Listing] | None:
        """Return the next pending item, or None once the queue is drained."""
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()


class ProductListings:
    """Append-only, lock-guarded collection of one product's listings."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: list[tuple[int, Listing]] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def append(self, position: int, listing: Listing) -> None:
        with self._lock:
            self._entries.append((position, listing))

    def listings(self) -> list[Listing]:
        """Listings in input order, whatever order the workers finished in."""
        with self._lock:
            entries = sorted(self._entries, key=lambda e: e[0])
        return [listing for _, listing in entries]


class MatchOrchestrator:
    """Runs manufacturer → model classification over a set of listings."""

    def __init__(
        self,
        products: Sequence[Product],
        settings: Settings | None = None,
        manufacturer_matcher: ManufacturerMatcher | None = None,
    ) -> None:
        self.settings = settings if settings is not None else default_settings
        self.products = list(products)
        self.manufacturers = manufacturer_matcher or ManufacturerMatcher(
            self.products, self.settings
        )

    def classify(self, listing: Listing) -> ListingOutcome:
        """Resolve the manufacturer, then the product.  A failed stage is final."""
        manufacturer = normalize(listing.manufacturer)
        title = normalize(listing.title)

        canonical = self.manufacturers.lookup_text(manufacturer, title)
        if canonical is None:
            return ListingOutcome(ListingState.UNMATCHED)

        models = self.manufacturers.model_matcher(canonical)
        if models is None:
            return ListingOutcome(ListingState.UNMATCHED, manufacturer=canonical)

        product_name = models.lookup(title)
        if product_name is None:
            return ListingOutcome(ListingState.UNMATCHED, manufacturer=canonical)

        return ListingOutcome(
            ListingState.ASSIGNED, manufacturer=canonical, product_name=product_name,
        )

    def classify_guarded(self, listing: Listing, position: int = -1) -> ListingOutcome:
        """Like :meth:`classify`, but a raising listing comes back unmatched with ``error`` set."""
        try:
            return self.classify(listing)
        except Exception:
            logger.exception("Failed to classify listing #%d: %r", position, listing.title)
            return ListingOutcome(ListingState.UNMATCHED, error=True)

    def match(
        self,
        listings: Iterable[Listing],
        workers: int | None = None,
    ) -> dict[str, list[Listing]]:
        """Classify every listing and group the matches by product name.

        Every catalog product appears in the result, in catalog order.
        Blocks until all workers have drained the queue.
        """
        if workers is None:
            workers = self.settings.match_workers
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")

        results: dict[str, ProductListings] = {}
        for product in self.products:
            results.setdefault(product.name, ProductListings())

        queue = WorkQueue(listings)
        total = len(queue)
        failures = _Counter()

        threads = [
            threading.Thread(
                target=self._drain,
                args=(queue, results, failures),
                name=f"match-worker-{i}",
                daemon=True,
            )
            for i in range(workers)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        grouped = {name: collection.listings() for name, collection in results.items()}
        matched = sum(len(v) for v in grouped.values())
        logger.info(
            "Matched %d/%d listings to %d products (%d workers)",
            matched, total, sum(1 for v in grouped.values() if v), workers,
        )
        if failures.value:
            logger.warning("%d listings failed to classify and were left unmatched", failures.value)
        return grouped

    def _drain(
        self,
        queue: WorkQueue,
        results: dict[str, ProductListings],
        failures: _Counter,
    ) -> None:
        while True:
            item = queue.try_pop()
            if item is None:
                break
            position, listing = item
            outcome = self.classify_guarded(listing, position)
            if outcome.error:
                failures.increment()
                continue

            if not outcome.is_match:
                logger.debug("Listing #%d unmatched: %r", position, listing.title)
                continue

            collection = results.get(outcome.product_name)
            if collection is None:
                logger.warning(
                    "Listing #%d matched unknown product %r", position, outcome.product_name,
                )
                continue
            collection.append(position, listing)
            logger.debug("Listing #%d → %s", position, outcome.product_name)


class _Counter:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.value = 0

    def increment(self) -> None:
        with self._lock:
            self.value += 1
