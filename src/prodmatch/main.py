"""Load catalog and listings, match them, save the grouped result."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path

from .config import Settings, settings as default_settings
from .orchestrator import MatchOrchestrator
from .storage import RecordFormatError, load_listings, load_products, save_product_listings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


@dataclass
class RunSummary:
    products: int
    listings: int
    matched: int
    elapsed_ms: int


def run(
    products_path: str | Path,
    listings_path: str | Path,
    output_path: str | Path,
    settings: Settings | None = None,
) -> RunSummary:
    cfg = settings if settings is not None else default_settings
    started = time.monotonic()

    products = load_products(products_path)
    orchestrator = MatchOrchestrator(products, cfg)

    listings = load_listings(listings_path)
    logger.info("Matching %d listings...", len(listings))
    results = orchestrator.match(listings)

    save_product_listings(output_path, results)

    elapsed_ms = int((time.monotonic() - started) * 1000)
    summary = RunSummary(
        products=len(results),
        listings=len(listings),
        matched=sum(len(v) for v in results.values()),
        elapsed_ms=elapsed_ms,
    )
    logger.info(
        "Done in %dms: %d/%d listings matched across %d products",
        summary.elapsed_ms, summary.matched, summary.listings, summary.products,
    )
    return summary


def cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="prodmatch",
        description="Match product listings to a catalog of canonical products.",
    )
    parser.add_argument("products", type=Path, help="catalog file, one JSON product per line")
    parser.add_argument("listings", type=Path, help="listings file, one JSON listing per line")
    parser.add_argument("output", type=Path, help="where to write the grouped results")
    parser.add_argument("--workers", type=int, default=None, help="matching threads")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    args = parser.parse_args(argv)

    overrides = {}
    if args.workers is not None:
        if args.workers < 1:
            parser.error("--workers must be at least 1")
        overrides["match_workers"] = args.workers
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    cfg = default_settings.model_copy(update=overrides)

    configure_logging(cfg.log_level)

    try:
        run(args.products, args.listings, args.output, cfg)
    except (OSError, RecordFormatError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0
