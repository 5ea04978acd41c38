"""JSON-lines readers for the catalog and listings, writer for the results.

Loading is all-or-nothing: the first bad line aborts the whole file.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any, Callable, TypeVar

from pydantic import ValidationError

from .schemas import Listing, Product

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordFormatError(ValueError):
    """Raised when a line of an input file is not a valid record."""

    def __init__(self, path: str | Path, line_no: int, reason: str):
        super().__init__(f"{path}:{line_no}: {reason}")
        self.path = str(path)
        self.line_no = line_no


def _iter_objects(path: Path) -> Iterator[tuple[int, dict[str, Any]]]:
    # Decoded per line so an encoding error points at the offending line
    with path.open("rb") as f:
        for line_no, raw in enumerate(f, start=1):
            try:
                line = raw.decode("utf-8").strip()
            except UnicodeDecodeError as e:
                raise RecordFormatError(path, line_no, f"invalid encoding: {e.reason}") from e
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as e:
                raise RecordFormatError(path, line_no, f"invalid JSON: {e.msg}") from e
            if not isinstance(obj, dict):
                raise RecordFormatError(path, line_no, "expected a JSON object")
            yield line_no, obj


def _load(path: str | Path, parse: Callable[[dict[str, Any]], T], kind: str) -> list[T]:
    path = Path(path)
    logger.info("Reading %s file: %s", kind, path)
    records: list[T] = []
    for line_no, obj in _iter_objects(path):
        try:
            records.append(parse(obj))
        except ValidationError as e:
            errors = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise RecordFormatError(path, line_no, f"invalid {kind}: {errors}") from e
    logger.info("Loaded %d %ss", len(records), kind)
    return records


def load_products(path: str | Path) -> list[Product]:
    return _load(path, Product.model_validate, "product")


def load_listings(path: str | Path) -> list[Listing]:
    return _load(path, Listing.from_raw, "listing")


def save_product_listings(
    path: str | Path,
    results: Mapping[str, Sequence[Listing]],
) -> None:
    """Write one ``{"product_name", "listings"}`` line per product, in mapping order."""
    path = Path(path)
    logger.info("Saving product listings file: %s", path)
    with path.open("w", encoding="utf-8") as f:
        for product_name, listings in results.items():
            record = {
                "product_name": product_name,
                "listings": [listing.payload() for listing in listings],
            }
            f.write(json.dumps(record, ensure_ascii=False))
            f.write("\n")
