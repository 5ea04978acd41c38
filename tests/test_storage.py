"""Tests for JSON-lines loading and result writing."""

import json

import pytest

from prodmatch.schemas import Listing
from prodmatch.storage import (
    RecordFormatError,
    load_listings,
    load_products,
    save_product_listings,
)

PRODUCT_LINES = [
    {
        "product_name": "Canon_PowerShot_A70",
        "manufacturer": "Canon",
        "model": "PowerShot A70",
        "announced-date": "2003-02-17T19:00:00.000-05:00",
    },
    {
        "product_name": "Canon_EOS_Rebel_T1i",
        "manufacturer": "Canon",
        "family": "Rebel",
        "model": "T1i",
        "announced-date": "2009-03-24T20:00:00.000-04:00",
    },
]

LISTING_LINE = {
    "title": "Canon PowerShot A70 3.2MP",
    "manufacturer": "Canon Canada",
    "currency": "CAD",
    "price": "129.99",
}


def _write_lines(path, objects):
    path.write_text("\n".join(json.dumps(o) for o in objects) + "\n", encoding="utf-8")
    return path


class TestLoadProducts:
    def test_fields(self, tmp_path):
        products = load_products(_write_lines(tmp_path / "products.txt", PRODUCT_LINES))
        assert [p.name for p in products] == ["Canon_PowerShot_A70", "Canon_EOS_Rebel_T1i"]
        assert products[0].family == ""
        assert products[1].family == "Rebel"
        assert products[1].announced_date == "2009-03-24T20:00:00.000-04:00"

    def test_null_family(self, tmp_path):
        line = {**PRODUCT_LINES[0], "family": None}
        products = load_products(_write_lines(tmp_path / "products.txt", [line]))
        assert products[0].family == ""

    def test_blank_lines_skipped(self, tmp_path):
        path = tmp_path / "products.txt"
        path.write_text("\n" + json.dumps(PRODUCT_LINES[0]) + "\n\n", encoding="utf-8")
        assert len(load_products(path)) == 1

    def test_missing_field(self, tmp_path):
        line = {k: v for k, v in PRODUCT_LINES[0].items() if k != "model"}
        path = _write_lines(tmp_path / "products.txt", [PRODUCT_LINES[1], line])
        with pytest.raises(RecordFormatError) as exc:
            load_products(path)
        assert exc.value.line_no == 2
        assert "model" in str(exc.value)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "products.txt"
        path.write_text(json.dumps(PRODUCT_LINES[0]) + "\n{not json\n", encoding="utf-8")
        with pytest.raises(RecordFormatError) as exc:
            load_products(path)
        assert exc.value.line_no == 2
        assert isinstance(exc.value.__cause__, json.JSONDecodeError)

    def test_not_an_object(self, tmp_path):
        path = _write_lines(tmp_path / "products.txt", [["a", "b"]])
        with pytest.raises(RecordFormatError, match="expected a JSON object"):
            load_products(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_products(tmp_path / "nope.txt")


class TestLoadListings:
    def test_raw_kept(self, tmp_path):
        line = {**LISTING_LINE, "seller": "camerastore"}
        listings = load_listings(_write_lines(tmp_path / "listings.txt", [line]))
        assert listings[0].title == "Canon PowerShot A70 3.2MP"
        assert listings[0].raw == line

    def test_numeric_price_accepted(self, tmp_path):
        line = {**LISTING_LINE, "price": 129.99}
        listings = load_listings(_write_lines(tmp_path / "listings.txt", [line]))
        assert listings[0].price == "129.99"

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "listings.txt"
        path.write_bytes(
            json.dumps(LISTING_LINE).encode("utf-8") + b"\n"
            + b'{"title": "\xff Canon", "manufacturer": "Canon"}\n'
        )
        with pytest.raises(RecordFormatError, match="invalid encoding") as exc:
            load_listings(path)
        assert exc.value.line_no == 2
        assert isinstance(exc.value.__cause__, UnicodeDecodeError)

    def test_missing_currency(self, tmp_path):
        line = {k: v for k, v in LISTING_LINE.items() if k != "currency"}
        with pytest.raises(RecordFormatError, match="currency"):
            load_listings(_write_lines(tmp_path / "listings.txt", [line]))


class TestSaveProductListings:
    def test_one_line_per_product_in_order(self, tmp_path):
        raw = {**LISTING_LINE, "seller": "camerastore"}
        results = {
            "Canon_PowerShot_A70": [Listing.from_raw(raw)],
            "Canon_EOS_Rebel_T1i": [],
        }
        path = tmp_path / "results.txt"
        save_product_listings(path, results)

        lines = [json.loads(l) for l in path.read_text(encoding="utf-8").splitlines()]
        assert lines == [
            {"product_name": "Canon_PowerShot_A70", "listings": [raw]},
            {"product_name": "Canon_EOS_Rebel_T1i", "listings": []},
        ]

    def test_listing_without_raw(self, tmp_path, make_listing):
        path = tmp_path / "results.txt"
        save_product_listings(path, {"P": [make_listing("t", "m", "USD", "1.00")]})
        line = json.loads(path.read_text(encoding="utf-8"))
        assert line["listings"] == [
            {"title": "t", "manufacturer": "m", "currency": "USD", "price": "1.00"},
        ]

    def test_non_ascii_preserved(self, tmp_path):
        raw = {**LISTING_LINE, "title": "Canon PowerShot A70 Kamera für Einsteiger"}
        path = tmp_path / "results.txt"
        save_product_listings(path, {"P": [Listing.from_raw(raw)]})
        assert "für" in path.read_text(encoding="utf-8")
