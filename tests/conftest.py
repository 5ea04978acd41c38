"""Test fixtures: a small camera catalog and record factories."""

import pytest

from prodmatch.config import Settings
from prodmatch.schemas import Listing, Product


def _product(name, manufacturer, model, family="", announced="2009-01-01T19:00:00.000-05:00"):
    return Product(
        name=name,
        manufacturer=manufacturer,
        family=family,
        model=model,
        announced_date=announced,
    )


def _listing(title, manufacturer, currency="USD", price="99.99"):
    return Listing(title=title, manufacturer=manufacturer, currency=currency, price=price)


@pytest.fixture()
def make_product():
    return _product


@pytest.fixture()
def make_listing():
    return _listing


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        manufacturer_match_delta=0.45,
        model_match_delta=0.25,
        small_word_size=3,
        match_workers=4,
        ignorable_words=frozenset({"zoom", "camera", "digital", "optical"}),
    )


@pytest.fixture()
def a70() -> Product:
    return _product("Canon_PowerShot_A70", "Canon", "PowerShot A70")


@pytest.fixture()
def catalog(a70) -> list[Product]:
    return [
        a70,
        _product("Canon_EOS_Rebel_T1i", "Canon", "T1i", family="Rebel"),
        _product("Nikon_D90", "Nikon", "D90"),
        _product("Fujifilm_FinePix_S2500HD", "Fujifilm", "S2500HD", family="FinePix"),
        _product("Konica_Minolta_DiMAGE_X50", "Konica Minolta", "X50", family="DiMAGE"),
        _product("Olympus_Stylus_Tough_6010", "Olympus", "Tough 6010", family="Stylus"),
    ]
