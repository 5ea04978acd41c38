from .keywords import AliasIndex, SharedAlias, SingleAlias
from .manufacturer import ManufacturerMatcher
from .model import ModelMatcher, spacing_combinations
from .text import normalize, tokenize

__all__ = [
    "AliasIndex",
    "ManufacturerMatcher",
    "ModelMatcher",
    "SharedAlias",
    "SingleAlias",
    "normalize",
    "spacing_combinations",
    "tokenize",
]
