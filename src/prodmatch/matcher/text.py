"""Text normalization shared by every matching stage.

Only ASCII punctuation and whitespace are handled; anything else passes
through apart from case folding.
"""

from __future__ import annotations

import re
import string

_PUNCT_RE = re.compile("[" + re.escape(string.punctuation) + "]+")
_SPACE_RE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Lowercase, drop punctuation runs and collapse whitespace to single spaces.

    Punctuation is deleted rather than replaced, so "EOS-1D" becomes "eos1d".
    """
    text = text.lower()
    text = _PUNCT_RE.sub("", text)
    return _SPACE_RE.sub(" ", text)


def tokenize(text: str) -> list[str]:
    """Split normalized text on spaces, dropping empty tokens."""
    return [t for t in text.split(" ") if t]
