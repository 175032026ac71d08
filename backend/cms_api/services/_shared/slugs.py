"""URL slugs for taxonomy rows."""

from __future__ import annotations

import re
import unicodedata

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """
    Lowercase ASCII words joined by single hyphens.

    Accents are folded (``"Café Stories"`` -> ``"cafe-stories"``). Characters
    with no ASCII form are dropped, so the result may be empty.
    """
    folded = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", folded.lower()).strip("-")
