"""
Text Helpers
============
Canonical search keys, title ordering and markdown escaping.

Why is this file needed?
------------------------
Search, link resolution and the page lists all compare strings. They must
agree on what "the same term" means, so every comparison goes through
normalize_search_key().
"""
from __future__ import annotations

import locale
import unicodedata

# Possessive / elision marks carry no meaning for lookup ("Bayes' Theorem")
_DROPPED_MARKS = str.maketrans("", "", "'’‘`")
_SEPARATORS = str.maketrans({"_": " ", "-": " "})


def fold_diacritics(text: str) -> str:
    """Strip combining marks after compatibility decomposition (é -> e)."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_search_key(text: str) -> str:
    """
    Canonical form used for every search and link comparison.

    Folds case and diacritics, drops apostrophes, turns '_' and '-' into
    spaces and collapses whitespace. Idempotent.
    """
    # Decomposition can expose characters casefold maps again (ϲ -> ς -> σ)
    # and casefold can emit combining marks (İ -> i̇); repeat until stable.
    folded = fold_diacritics(text).casefold()
    while True:
        refolded = fold_diacritics(folded).casefold()
        if refolded == folded:
            break
        folded = refolded
    folded = folded.translate(_DROPPED_MARKS).translate(_SEPARATORS)
    return " ".join(folded.split())


def title_sort_key(title: str) -> tuple[str, str, str]:
    """Locale-aware, case-insensitive ordering key for page titles."""
    primary = fold_diacritics(title.casefold())
    return locale.strxfrm(primary), title.casefold(), title


def markdown_escape(text: str) -> str:
    """Escape characters that would break a markdown link label."""
    for ch in ("\\", "[", "]", "(", ")"):
        text = text.replace(ch, "\\" + ch)
    return text
