"""
glyphgen – identifiers.py
=========================

Turn raw glyph names into canonical identifiers and keep them unique.

The rules are literal and character based: hyphens become underscores,
every ASCII digit is spelled out on its own, and any name that still holds
punctuation is rejected. Downstream code depends on the exact names, so
the rules must not become "smarter".
"""

from __future__ import annotations

import unicodedata

# ============================================================
# Substitution tables
# ============================================================

#: ASCII digit → English word, applied character by character.
DIGIT_WORDS: dict[str, str] = {
    "0": "zero",
    "1": "one",
    "2": "two",
    "3": "three",
    "4": "four",
    "5": "five",
    "6": "six",
    "7": "seven",
    "8": "eight",
    "9": "nine",
}

#: Characters that disqualify a glyph once substitutions are done.
#: Placeholder glyphs such as ``.null`` are filtered out through this set.
DISALLOWED_CHARACTERS = frozenset("+-*/@!#$%^&()=~`;:\"',<>?. []{}|\\")

#: Replacement for names that end up as a lone underscore (Material fonts).
UNDERSCORE_WORD = "underscore"

_TRANSLATION = str.maketrans({"-": "_", **DIGIT_WORDS})


# ============================================================
# Sanitizer
# ============================================================


def canonicalize_glyph_name(raw_name: str) -> str:
    """Apply the hyphen, digit and lone-underscore substitutions.

    Example::

        >>> canonicalize_glyph_name("1f600")
        'onefsixzerozero'
        >>> canonicalize_glyph_name("-")
        'underscore'
    """
    name = raw_name.translate(_TRANSLATION)
    if name == "_":
        return UNDERSCORE_WORD
    return name


def find_disallowed_character(name: str) -> str | None:
    """Return the first disallowed character of ``name``, if any."""
    for char in name:
        if char in DISALLOWED_CHARACTERS:
            return char
    return None


def sanitize_glyph_name(raw_name: str) -> str | None:
    """Return the canonical identifier for ``raw_name``.

    ``None`` means the glyph must be skipped: either a disallowed character
    survived the substitutions, or the result is not a valid identifier
    (empty names, symbol or control characters). Digits outside ASCII have
    no word and are rejected too.
    """
    name = canonicalize_glyph_name(raw_name)
    if find_disallowed_character(name) is not None:
        return None
    if not name.isidentifier():
        return None
    if any(unicodedata.category(char) == "Nd" for char in name):
        return None
    return name


# ============================================================
# Deduplicator
# ============================================================


class NameRegistry:
    """Occurrence counter of canonical names for one generation pass.

    Only the first claimant of a name is accepted. Later claimants are
    rejected but still counted, so the amount of lost glyphs stays
    observable through :meth:`duplicates`.
    """

    def __init__(self) -> None:
        self.counts: dict[str, int] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.counts

    def __len__(self) -> int:
        return len(self.counts)

    def claim(self, name: str) -> bool:
        """Register one occurrence of ``name``; ``True`` if it is the first."""
        amount = self.counts.get(name)
        if amount is not None:
            self.counts[name] = amount + 1
            return False
        self.counts[name] = 1
        return True

    def duplicates(self) -> dict[str, int]:
        """Return ``{name: discarded_count}`` for names claimed more than once."""
        return {name: n - 1 for name, n in self.counts.items() if n > 1}
