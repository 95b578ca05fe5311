"""
glyphgen – font_tables.py
=========================

Font introspection for the generator, built on ``fontTools``.

This module is the only place that touches font binaries. It exposes a
narrow view of one font face:

- the codepoints of the first Unicode character-map subtable,
- codepoint → glyph index lookup,
- glyph index → native glyph name lookup.

No filesystem access happens here: callers hand in the raw bytes.
"""

from __future__ import annotations

import io
from typing import NamedTuple

# fontTools does not provide type stubs/py.typed
from fontTools.ttLib import TTFont  # type: ignore[import]

from glyphgen.errors import MalformedFont, MissingCharacterMap

#: Name given to glyphs that carry no native name.
UNNAMED = "unnamed"

MAX_UNICODE = 0x10FFFF
SURROGATES = range(0xD800, 0xE000)

#: ``post`` table versions that store real glyph names.
NAMED_POST_FORMATS = (1.0, 2.0, 2.5)


class GlyphCandidate(NamedTuple):
    """A codepoint with a glyph, before sanitization."""

    codepoint: int
    raw_name: str


# -----------------------
# Face wrapper
# -----------------------
class FontFace:
    """One parsed font face and its selected Unicode cmap subtable.

    Instances are created by :func:`load_face`; the constructor assumes the
    character map has already been validated.
    """

    def __init__(self, tt: TTFont, subtable, glyph_order: list[str]) -> None:
        self.tt = tt
        self.subtable = subtable
        self.glyph_order = glyph_order
        self.has_native_names = has_native_glyph_names(tt)
        self.stored_names = stored_post_names(tt)

    def codepoints(self) -> list[int]:
        """Return the subtable's codepoints in their natural order."""
        return list(self.subtable.cmap.keys())

    def glyph_index(self, codepoint: int) -> int | None:
        """Return the glyph index mapped to ``codepoint``.

        ``None`` when nothing is mapped, or when the mapping points at
        ``.notdef`` (glyph 0).
        """
        glyph_name = self.subtable.cmap.get(codepoint)
        if glyph_name is None:
            return None
        try:
            glyph_id = self.tt.getGlyphID(glyph_name)
        except KeyError:
            return None
        return glyph_id or None

    def glyph_name(self, glyph_id: int) -> str | None:
        """Return the native name of ``glyph_id``, or ``None``.

        fontTools synthesizes names (``uniE001``, ``glyph00012``) for fonts
        that do not store any; those do not count as native names. Names it
        made unique while decoding (``star.1``) map back to the stored one.
        """
        if not self.has_native_names:
            return None
        if glyph_id >= len(self.glyph_order):
            return None
        name = self.glyph_order[glyph_id]
        return self.stored_names.get(name, name) or None


def has_native_glyph_names(tt: TTFont) -> bool:
    """Check whether the font stores glyph names (CFF charset or post 1/2/2.5)."""
    if "CFF " in tt:
        return True
    if "post" not in tt:
        return False
    return tt["post"].formatType in NAMED_POST_FORMATS


def stored_post_names(tt: TTFont) -> dict[str, str]:
    """Return the ``post`` renames fontTools applied, decoded name → stored name.

    Duplicate stored names get a ``.N`` suffix and empty ones a
    ``glyphNNNNN`` name when the table is decoded.
    """
    if "CFF " in tt or "post" not in tt:
        return {}
    return dict(getattr(tt["post"], "mapping", {}))


# -----------------------
# Font Table Reader
# -----------------------
def is_unicode_scalar(codepoint: int) -> bool:
    """Return ``True`` for values that are valid Unicode scalar values."""
    return 0 <= codepoint <= MAX_UNICODE and codepoint not in SURROGATES


def select_unicode_subtable(cmap):
    """Return the first Unicode subtable of a ``cmap`` table, or ``None``.

    Subtables are taken in table order, so a BMP-only format 4 subtable
    stored before a format 12 one hides supplementary-plane codepoints.
    """
    return next((sub for sub in cmap.tables if sub.isUnicode()), None)


def load_face(data: bytes, face_index: int = 0) -> FontFace:
    """Parse font bytes and select the first Unicode cmap subtable.

    Args:
        data: Raw content of a TTF/OTF/WOFF file or a font collection.
        face_index: Face to open inside a collection; ignored otherwise.

    Returns:
        A :class:`FontFace` ready for codepoint enumeration.

    Raises:
        MalformedFont: the bytes are not a font, or its tables cannot be
            decoded.
        MissingCharacterMap: the font has no Unicode cmap subtable.
    """
    try:
        tt = TTFont(
            io.BytesIO(data),
            fontNumber=face_index,
            recalcBBoxes=False,
            recalcTimestamp=False,
        )
    except Exception as e:
        raise MalformedFont(f"Cannot open font: {e}") from e

    if "cmap" not in tt:
        raise MissingCharacterMap("font has no 'cmap' table")

    try:
        # Glyph order first: fonts without names derive it from the cmap.
        glyph_order = tt.getGlyphOrder()
        subtable = select_unicode_subtable(tt["cmap"])
        if subtable is not None:
            # Force decompilation so broken subtables fail here.
            len(subtable.cmap)
    except Exception as e:
        raise MalformedFont(f"Cannot decode character map: {e}") from e

    if subtable is None:
        raise MissingCharacterMap("font 'cmap' has no Unicode subtable")

    return FontFace(tt, subtable, glyph_order)


def unicode_codepoints(face: FontFace) -> list[int]:
    """Return the face's mapped codepoints, dropping invalid scalar values.

    The list keeps the subtable's enumeration order, which drives the order
    of the generated accessors.
    """
    return [cp for cp in face.codepoints() if is_unicode_scalar(cp)]


# -----------------------
# Glyph Name Resolver
# -----------------------
def resolve_glyph(face: FontFace, codepoint: int) -> GlyphCandidate | None:
    """Look up the glyph and its native name for ``codepoint``.

    Codepoints without a glyph are skipped (``None``). Glyphs without a
    name resolve to :data:`UNNAMED`.
    """
    glyph_id = face.glyph_index(codepoint)
    if glyph_id is None:
        return None
    raw_name = face.glyph_name(glyph_id) or UNNAMED
    return GlyphCandidate(codepoint, raw_name)
