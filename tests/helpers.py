from io import BytesIO

from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen


def build_test_font(
    cmap: dict[int, str] | None = None,
    *,
    extra_glyphs: tuple[str, ...] = (),
    keep_glyph_names: bool = True,
    unicode_cmap: bool = True,
) -> bytes:
    """
    Factory helper building a minimal TrueType font in memory.

    Every glyph is empty. ``cmap=None`` omits the cmap table entirely;
    ``unicode_cmap=False`` keeps the table but strips its Unicode subtables.
    ``keep_glyph_names=False`` writes a format 3 post table (no names).
    """
    glyph_order = [".notdef"]
    for name in [*(cmap or {}).values(), *extra_glyphs]:
        if name not in glyph_order:
            glyph_order.append(name)

    fb = FontBuilder(unitsPerEm=1000, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    if cmap is not None:
        fb.setupCharacterMap(cmap)
        if not unicode_cmap:
            table = fb.font["cmap"]
            table.tables = [sub for sub in table.tables if not sub.isUnicode()]
    fb.setupGlyf({name: TTGlyphPen(None).glyph() for name in glyph_order})
    fb.setupHorizontalMetrics({name: (500, 0) for name in glyph_order})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Glyphgen Test", "styleName": "Regular"})
    fb.setupPost(keepGlyphNames=keep_glyph_names)

    buf = BytesIO()
    fb.save(buf)
    return buf.getvalue()


class FakeFace:
    """
    Stand-in for ``FontFace`` with full control over glyph names.

    ``glyphs`` is a list of ``(codepoint, name)`` in enumeration order; a
    ``None`` name models a glyph without a native name. Codepoints in
    ``missing`` are enumerated but mapped to no glyph.
    """

    def __init__(
        self,
        glyphs: list[tuple[int, str | None]],
        missing: tuple[int, ...] = (),
    ):
        self._order = [cp for cp, _ in glyphs] + list(missing)
        self._index = {cp: gid for gid, (cp, _) in enumerate(glyphs, start=1)}
        self._names = {gid: name for gid, (_, name) in enumerate(glyphs, start=1)}

    def codepoints(self) -> list[int]:
        return list(self._order)

    def glyph_index(self, codepoint: int) -> int | None:
        return self._index.get(codepoint)

    def glyph_name(self, glyph_id: int) -> str | None:
        return self._names.get(glyph_id)
