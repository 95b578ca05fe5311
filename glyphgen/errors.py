"""
glyphgen – errors.py
====================

Exception taxonomy of the generator.

Fatal conditions abort the generation pass of one font; per-glyph
conditions (no glyph, no name, illegal characters, duplicates) are never
raised.
"""


class GlyphgenError(Exception):
    """Base class for every fatal generator error."""


class MalformedFont(GlyphgenError):
    """The font bytes do not parse as a font container."""


class MissingCharacterMap(GlyphgenError):
    """The font has no Unicode character-to-glyph subtable."""


class ConfigError(GlyphgenError):
    """The build description is invalid."""


class ShapingModeError(ConfigError):
    """The shaping mode is neither ``basic`` nor ``advanced``."""
