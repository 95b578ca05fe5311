"""
glyphgen – runtime.py
=====================

Value types imported by generated icon modules.

Generated widget accessors return :class:`Text`; generated raw accessors
return ``(content, Font, Shaping)`` tuples. The types are plain immutable
values so that a GUI layer can translate them into its own widgets.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Shaping(Enum):
    """Text shaping fidelity attached to every accessor of one module."""

    BASIC = "basic"
    ADVANCED = "advanced"


@dataclass(frozen=True)
class Font:
    """Reference to a font family by name (``None`` means the default font)."""

    name: str | None = None


#: The default font, usable as a font reference in tests and demos.
DEFAULT_FONT = Font()


@dataclass(frozen=True)
class Text:
    """A text widget description holding one glyph."""

    content: str
    font: Font = DEFAULT_FONT
    shaping: Shaping = Shaping.BASIC
