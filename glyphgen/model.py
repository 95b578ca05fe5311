"""
glyphgen – model.py
===================

Records passed between the pipeline stages and the code emitter.

Data structure::

    OutputModule
    ├── module_name, font_reference, shaping, doc_link, advanced_text
    ├── entries: tuple[AccessorEntry, ...]   (font enumeration order)
    └── dropped: tuple[DroppedGlyph, ...]    (diagnostics only)

All records are immutable; an ``OutputModule`` is built once per generation
pass and then only rendered.
"""

from __future__ import annotations

import keyword
from dataclasses import dataclass

from glyphgen.errors import ConfigError, ShapingModeError
from glyphgen.runtime import Shaping

#: Reasons recorded in :class:`DroppedGlyph`.
DROP_DUPLICATE = "duplicate"
DROP_ILLEGAL = "illegal_character"


def parse_shaping(mode: str | Shaping) -> Shaping:
    """Return the :class:`Shaping` named by ``mode`` (``basic``/``advanced``).

    Raises:
        ShapingModeError: for any other value.
    """
    if isinstance(mode, Shaping):
        return mode
    try:
        return Shaping(str(mode).strip().lower())
    except ValueError:
        raise ShapingModeError(
            f"Shaping either needs to be basic or advanced, got {mode!r}. "
            "If you are unsure use advanced."
        ) from None


def validate_module_name(name: str) -> str:
    """Return ``name`` if it can be used as a Python module name."""
    if not name.isidentifier() or keyword.iskeyword(name):
        raise ConfigError(f"Invalid module name: {name!r}")
    return name


@dataclass(frozen=True)
class FontReference:
    """Dotted import path of the ``Font`` value generated code binds to.

    Example: ``myapp.fonts.BOOTSTRAP_FONT`` → module ``myapp.fonts``,
    symbol ``BOOTSTRAP_FONT``.
    """

    module: str
    symbol: str

    @classmethod
    def parse(cls, path: str) -> FontReference:
        module, _, symbol = path.rpartition(".")
        parts = path.split(".")
        if not module or not all(
            p.isidentifier() and not keyword.iskeyword(p) for p in parts
        ):
            raise ConfigError(
                f"Invalid font reference {path!r}: expected 'package.module.SYMBOL'"
            )
        return cls(module, symbol)

    def __str__(self) -> str:
        return f"{self.module}.{self.symbol}"


@dataclass(frozen=True)
class AccessorEntry:
    """One surviving glyph, rendered once per output surface."""

    name: str
    codepoint: int
    raw_name: str
    font_reference: FontReference
    shaping: Shaping


@dataclass(frozen=True)
class DroppedGlyph:
    """A glyph that produced no accessor, with the reason."""

    codepoint: int
    raw_name: str
    name: str
    reason: str


@dataclass(frozen=True)
class OutputModule:
    """Everything needed to render one generated icon module."""

    module_name: str
    font_reference: FontReference
    shaping: Shaping
    entries: tuple[AccessorEntry, ...]
    doc_link: str | None = None
    advanced_text: bool = False
    dropped: tuple[DroppedGlyph, ...] = ()

    @property
    def count(self) -> int:
        """The amount of icons in the module."""
        return len(self.entries)

    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]
