"""
glyphgen – emit_python.py
=========================

Python code surface for generated icon modules.

This module turns an :class:`~glyphgen.model.OutputModule` into Python
source text. It never inspects font binaries: every decision is based on
the entries handed in by the pipeline.

Key constraints:
- Output must be byte-stable: same module in, same text out.
- Generated files are ASCII-only apart from glyph names and documentation
  links; glyph characters are written as escape sequences.
- Each entry is rendered twice, as a widget accessor and as a raw-content
  accessor, through two independent formatting functions.

Layout of the rendered files::

    <module>.py                      (no advanced surface)

    <module>/__init__.py             (widget surface + ``COUNT`` + ``ICONS``)
    <module>/advanced_text.py        (raw surface)
"""

from __future__ import annotations

import keyword
import re
import unicodedata
from collections.abc import Iterable
from pathlib import Path

from glyphgen.model import AccessorEntry, OutputModule

ADVANCED_MODULE = "advanced_text"

#: Names bound at module level by the generated code itself.
GENERATED_NAMES = frozenset(
    {
        "COUNT",
        "ICONS",
        "Callable",
        "Font",
        "Shaping",
        "Text",
        ADVANCED_MODULE,
        "annotations",
    }
)

_DUNDER_RE = re.compile(r"__[^_](?:.*[^_])?__")

GENERATED_NOTICE = "Generated by glyphgen from the font's character map. Do not edit."


# ============================================================
# Identifiers
# ============================================================


def _normalized(name: str) -> str:
    # Python compares identifiers after NFKC normalization.
    return unicodedata.normalize("NFKC", name)


def is_reserved(name: str, reserved: Iterable[str] = ()) -> bool:
    """Check whether ``name`` cannot be bound as-is by a generated module."""
    norm = _normalized(name)
    return (
        keyword.iskeyword(norm)
        or norm in GENERATED_NAMES
        or norm in reserved
        or _DUNDER_RE.fullmatch(norm) is not None
    )


def python_identifiers(
    names: Iterable[str], reserved: Iterable[str] = ()
) -> dict[str, str]:
    """Map canonical glyph names to identifiers a module can bind.

    Names that are free keep themselves. Reserved names get ``_`` appended
    until the result neither is reserved nor clashes with another name.

    Example::

        >>> python_identifiers(["heart", "class", "class_"])
        {'heart': 'heart', 'class': 'class__', 'class_': 'class_'}

    Returns:
        A mapping in the order of ``names``.
    """
    names = list(names)
    reserved = frozenset(reserved)
    taken: set[str] = set()
    out: dict[str, str] = {}

    for name in names:
        norm = _normalized(name)
        if not is_reserved(name, reserved) and norm not in taken:
            out[name] = name
            taken.add(norm)

    for name in names:
        if name in out:
            continue
        ident = name + "_"
        while is_reserved(ident, reserved) or _normalized(ident) in taken:
            ident += "_"
        out[name] = ident
        taken.add(_normalized(ident))

    return {name: out[name] for name in names}


def module_identifiers(module: OutputModule) -> dict[str, str]:
    """Identifiers of every entry of ``module``, shared by both surfaces."""
    return python_identifiers(module.names(), {module.font_reference.symbol})


# ============================================================
# Literals
# ============================================================


def char_literal(codepoint: int) -> str:
    """Return a double-quoted, escaped string literal for one character."""
    if codepoint <= 0xFFFF:
        return f'"\\u{codepoint:04x}"'
    return f'"\\U{codepoint:08x}"'


def docstring(text: str, indent: str = "") -> str:
    """Return ``text`` as a triple-quoted docstring literal."""
    body = text.rstrip("\n").replace("\\", "\\\\").replace('"', '\\"')
    if "\n" in body:
        body = body.replace("\n", "\n" + indent) + "\n" + indent
        body = re.sub(r"\n[ \t]+\n", "\n\n", body)
    return f'"""{body}"""'


def codepoint_label(codepoint: int) -> str:
    return f"U+{codepoint:04X}"


# ============================================================
# Accessor fragments
# ============================================================


def widget_doc(entry: AccessorEntry, doc_link: str | None = None) -> str:
    if doc_link:
        target = f"`{entry.name} <{doc_link.rstrip('/')}/{entry.raw_name}>`_"
    else:
        target = entry.name
    return (
        f"Returns a :class:`~glyphgen.runtime.Text` widget of the {target} "
        f"icon ({codepoint_label(entry.codepoint)})."
    )


def raw_doc(entry: AccessorEntry) -> str:
    return (
        f"Returns the content string of the {entry.name} character "
        "for lower level APIs."
    )


def render_widget_function(
    entry: AccessorEntry, identifier: str, doc_link: str | None = None
) -> str:
    """Render the zero-argument accessor returning a ``Text`` widget."""
    return (
        f"def {identifier}() -> Text:\n"
        f"    {docstring(widget_doc(entry, doc_link))}\n"
        f"    return Text({char_literal(entry.codepoint)}, "
        f"font={entry.font_reference.symbol}, "
        f"shaping=Shaping.{entry.shaping.name})\n"
    )


def render_raw_function(entry: AccessorEntry, identifier: str) -> str:
    """Render the zero-argument accessor returning ``(content, font, shaping)``."""
    return (
        f"def {identifier}() -> tuple[str, Font, Shaping]:\n"
        f"    {docstring(raw_doc(entry))}\n"
        f"    return ({char_literal(entry.codepoint)}, "
        f"{entry.font_reference.symbol}, Shaping.{entry.shaping.name})\n"
    )


# ============================================================
# Module surfaces
# ============================================================


def _font_import(module: OutputModule) -> str:
    ref = module.font_reference
    return f"from {ref.module} import {ref.symbol}"


def _icons_mapping(module: OutputModule, idents: dict[str, str]) -> str:
    if not module.entries:
        return "ICONS: dict[str, Callable[[], Text]] = {}\n"
    lines = ["ICONS: dict[str, Callable[[], Text]] = {"]
    for entry in module.entries:
        lines.append(f'    "{entry.name}": {idents[entry.name]},')
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_widget_module(module: OutputModule) -> str:
    """Render the widget surface: ``COUNT``, accessors and ``ICONS``."""
    idents = module_identifiers(module)
    doc = (
        f"A module with a function for every icon in {module.module_name}'s font.\n"
        f"\n{GENERATED_NOTICE}\n"
    )
    parts = [
        docstring(doc) + "\n",
        "from __future__ import annotations\n",
        "from collections.abc import Callable\n",
        "from glyphgen.runtime import Shaping, Text\n" + _font_import(module) + "\n",
    ]
    if module.advanced_text:
        parts.append(f"from . import {ADVANCED_MODULE}\n")
    parts.append(
        "#: The amount of icons in the font.\n" f"COUNT = {module.count}\n"
    )
    text = "\n".join(parts)

    for entry in module.entries:
        text += "\n\n" + render_widget_function(
            entry, idents[entry.name], module.doc_link
        )

    text += (
        "\n\n#: Every accessor keyed by its glyph's canonical name.\n"
        + _icons_mapping(module, idents)
    )
    return text


def render_advanced_module(module: OutputModule) -> str:
    """Render the raw surface: one ``(content, font, shaping)`` accessor per icon."""
    idents = module_identifiers(module)
    doc = (
        "Every icon with helpers to use these icons in widgets.\n"
        "\n"
        "Usage::\n"
        "\n"
        f"    content, font, shaping = {ADVANCED_MODULE}.my_icon()\n"
        f"\n{GENERATED_NOTICE}\n"
    )
    parts = [
        docstring(doc) + "\n",
        "from __future__ import annotations\n",
        "from glyphgen.runtime import Font, Shaping\n" + _font_import(module) + "\n",
    ]
    text = "\n".join(parts)
    for entry in module.entries:
        text += "\n\n" + render_raw_function(entry, idents[entry.name])
    return text


def render_module(module: OutputModule) -> dict[str, str]:
    """Render ``module`` into ``{relative_path: source_text}``.

    Without the advanced surface the result is a single ``<name>.py``;
    with it, a package holding ``__init__.py`` and ``advanced_text.py``.
    """
    name = module.module_name
    if not module.advanced_text:
        return {f"{name}.py": render_widget_module(module)}
    return {
        f"{name}/__init__.py": render_widget_module(module),
        f"{name}/{ADVANCED_MODULE}.py": render_advanced_module(module),
    }


def write_module(files: dict[str, str], output_dir: Path) -> list[Path]:
    """Write rendered files below ``output_dir`` and return their paths."""
    written: list[Path] = []
    for rel, text in files.items():
        path = output_dir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        written.append(path)
    return written


# ============================================================
# Demo snippet
# ============================================================


def render_demo(module: OutputModule, columns: int = 28, max_rows: int = 18) -> str:
    """Return a snippet listing accessor calls in rows, for demo applications.

    At most ``columns * max_rows`` icons are listed.
    """
    idents = module_identifiers(module)
    calls = [
        f"{module.module_name}.{idents[entry.name]}()"
        for entry in module.entries[: columns * max_rows]
    ]
    lines = ["rows = ["]
    for start in range(0, len(calls), columns):
        lines.append("    [" + ", ".join(calls[start : start + columns]) + "],")
    lines.append("]")
    return "\n".join(lines)
