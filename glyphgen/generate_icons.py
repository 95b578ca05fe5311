#!/usr/bin/env python3
"""
glyphgen – generate_icons.py
============================

Generate Python icon modules from an icon font's character map.

For every usable glyph of the font, the generated module gets a function
named after the glyph (``heart_fill()``) returning a
:class:`~glyphgen.runtime.Text` widget, and optionally an ``advanced_text``
sub-module whose functions return ``(content, font, shaping)`` tuples.

Pipeline (one pass per font)
----------------------------
1. Read the first Unicode cmap subtable (``font_tables.load_face``).
2. Resolve each codepoint to a glyph and its native name.
3. Sanitize the name into an identifier (``identifiers.sanitize_glyph_name``).
4. Keep the first glyph claiming each identifier (``NameRegistry``).
5. Assemble the ``OutputModule`` and render it (``emit_python``).

Design principles
-----------------
- **Deterministic**: same font bytes and options → byte-identical output.
- **All or nothing**: a fatal error aborts the pass; no partial module.
- **Lossy by policy**: glyphs with illegal or duplicate names are dropped
  silently. The drops are kept in ``OutputModule.dropped`` and reported
  with ``--verbose``.

Usage
-----
    glyphgen fonts/bootstrap.ttf bootstrap myapp.fonts.BOOTSTRAP_FONT \\
        --doc-link https://icons.getbootstrap.com/icons -o src/myapp/icons
    glyphgen --config glyphgen.json
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from glyphgen.build_config import FontConfig, load_build_config
from glyphgen.emit_python import (
    GENERATED_NAMES,
    codepoint_label,
    render_demo,
    render_module,
    write_module,
)
from glyphgen.errors import ConfigError, GlyphgenError
from glyphgen.font_tables import FontFace, load_face, resolve_glyph, unicode_codepoints
from glyphgen.identifiers import NameRegistry, canonicalize_glyph_name, sanitize_glyph_name
from glyphgen.model import (
    DROP_DUPLICATE,
    DROP_ILLEGAL,
    AccessorEntry,
    DroppedGlyph,
    FontReference,
    OutputModule,
    parse_shaping,
    validate_module_name,
)
from glyphgen.runtime import Shaping


# ============================================================
# Pipeline
# ============================================================


def collect_entries(
    face: FontFace, font_reference: FontReference, shaping: Shaping
) -> tuple[list[AccessorEntry], list[DroppedGlyph], NameRegistry]:
    """Run resolution, sanitization and deduplication over one face.

    Returns:
        ``(entries, dropped, registry)``; ``entries`` follows the cmap
        enumeration order.
    """
    registry = NameRegistry()
    entries: list[AccessorEntry] = []
    dropped: list[DroppedGlyph] = []

    for codepoint in unicode_codepoints(face):
        candidate = resolve_glyph(face, codepoint)
        if candidate is None:
            continue

        name = sanitize_glyph_name(candidate.raw_name)
        if name is None:
            dropped.append(
                DroppedGlyph(
                    codepoint,
                    candidate.raw_name,
                    canonicalize_glyph_name(candidate.raw_name),
                    DROP_ILLEGAL,
                )
            )
            continue

        # First come, first served; later glyphs with the same name are lost.
        if not registry.claim(name):
            dropped.append(
                DroppedGlyph(codepoint, candidate.raw_name, name, DROP_DUPLICATE)
            )
            continue

        entries.append(
            AccessorEntry(
                name=name,
                codepoint=codepoint,
                raw_name=candidate.raw_name,
                font_reference=font_reference,
                shaping=shaping,
            )
        )

    return entries, dropped, registry


def generate_icon_module(
    font_data: bytes,
    module_name: str,
    font_reference: str,
    doc_link: str | None = None,
    shaping: str | Shaping = "basic",
    advanced_text: bool = False,
    face_index: int = 0,
) -> OutputModule:
    """Run one generation pass and return the assembled module.

    Args:
        font_data: Raw font file content.
        module_name: Name of the generated module (``bootstrap``).
        font_reference: Dotted path of the ``Font`` value the accessors bind
            to (``myapp.fonts.BOOTSTRAP_FONT``).
        doc_link: Optional documentation base URL; each widget accessor
            links ``<doc_link>/<raw glyph name>``.
        shaping: ``"basic"`` or ``"advanced"``, applied to every accessor.
        advanced_text: Also emit the ``advanced_text`` raw-content surface.
        face_index: Face to use inside a font collection.

    Raises:
        ShapingModeError: ``shaping`` is not a known mode.
        ConfigError: invalid module name or font reference.
        MalformedFont: the bytes are not a valid font.
        MissingCharacterMap: the font has no Unicode cmap subtable.
    """
    mode = parse_shaping(shaping)
    validate_module_name(module_name)
    reference = FontReference.parse(font_reference)
    if reference.symbol in GENERATED_NAMES:
        raise ConfigError(
            f"Font reference symbol '{reference.symbol}' clashes with a name "
            "defined by the generated module"
        )

    face = load_face(font_data, face_index)
    entries, dropped, _registry = collect_entries(face, reference, mode)

    return OutputModule(
        module_name=module_name,
        font_reference=reference,
        shaping=mode,
        entries=tuple(entries),
        doc_link=doc_link,
        advanced_text=advanced_text,
        dropped=tuple(dropped),
    )


def run_pass(config: FontConfig) -> OutputModule:
    """Read the configured font file and generate its module."""
    font_data = config.font.read_bytes()
    return generate_icon_module(
        font_data,
        config.module,
        config.font_reference,
        doc_link=config.doc_link,
        shaping=config.shaping,
        advanced_text=config.advanced_text,
        face_index=config.face_index,
    )


# ============================================================
# Reporting
# ============================================================


def report_dropped(module: OutputModule) -> None:
    """Print the glyphs a pass dropped (verbose mode)."""
    if not module.dropped:
        return
    duplicates = sum(1 for d in module.dropped if d.reason == DROP_DUPLICATE)
    illegal = len(module.dropped) - duplicates
    print(
        f"⚠️  Warning: {module.module_name}: dropped {len(module.dropped)} glyphs "
        f"({duplicates} duplicate names, {illegal} illegal names)"
    )
    for d in module.dropped:
        print(f"   - {codepoint_label(d.codepoint)} {d.raw_name!r}: {d.reason}")


# ============================================================
# CLI
# ============================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="glyphgen",
        description="Generate Python icon modules from an icon font's character map.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("font", type=Path, nargs="?", help="Font file (TTF/OTF/WOFF)")
    parser.add_argument("module", nargs="?", help="Name of the generated module")
    parser.add_argument(
        "font_reference",
        nargs="?",
        help="Dotted path of the Font value, e.g. myapp.fonts.BOOTSTRAP_FONT",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="JSON build configuration listing several fonts",
    )
    parser.add_argument("--doc-link", help="Documentation base URL for icon pages")
    parser.add_argument(
        "--shaping",
        default="basic",
        help="Text shaping mode of the accessors (basic or advanced)",
    )
    parser.add_argument(
        "--advanced-text",
        action="store_true",
        help="Also generate the advanced_text raw-content sub-module",
    )
    parser.add_argument(
        "--face-index",
        type=int,
        default=0,
        help="Face index inside a font collection",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output directory (default: config output_dir, else current directory)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print generated sources instead of writing them",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Print a demo snippet with accessor calls for every module",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging to stdout",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Every configured pass is generated before anything is written: a single
    failing font aborts the whole build with exit status 1.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    positional = (args.font, args.module, args.font_reference)
    output_dir: Path = Path(".")

    if args.config is not None:
        if any(p is not None for p in positional):
            parser.error("positional arguments cannot be combined with --config")
        try:
            build = load_build_config(args.config)
        except ConfigError as e:
            print(f"❌ Error: {args.config}: {e}", file=sys.stderr)
            sys.exit(1)
        configs = list(build.fonts)
        output_dir = build.output_dir
    else:
        if any(p is None for p in positional):
            parser.error("FONT, MODULE and FONT_REFERENCE are required without --config")
        configs = [
            FontConfig(
                font=args.font,
                module=args.module,
                font_reference=args.font_reference,
                doc_link=args.doc_link,
                shaping=args.shaping,
                advanced_text=args.advanced_text,
                face_index=args.face_index,
            )
        ]

    if args.output is not None:
        output_dir = args.output

    # -------------------------------
    # Generation passes
    # -------------------------------
    modules: list[OutputModule] = []
    for config in configs:
        if args.verbose:
            print(f"Processing: {config.font} -> {config.module}")
        try:
            module = run_pass(config)
        except (GlyphgenError, OSError) as e:
            print(
                f"❌ Error: {config.font} ({config.module}): {type(e).__name__}: {e}",
                file=sys.stderr,
            )
            sys.exit(1)
        modules.append(module)

        if args.verbose:
            print(f"{module.module_name}: {module.count} icons")
            report_dropped(module)
        if args.demo:
            print(render_demo(module))
            print(f"We have {module.count} icons")

    # -------------------------------
    # Write output
    # -------------------------------
    for module in modules:
        files = render_module(module)
        if args.dry_run:
            for rel, text in files.items():
                print(f"# --- {rel}")
                print(text)
            continue
        for path in write_module(files, output_dir):
            print(f"OK: wrote {path}")


if __name__ == "__main__":
    main()
