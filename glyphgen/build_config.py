"""
glyphgen – build_config.py
==========================

JSON build description listing the generation passes of one build.

Structure::

    {
      "output_dir": "src/myapp/icons",            # optional, default "."
      "fonts": [
        {
          "font": "fonts/bootstrap.ttf",          # required
          "module": "bootstrap",                  # required
          "font_reference": "myapp.fonts.BOOTSTRAP_FONT",  # required
          "doc_link": "https://icons.getbootstrap.com/icons",
          "shaping": "basic",                     # basic | advanced
          "advanced_text": true,
          "face_index": 0
        }
      ]
    }

Relative paths are resolved against the directory of the configuration
file, so a build behaves the same from any working directory.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from glyphgen.errors import ConfigError
from glyphgen.model import FontReference, parse_shaping, validate_module_name

REQUIRED_KEYS = ("font", "module", "font_reference")
OPTIONAL_KEYS = ("doc_link", "shaping", "advanced_text", "face_index")


@dataclass(frozen=True)
class FontConfig:
    """Arguments of one generation pass."""

    font: Path
    module: str
    font_reference: str
    doc_link: str | None = None
    shaping: str = "basic"
    advanced_text: bool = False
    face_index: int = 0


@dataclass(frozen=True)
class BuildConfig:
    output_dir: Path
    fonts: tuple[FontConfig, ...]


def parse_font_entry(entry: Any, index: int, base_dir: Path) -> FontConfig:
    """Validate one item of ``fonts`` and return its :class:`FontConfig`."""
    if not isinstance(entry, dict):
        raise ConfigError(f"Font entry #{index} is not an object")

    missing = [key for key in REQUIRED_KEYS if not entry.get(key)]
    if missing:
        raise ConfigError(f"Font entry #{index} is missing: {', '.join(missing)}")

    unknown = sorted(set(entry) - set(REQUIRED_KEYS) - set(OPTIONAL_KEYS))
    if unknown:
        raise ConfigError(f"Font entry #{index} has unknown keys: {', '.join(unknown)}")

    for key in ("font", "module", "font_reference"):
        if not isinstance(entry[key], str):
            raise ConfigError(f"Font entry #{index}: '{key}' must be a string")

    doc_link = entry.get("doc_link")
    if doc_link is not None and not isinstance(doc_link, str):
        raise ConfigError(f"Font entry #{index}: 'doc_link' must be a string")

    advanced_text = entry.get("advanced_text", False)
    if not isinstance(advanced_text, bool):
        raise ConfigError(f"Font entry #{index}: 'advanced_text' must be true or false")

    face_index = entry.get("face_index", 0)
    if isinstance(face_index, bool) or not isinstance(face_index, int) or face_index < 0:
        raise ConfigError(
            f"Font entry #{index}: 'face_index' must be a non-negative integer"
        )

    shaping = str(entry.get("shaping", "basic"))
    parse_shaping(shaping)
    validate_module_name(entry["module"])
    FontReference.parse(entry["font_reference"])

    return FontConfig(
        font=base_dir / entry["font"],
        module=entry["module"],
        font_reference=entry["font_reference"],
        doc_link=doc_link,
        shaping=shaping,
        advanced_text=advanced_text,
        face_index=face_index,
    )


def parse_build_config(data: Any, base_dir: Path) -> BuildConfig:
    """Validate a decoded configuration document.

    Raises:
        ConfigError: on any structural problem.
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration root is not a JSON object")

    fonts = data.get("fonts")
    if not isinstance(fonts, list):
        raise ConfigError("'fonts' field missing or not a list")

    output_dir = data.get("output_dir", ".")
    if not isinstance(output_dir, str):
        raise ConfigError("'output_dir' must be a string")

    entries = tuple(
        parse_font_entry(entry, idx, base_dir) for idx, entry in enumerate(fonts)
    )

    seen: set[str] = set()
    for entry in entries:
        if entry.module in seen:
            raise ConfigError(f"Module '{entry.module}' is configured twice")
        seen.add(entry.module)

    return BuildConfig(output_dir=base_dir / output_dir, fonts=entries)


def load_build_config(path: Path) -> BuildConfig:
    """Read and validate the JSON configuration at ``path``."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read configuration {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    return parse_build_config(data, path.parent)
