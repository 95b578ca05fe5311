import importlib

from helpers import FakeFace

from glyphgen.emit_python import (
    char_literal,
    docstring,
    python_identifiers,
    render_demo,
    render_module,
    render_raw_function,
    render_widget_function,
    write_module,
)
from glyphgen.generate_icons import generate_icon_module
from glyphgen.model import AccessorEntry, FontReference
from glyphgen.runtime import DEFAULT_FONT, Shaping, Text

FONT_REF = "glyphgen.runtime.DEFAULT_FONT"


def make_module(monkeypatch, glyphs, name="icons", **kwargs):
    monkeypatch.setattr(
        "glyphgen.generate_icons.load_face",
        lambda data, face_index=0: FakeFace(glyphs),
    )
    return generate_icon_module(b"font", name, FONT_REF, **kwargs)


def import_generated(monkeypatch, tmp_path, module):
    write_module(render_module(module), tmp_path)
    monkeypatch.syspath_prepend(str(tmp_path))
    importlib.invalidate_caches()
    return importlib.import_module(module.module_name)


def heart_entry(shaping=Shaping.BASIC):
    return AccessorEntry(
        name="heart",
        codepoint=0xF417,
        raw_name="heart",
        font_reference=FontReference.parse("myapp.fonts.BOOTSTRAP_FONT"),
        shaping=shaping,
    )


# ------------------------------------------------------------
# Identifiers
# ------------------------------------------------------------


def test_python_identifiers_free_names_unchanged():
    assert python_identifiers(["heart", "star"]) == {"heart": "heart", "star": "star"}


def test_python_identifiers_escape_keywords():
    idents = python_identifiers(["class", "None", "import", "match"])

    assert idents == {
        "class": "class_",
        "None": "None_",
        "import": "import_",
        "match": "match",
    }


def test_python_identifiers_escape_avoids_existing_names():
    idents = python_identifiers(["class", "class_"])

    assert idents == {"class": "class__", "class_": "class_"}


def test_python_identifiers_escape_generated_and_reserved_names():
    idents = python_identifiers(["COUNT", "ICONS", "Text", "FONT"], reserved={"FONT"})

    assert idents == {
        "COUNT": "COUNT_",
        "ICONS": "ICONS_",
        "Text": "Text_",
        "FONT": "FONT_",
    }


def test_python_identifiers_escape_dunder_names():
    idents = python_identifiers(["__getattr__", "__private"])

    assert idents == {"__getattr__": "__getattr___", "__private": "__private"}


# ------------------------------------------------------------
# Fragments
# ------------------------------------------------------------


def test_char_literal_escapes():
    assert char_literal(0x41) == '"\\u0041"'
    assert char_literal(0xF417) == '"\\uf417"'
    assert char_literal(0xF0001) == '"\\U000f0001"'


def test_docstring_escapes_quotes_and_backslashes():
    assert docstring('say "hi" \\o/') == '"""say \\"hi\\" \\\\o/"""'


def test_render_widget_function():
    text = render_widget_function(heart_entry(), "heart")

    assert text == (
        "def heart() -> Text:\n"
        '    """Returns a :class:`~glyphgen.runtime.Text` widget of the heart icon (U+F417)."""\n'
        '    return Text("\\uf417", font=BOOTSTRAP_FONT, shaping=Shaping.BASIC)\n'
    )


def test_render_widget_function_with_doc_link():
    text = render_widget_function(
        heart_entry(), "heart", "https://icons.getbootstrap.com/icons/"
    )

    assert "`heart <https://icons.getbootstrap.com/icons/heart>`_" in text


def test_render_raw_function():
    text = render_raw_function(heart_entry(Shaping.ADVANCED), "heart")

    assert text == (
        "def heart() -> tuple[str, Font, Shaping]:\n"
        '    """Returns the content string of the heart character for lower level APIs."""\n'
        '    return ("\\uf417", BOOTSTRAP_FONT, Shaping.ADVANCED)\n'
    )


# ------------------------------------------------------------
# Modules
# ------------------------------------------------------------


def test_render_module_single_file(monkeypatch):
    module = make_module(monkeypatch, [(0xE000, "heart")])

    files = render_module(module)

    assert list(files) == ["icons.py"]
    text = files["icons.py"]
    assert "COUNT = 1\n" in text
    assert "from glyphgen.runtime import DEFAULT_FONT\n" in text
    assert "advanced_text" not in text
    assert text.isascii()


def test_render_module_package_with_advanced_surface(monkeypatch):
    module = make_module(monkeypatch, [(0xE000, "heart")], advanced_text=True)

    files = render_module(module)

    assert list(files) == ["icons/__init__.py", "icons/advanced_text.py"]
    assert "from . import advanced_text\n" in files["icons/__init__.py"]
    assert "def heart() -> tuple[str, Font, Shaping]:" in files["icons/advanced_text.py"]


def test_generated_module_runs(monkeypatch, tmp_path):
    module = make_module(
        monkeypatch,
        [(0xE000, "heart"), (0xE001, "class"), (0xF0001, "smile")],
        name="gen_basic_icons",
    )

    icons = import_generated(monkeypatch, tmp_path, module)

    assert icons.COUNT == 3
    assert icons.heart() == Text("\ue000", DEFAULT_FONT, Shaping.BASIC)
    assert icons.heart() == icons.heart()
    assert icons.class_().content == "\ue001"
    assert icons.smile().content == "\U000f0001"
    assert list(icons.ICONS) == ["heart", "class", "smile"]
    assert icons.ICONS["class"] is icons.class_
    assert len(icons.ICONS) == icons.COUNT


def test_generated_advanced_surface_runs(monkeypatch, tmp_path):
    module = make_module(
        monkeypatch,
        [(0xE000, "heart"), (0xE001, "arrow-up")],
        name="gen_advanced_icons",
        shaping="advanced",
        advanced_text=True,
    )

    icons = import_generated(monkeypatch, tmp_path, module)

    assert icons.arrow_up().shaping is Shaping.ADVANCED
    assert icons.advanced_text.heart() == ("\ue000", DEFAULT_FONT, Shaping.ADVANCED)
    assert icons.advanced_text.arrow_up() == icons.advanced_text.arrow_up()


def test_generated_empty_module_runs(monkeypatch, tmp_path):
    module = make_module(monkeypatch, [(0xE000, ".null")], name="gen_empty_icons")

    icons = import_generated(monkeypatch, tmp_path, module)

    assert icons.COUNT == 0
    assert icons.ICONS == {}


def test_render_demo_groups_rows(monkeypatch):
    glyphs = [(0xE000 + i, f"icon{chr(ord('a') + i)}") for i in range(5)]
    module = make_module(monkeypatch, glyphs)

    demo = render_demo(module, columns=2, max_rows=2)

    assert demo == (
        "rows = [\n"
        "    [icons.icona(), icons.iconb()],\n"
        "    [icons.iconc(), icons.icond()],\n"
        "]"
    )


def test_render_demo_default_rows_hold_twenty_eight_calls(monkeypatch):
    glyphs = [
        (0xE000 + i, f"icon{chr(ord('a') + i // 26)}{chr(ord('a') + i % 26)}")
        for i in range(30)
    ]
    module = make_module(monkeypatch, glyphs)

    rows = render_demo(module).splitlines()[1:-1]

    assert len(rows) == 2
    assert rows[0].count("icons.") == 28
    assert rows[1].count("icons.") == 2
