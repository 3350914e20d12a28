from __future__ import annotations

from pathlib import Path

import pytest

import htmlwasher.washer as washer_module
from htmlwasher import Policy, PresetError, get_preset, presets, wash
from htmlwasher.postprocess import IMAGE_ALT_WARNING
from htmlwasher.preset import Presets
from htmlwasher.washer import ALWAYS_BLOCKED, build_engine_options, filter_event_handlers
from tests.conftest import data_path, read_text


def golden_cases() -> list[tuple[Path, Path, str]]:
    """
    :return: List of (input_path, expected_path, preset_name) triples
    """
    root = data_path()
    return [
        (root / "article.html", root / "article.standard.html", "standard"),
        (root / "snippets.html", root / "snippets.permissive.html", "permissive"),
    ]


@pytest.mark.parametrize(("html_path", "expected_path", "preset_name"), golden_cases())
def test_wash_matches_golden(html_path: Path, expected_path: Path, preset_name: str) -> None:
    result = wash(read_text(html_path), setup=get_preset(preset_name))
    assert result.html.strip() == read_text(expected_path).strip()


def test_golden_article_warns_about_alt() -> None:
    result = wash(read_text(data_path() / "article.html"))
    assert result.warnings == [IMAGE_ALT_WARNING]


def test_default_preset_strips_script() -> None:
    result = wash("<p>Hello</p><script>alert(1)</script>")
    assert result.html == "<p>Hello</p>"
    assert result.warnings == []


def test_script_removed_inside_unwrapped_tag() -> None:
    result = wash("<div><script>alert(1)</script><p>Hello</p></div>")
    assert "script" not in result.html
    assert "Hello" in result.html


@pytest.mark.parametrize(
    "html",
    [
        '<iframe src="evil.com"></iframe><p>Text</p>',
        "<style>body { color: red }</style><p>Text</p>",
        '<object data="x"><embed src="y"></object><p>Text</p>',
    ],
)
def test_blocked_tags_removed_by_default(html: str) -> None:
    result = wash(html)
    assert result.html == "<p>Text</p>"


def test_nested_dangerous_content() -> None:
    result = wash("<div><script><script>alert(1)</script></script></div>")
    assert "script" not in result.html


def test_allowed_tags_preserved() -> None:
    result = wash("<p>Hello <strong>World</strong></p>")
    assert result.html == "<p>Hello <strong>World</strong></p>"


def test_custom_setup_unwraps_disallowed() -> None:
    result = wash("<p>Hello</p><div>World</div>", setup="allowedTags:\n  - p\n")
    assert result.html == "<p>Hello</p>World"
    assert result.warnings == []


def test_blocked_tags_cannot_be_allowed() -> None:
    setup = "allowedTags: [p, " + ", ".join(sorted(ALWAYS_BLOCKED)) + "]\n"
    html = "<p>a</p><script>x()</script><object><p>b</p></object><applet>c</applet><frameset><frame></frameset>"
    result = wash(html, setup=setup)
    assert result.html == "<p>a</p>"


def test_event_handlers_stripped_even_if_allowed() -> None:
    setup = "allowedTags: [div]\nallowedAttributes:\n  div: [onclick, ONMOUSEOVER, title]\n  '*': [onload]\n"
    result = wash('<div onclick="alert(1)" onmouseover="x()" onload="y()" title="t">Test</div>', setup=setup)
    assert result.html == '<div title="t">Test</div>'


def test_javascript_urls_removed() -> None:
    setup = "allowedTags: [a]\nallowedAttributes:\n  a: [href]\n"
    result = wash('<a href="javascript:alert(1)">Click</a>', setup=setup)
    assert "javascript:" not in result.html
    assert result.html == "<a>Click</a>"


def test_protocol_relative_urls_follow_policy() -> None:
    html = '<a href="//cdn.example/x">x</a>'
    assert wash(html).html == "<a>x</a>"
    setup = "allowedTags: [a]\nallowedAttributes: {a: [href]}\nallowProtocolRelative: true\n"
    assert wash(html, setup=setup).html == html


def test_image_without_alt_gets_empty_alt() -> None:
    setup = "allowedTags:\n  - img\nallowedAttributes:\n  img:\n    - src\n"
    result = wash('<img src="test.jpg">', setup=setup)
    assert result.html == '<img src="test.jpg" alt="" />'
    assert IMAGE_ALT_WARNING in result.warnings


def test_image_with_alt_preserved() -> None:
    setup = "allowedTags:\n  - img\nallowedAttributes:\n  img:\n    - src\n    - alt\n"
    result = wash('<img src="test.jpg" alt="Test">', setup=setup)
    assert 'alt="Test"' in result.html
    assert result.warnings == []


def test_single_alt_warning_for_many_images() -> None:
    result = wash('<p><img src="a.png"><img src="b.png"><img src="c.png" alt="c"></p>')
    assert result.html.count('alt=""') == 2
    assert result.warnings == [IMAGE_ALT_WARNING]


def test_title_added_when_missing() -> None:
    result = wash("<p>Content</p>", title="My Page")
    assert result.html == "<title>My Page</title><p>Content</p>"


def test_title_is_escaped() -> None:
    result = wash("<p>Content</p>", title="<script>")
    assert "&lt;script&gt;" in result.html
    assert "<script>" not in result.html


def test_title_goes_into_head_when_present() -> None:
    result = wash("<head></head><p>x</p>", setup="allowedTags: [head, p]\n", title="T")
    assert result.html == "<head><title>T</title></head><p>x</p>"


def test_invalid_setup_falls_back_to_standard() -> None:
    result = wash("<p>Hello</p>", setup="invalid: [yaml")
    assert result.html == "<p>Hello</p>"
    assert len(result.warnings) == 1
    assert result.warnings[0].startswith("Setup error: ")


@pytest.mark.parametrize("bad_setup", ["invalid: [yaml", "unknownProperty: true", "allowedTags: nope"])
def test_fallback_matches_standard_preset(bad_setup: str) -> None:
    html = '<h2>t</h2><div class="x"><img src="a.png"><u>u</u><span>s</span></div>'
    fallback = wash(html, setup=bad_setup)
    standard = wash(html, setup=presets.standard)
    assert fallback.html == standard.html
    assert fallback.warnings[0].startswith("Setup error: ")
    assert fallback.warnings[1:] == standard.warnings


def test_empty_setup_uses_engine_defaults() -> None:
    result = wash('<div>x</div><img src="a.png">', setup="")
    assert result.html == "<div>x</div>"
    assert result.warnings == []


def test_bytes_input() -> None:
    assert wash(b"<p>caf\xc3\xa9</p>").html == "<p>café</p>"


def test_same_policy_twice_is_stable() -> None:
    first = wash('<p onclick="x">Hi <img src="a.png"><em>there</em></p><div>d</div>')
    second = wash(first.html)
    assert second.html == first.html
    assert second.warnings == []


def test_broken_standard_preset_is_a_hard_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(washer_module, "presets", Presets(minimal="", standard="allowedTags: [", permissive=""))
    with pytest.raises(PresetError):
        wash("<p>x</p>", setup="nope: 1")


def test_filter_event_handlers() -> None:
    assert filter_event_handlers({"a": ["href", "onClick", "one"], "img": ["onerror"]}) == {
        "a": ["href"],
        "img": [],
    }


def test_build_engine_options_copies_only_present_fields() -> None:
    options = build_engine_options(Policy())
    assert list(options) == ["exclusive_filter"]
    assert options["exclusive_filter"]("SCRIPT")
    assert not options["exclusive_filter"]("p")

    options = build_engine_options(
        Policy(
            allowed_tags=("p",),
            allowed_attributes={"p": ("title", "onclick")},
            disallowed_tags_mode="escape",
            allow_protocol_relative=False,
        )
    )
    assert options["allowed_tags"] == ["p"]
    assert options["allowed_attributes"] == {"p": ["title"]}
    assert options["disallowed_tags_mode"] == "escape"
    assert options["allow_protocol_relative"] is False
    assert "allowed_classes" not in options
    assert "self_closing" not in options


def test_deeply_nested_markup_does_not_abort() -> None:
    result = wash("<div>" * 5000 + "<p>x</p>")
    assert result.html == "<p>x</p>"
    assert result.warnings == []
