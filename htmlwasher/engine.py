"""
SPDX-License-Identifier: LicenseRef-NonCommercial-Only
© 2025 github.com/defmon3 — Non-commercial use only. Commercial use requires permission.

engine.py – allow-list HTML sanitizer built on BeautifulSoup.

The markup is parsed with the ``html.parser`` tree builder, which closes
unbalanced tags but does not add ``<html>``/``<body>`` wrappers, then
re-serialized keeping only what the options allow.
"""

from __future__ import annotations

import fnmatch
import logging
import re
from collections.abc import Callable, Collection, Mapping

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

log = logging.getLogger(__name__)

DEFAULT_ALLOWED_TAGS: tuple[str, ...] = (
    "address", "article", "aside", "footer", "header",
    "h1", "h2", "h3", "h4", "h5", "h6", "hgroup", "main", "nav", "section",
    "blockquote", "dd", "div", "dl", "dt", "figcaption", "figure", "hr", "li", "ol", "p", "pre", "ul",
    "a", "abbr", "b", "bdi", "bdo", "br", "cite", "code", "data", "dfn", "em", "i", "kbd", "mark",
    "q", "rb", "rp", "rt", "rtc", "ruby", "s", "samp", "small", "span", "strong", "sub", "sup",
    "time", "u", "var", "wbr",
    "caption", "col", "colgroup", "table", "tbody", "td", "tfoot", "th", "thead", "tr",
)
DEFAULT_ALLOWED_ATTRIBUTES: Mapping[str, tuple[str, ...]] = {
    "a": ("href", "name", "target"),
    "img": ("src", "srcset", "alt", "title", "width", "height", "loading"),
}
DEFAULT_SELF_CLOSING: tuple[str, ...] = ("img", "br", "hr", "area", "base", "basefont", "input", "link", "meta")
DEFAULT_ALLOWED_SCHEMES: tuple[str, ...] = ("http", "https", "ftp", "mailto", "tel")

MODES = ("discard", "escape", "recursiveEscape", "completelyDiscard")
URL_ATTRIBUTES = frozenset({"href", "src", "cite"})
# Text inside these is dropped when the tag itself is discarded.
NON_TEXT_TAGS = frozenset({"script", "style", "textarea", "option"})

_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9.\-+]*):")
_PROTOCOL_RELATIVE_RE = re.compile(r"^[/\\]{2}")
_URL_NOISE_RE = re.compile(r"[\x00-\x20]+")
_URL_COMMENT_RE = re.compile(r"<!--.*?-->", re.S)


def _escape_text(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr(value: str) -> str:
    return _escape_text(value).replace('"', "&quot;")


def _attr_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _start_tag(tag: Tag) -> str:
    attrs = "".join(f' {k}="{_escape_attr(_attr_value(v))}"' for k, v in tag.attrs.items())
    return f"<{tag.name}{attrs}>"


class _Markup:
    """Already serialized text queued on a walk stack, e.g. an end tag."""

    __slots__ = ("text",)

    def __init__(self, text: str) -> None:
        self.text = text


def _push_children(stack: list[tuple[object, bool]], tag: Tag, drop_text: bool = False) -> None:
    stack.extend((child, drop_text) for child in reversed(tag.contents))


class _Cleaner:
    def __init__(
        self,
        allowed_tags: Collection[str],
        allowed_attributes: Mapping[str, Collection[str]],
        allowed_classes: Mapping[str, Collection[str]],
        disallowed_tags_mode: str,
        self_closing: Collection[str],
        allow_protocol_relative: bool,
        allowed_schemes: Collection[str],
        exclusive_filter: Callable[[str], bool] | None,
    ) -> None:
        if disallowed_tags_mode not in MODES:
            raise ValueError(f"Unknown disallowed_tags_mode: {disallowed_tags_mode!r}")
        self.allowed_tags = frozenset(t.lower() for t in allowed_tags)
        self.allowed_attributes = {
            tag.lower(): frozenset(a.lower() for a in names) for tag, names in allowed_attributes.items()
        }
        self.allowed_classes = {tag.lower(): tuple(names) for tag, names in allowed_classes.items()}
        self.mode = disallowed_tags_mode
        self.self_closing = frozenset(t.lower() for t in self_closing)
        self.allow_protocol_relative = allow_protocol_relative
        self.allowed_schemes = frozenset(s.lower() for s in allowed_schemes)
        self.exclusive_filter = exclusive_filter
        self.parts: list[str] = []

    def excluded(self, tag: Tag) -> bool:
        return self.exclusive_filter is not None and bool(self.exclusive_filter(tag.name))

    def walk(self, root: Tag) -> None:
        """
        Serialize the children of ``root`` into :attr:`parts`.

        Uses an explicit stack so nesting depth is bounded by memory, not by
        the interpreter's recursion limit.
        """
        stack: list[tuple[object, bool]] = []
        _push_children(stack, root)
        while stack:
            node, drop_text = stack.pop()
            if isinstance(node, _Markup):
                self.parts.append(node.text)
            elif isinstance(node, Tag):
                self.element(node, stack)
            elif isinstance(node, PreformattedString):
                # comments, doctypes, CDATA, processing instructions
                continue
            elif isinstance(node, NavigableString) and not drop_text:
                self.parts.append(_escape_text(str(node)))

    def element(self, tag: Tag, stack: list[tuple[object, bool]]) -> None:
        if self.excluded(tag):
            return
        name = tag.name

        if name in self.allowed_tags:
            attrs = self.attributes(tag)
            if name in self.self_closing:
                self.parts.append(f"<{name}{attrs} />")
            else:
                self.parts.append(f"<{name}{attrs}>")
                stack.append((_Markup(f"</{name}>"), False))
            _push_children(stack, tag)
            return

        if self.mode == "recursiveEscape":
            self.parts.append(_escape_text(self.raw(tag)))
        elif self.mode == "escape":
            self.parts.append(_escape_text(_start_tag(tag)))
            if not tag.can_be_empty_element:
                stack.append((_Markup(_escape_text(f"</{name}>")), False))
            _push_children(stack, tag)
        elif name not in NON_TEXT_TAGS:
            _push_children(stack, tag, drop_text=self.mode == "completelyDiscard")

    def attributes(self, tag: Tag) -> str:
        name = tag.name
        allowed = self.allowed_attributes.get(name, frozenset()) | self.allowed_attributes.get("*", frozenset())
        class_rule = name in self.allowed_classes or "*" in self.allowed_classes
        class_patterns = self.allowed_classes.get(name, ()) + self.allowed_classes.get("*", ())

        out = []
        for attr, raw_value in tag.attrs.items():
            value = _attr_value(raw_value)
            if attr == "class" and class_rule:
                value = " ".join(
                    c for c in value.split() if any(fnmatch.fnmatchcase(c, p) for p in class_patterns)
                )
                if not value:
                    continue
            elif attr not in allowed:
                continue
            if attr in URL_ATTRIBUTES and self.naughty_url(value):
                continue
            out.append(f' {attr}="{_escape_attr(value)}"')
        return "".join(out)

    def naughty_url(self, value: str) -> bool:
        href = _URL_COMMENT_RE.sub("", _URL_NOISE_RE.sub("", value))
        if _PROTOCOL_RELATIVE_RE.match(href):
            return not self.allow_protocol_relative
        match = _SCHEME_RE.match(href)
        if not match:
            return False
        return match.group(1).lower() not in self.allowed_schemes

    def raw(self, node) -> str:
        """Markup for ``node`` as it appeared in the input, minus excluded elements."""
        out: list[str] = []
        stack: list[object] = [node]
        while stack:
            item = stack.pop()
            if isinstance(item, _Markup):
                out.append(item.text)
            elif isinstance(item, Tag):
                if self.excluded(item):
                    continue
                out.append(_start_tag(item))
                if item.can_be_empty_element and not item.contents:
                    continue
                stack.append(_Markup(f"</{item.name}>"))
                stack.extend(reversed(item.contents))
            elif not isinstance(item, PreformattedString):
                out.append(_escape_text(str(item)))
        return "".join(out)


def clean(
    html: str,
    *,
    allowed_tags: Collection[str] = DEFAULT_ALLOWED_TAGS,
    allowed_attributes: Mapping[str, Collection[str]] = DEFAULT_ALLOWED_ATTRIBUTES,
    allowed_classes: Mapping[str, Collection[str]] | None = None,
    disallowed_tags_mode: str = "discard",
    self_closing: Collection[str] = DEFAULT_SELF_CLOSING,
    allow_protocol_relative: bool = True,
    allowed_schemes: Collection[str] = DEFAULT_ALLOWED_SCHEMES,
    exclusive_filter: Callable[[str], bool] | None = None,
) -> str:
    """
    Sanitize an HTML fragment against allow-lists.

    :param html: Untrusted markup.
    :param allowed_tags: Tags kept in the output; others follow ``disallowed_tags_mode``.
    :param allowed_attributes: Attribute names per tag; the ``"*"`` entry applies to every tag.
    :param allowed_classes: Class names (glob patterns allowed) per tag. A tag listed here
                            may carry ``class`` even if it is not in ``allowed_attributes``.
    :param disallowed_tags_mode: ``discard`` (unwrap), ``escape``, ``recursiveEscape`` or
                                 ``completelyDiscard``.
    :param self_closing: Tags serialized as ``<tag />``.
    :param allow_protocol_relative: Keep ``//host`` URLs in ``href``/``src``/``cite``.
    :param allowed_schemes: URL schemes kept in ``href``/``src``/``cite``.
    :param exclusive_filter: Called with each tag name; when it returns true the element
                             and all of its content are removed, whatever the other options say.
    :returns: Cleaned markup.
    :raises ValueError: For an unknown ``disallowed_tags_mode``.
    """
    cleaner = _Cleaner(
        allowed_tags,
        allowed_attributes,
        allowed_classes or {},
        disallowed_tags_mode,
        self_closing,
        allow_protocol_relative,
        allowed_schemes,
        exclusive_filter,
    )
    soup = BeautifulSoup(html, "html.parser", multi_valued_attributes=None)
    cleaner.walk(soup)
    result = "".join(cleaner.parts)
    log.debug("[engine.clean] mode=%s in_len=%d out_len=%d", disallowed_tags_mode, len(html), len(result))
    return result
