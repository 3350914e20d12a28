"""
SPDX-License-Identifier: LicenseRef-NonCommercial-Only
© 2025 github.com/defmon3 — Non-commercial use only. Commercial use requires permission.

postprocess.py – text-level fixes applied to already sanitized markup.
"""

import logging
import re

log = logging.getLogger(__name__)

IMAGE_ALT_WARNING = "Image(s) found without alt attribute, empty alt added"

_TITLE_RE = re.compile(r"<title(?=[\s/>])[^>]*>", re.I)
_HEAD_RE = re.compile(r"<head(?=[\s/>])[^>]*>", re.I)
_IMG_WITHOUT_ALT_RE = re.compile(r"<img(?=[\s/>])(?![^>]*\salt(?:=|\s|/|>))[^>]*>", re.I)

_ESCAPES = str.maketrans({"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&#39;"})


def escape_html(text: str) -> str:
    return text.translate(_ESCAPES)


def ensure_title(html: str, title: str | None = None) -> str:
    """
    Make sure the markup carries a ``<title>``.

    :param html: Sanitized markup.
    :param title: Title text; nothing happens when it is empty or ``None``.
    :returns: ``html`` untouched if a ``<title>`` exists, otherwise with the
              escaped title inserted right after the first ``<head>`` tag,
              or prepended when there is no ``<head>``.
    """
    if not title:
        return html
    if _TITLE_RE.search(html):
        return html

    element = f"<title>{escape_html(title)}</title>"
    if _HEAD_RE.search(html):
        log.debug("[postprocess.ensure_title] inserted_in_head")
        return _HEAD_RE.sub(lambda m: m.group(0) + element, html, count=1)
    log.debug("[postprocess.ensure_title] prepended")
    return element + html


def _add_empty_alt(match: re.Match) -> str:
    tag = match.group(0)
    if tag.endswith("/>"):
        return tag[:-2].rstrip() + ' alt="" />'
    return tag[:-1] + ' alt="">'


def ensure_image_alt(html: str, warnings: list[str]) -> str:
    """
    Give every ``<img>`` without an ``alt`` attribute an empty one.

    ``alt=""`` goes right before the closing ``>``; for a self-closing
    ``<img ... />`` it goes before the ``/>`` instead, giving
    ``<img src="a" alt="" />`` rather than ``<img src="a" / alt="">``.

    :param html: Sanitized markup.
    :param warnings: Receives a single :data:`IMAGE_ALT_WARNING` if any image was fixed.
    :returns: The fixed markup.
    """
    fixed, count = _IMG_WITHOUT_ALT_RE.subn(_add_empty_alt, html)
    if count:
        log.debug("[postprocess.ensure_image_alt] fixed=%d", count)
        warnings.append(IMAGE_ALT_WARNING)
    return fixed
