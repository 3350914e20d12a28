"""
SPDX-License-Identifier: LicenseRef-NonCommercial-Only
© 2025 github.com/defmon3 — Non-commercial use only. Commercial use requires permission.

preset.py – built-in policy documents.

Changing a preset changes the default output of :func:`htmlwasher.wash`.
"""

from typing import NamedTuple

MINIMAL = """\
# Minimal preset - basic text formatting only
allowedTags:
  - p
  - a
  - strong
  - em
  - br

allowedAttributes:
  a:
    - href

disallowedTagsMode: discard
allowProtocolRelative: false
"""

STANDARD = """\
# Standard preset - common HTML elements for content
allowedTags:
  - p
  - a
  - strong
  - em
  - b
  - i
  - u
  - br
  - ul
  - ol
  - li
  - h1
  - h2
  - h3
  - h4
  - h5
  - h6
  - img
  - table
  - thead
  - tbody
  - tr
  - th
  - td

allowedAttributes:
  a:
    - href
    - title
    - target
  img:
    - src
    - alt
    - width
    - height
  td:
    - colspan
    - rowspan
  th:
    - colspan
    - rowspan

selfClosing:
  - img
  - br
  - hr

disallowedTagsMode: discard
allowProtocolRelative: false
"""

PERMISSIVE = """\
# Permissive preset - extended with div, span, code, pre, blockquote
allowedTags:
  - p
  - a
  - strong
  - em
  - b
  - i
  - u
  - br
  - ul
  - ol
  - li
  - h1
  - h2
  - h3
  - h4
  - h5
  - h6
  - img
  - table
  - thead
  - tbody
  - tr
  - th
  - td
  - div
  - span
  - code
  - pre
  - blockquote
  - hr
  - sub
  - sup

allowedAttributes:
  a:
    - href
    - title
    - target
  img:
    - src
    - alt
    - width
    - height
  td:
    - colspan
    - rowspan
  th:
    - colspan
    - rowspan
  div:
    - class
  span:
    - class
  code:
    - class
  pre:
    - class

allowedClasses:
  div:
    - container
    - wrapper
    - content
  span:
    - highlight
    - note
  code:
    - language-javascript
    - language-typescript
    - language-python
    - language-html
    - language-css

selfClosing:
  - img
  - br
  - hr

disallowedTagsMode: discard
allowProtocolRelative: false
"""


class Presets(NamedTuple):
    minimal: str
    standard: str
    permissive: str


presets = Presets(minimal=MINIMAL, standard=STANDARD, permissive=PERMISSIVE)
PRESET_NAMES: tuple[str, ...] = Presets._fields


def get_preset(name: str) -> str:
    """
    :param name: One of :data:`PRESET_NAMES`.
    :returns: The preset's policy YAML.
    :raises KeyError: If ``name`` is not a preset.
    """
    try:
        return presets._asdict()[name]
    except KeyError:
        raise KeyError(f"Unknown preset {name!r}; expected one of {', '.join(PRESET_NAMES)}") from None
