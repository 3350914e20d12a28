"""
SPDX-License-Identifier: LicenseRef-NonCommercial-Only
© 2025 github.com/defmon3 — Non-commercial use only. Commercial use requires permission.

schema.py – the closed set of policy options exposed to policy authors.

Only data-shaped options live here. The sanitizer engine also takes a
callable (``exclusive_filter``); such options are never part of a policy
document.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

DISALLOWED_TAGS_MODES = ("discard", "escape", "recursiveEscape", "completelyDiscard")

_STRING_LIST = {"type": "array", "items": {"type": "string"}}
_STRING_LIST_MAP = {"type": "object", "additionalProperties": _STRING_LIST}

# Key order matters: object-level checks are reported before field checks.
POLICY_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Policy",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "allowedTags": _STRING_LIST,
        "allowedAttributes": _STRING_LIST_MAP,
        "allowedClasses": _STRING_LIST_MAP,
        "disallowedTagsMode": {"type": "string", "enum": list(DISALLOWED_TAGS_MODES)},
        "selfClosing": _STRING_LIST,
        "allowProtocolRelative": {"type": "boolean"},
    },
}


def _frozen_map(value: Mapping[str, list[str]]) -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType({str(tag): tuple(names) for tag, names in value.items()})


@dataclass(frozen=True, slots=True)
class Policy:
    """
    A validated sanitization policy.

    Every field is optional; ``None`` means the policy does not set it and the
    engine default applies.

    :ivar allowed_tags: Tag names kept in the output.
    :ivar allowed_attributes: Attribute names allowed per tag (``"*"`` for all tags).
    :ivar allowed_classes: Class names allowed per tag.
    :ivar disallowed_tags_mode: One of :data:`DISALLOWED_TAGS_MODES`.
    :ivar self_closing: Tags serialized as ``<tag />``.
    :ivar allow_protocol_relative: Whether ``//host/path`` URLs are kept.
    """

    allowed_tags: tuple[str, ...] | None = None
    allowed_attributes: Mapping[str, tuple[str, ...]] | None = None
    allowed_classes: Mapping[str, tuple[str, ...]] | None = None
    disallowed_tags_mode: str | None = None
    self_closing: tuple[str, ...] | None = None
    allow_protocol_relative: bool | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Policy:
        """
        Build a policy from a document that already passed :data:`POLICY_SCHEMA`.

        :param data: Validated policy tree with camelCase keys.
        :returns: The equivalent :class:`Policy`; absent keys stay ``None``.
        """
        tags = data.get("allowedTags")
        attributes = data.get("allowedAttributes")
        classes = data.get("allowedClasses")
        self_closing = data.get("selfClosing")
        return cls(
            allowed_tags=tuple(tags) if tags is not None else None,
            allowed_attributes=_frozen_map(attributes) if attributes is not None else None,
            allowed_classes=_frozen_map(classes) if classes is not None else None,
            disallowed_tags_mode=data.get("disallowedTagsMode"),
            self_closing=tuple(self_closing) if self_closing is not None else None,
            allow_protocol_relative=data.get("allowProtocolRelative"),
        )

    def to_dict(self) -> dict[str, Any]:
        """
        :returns: The policy document form, holding only the fields that are set.
        """
        out: dict[str, Any] = {}
        if self.allowed_tags is not None:
            out["allowedTags"] = list(self.allowed_tags)
        if self.allowed_attributes is not None:
            out["allowedAttributes"] = {k: list(v) for k, v in self.allowed_attributes.items()}
        if self.allowed_classes is not None:
            out["allowedClasses"] = {k: list(v) for k, v in self.allowed_classes.items()}
        if self.disallowed_tags_mode is not None:
            out["disallowedTagsMode"] = self.disallowed_tags_mode
        if self.self_closing is not None:
            out["selfClosing"] = list(self.self_closing)
        if self.allow_protocol_relative is not None:
            out["allowProtocolRelative"] = self.allow_protocol_relative
        return out
