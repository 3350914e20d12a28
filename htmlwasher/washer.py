"""
SPDX-License-Identifier: LicenseRef-NonCommercial-Only
© 2025 github.com/defmon3 — Non-commercial use only. Commercial use requires permission.

washer.py – sanitize HTML against a YAML policy, then normalize it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from htmlwasher import engine
from htmlwasher.parse import parse_setup
from htmlwasher.postprocess import ensure_image_alt, ensure_title
from htmlwasher.preset import presets
from htmlwasher.schema import Policy

log = logging.getLogger(__name__)

# Removed with their content under every policy.
ALWAYS_BLOCKED = frozenset({"script", "style", "iframe", "object", "embed", "applet", "frame", "frameset"})


class PresetError(RuntimeError):
    """The bundled standard preset could not be parsed."""


@dataclass
class WashResult:
    html: str
    warnings: list[str] = field(default_factory=list)


def is_blocked(tag_name: str) -> bool:
    return tag_name.lower() in ALWAYS_BLOCKED


def filter_event_handlers(attributes: Mapping[str, list[str] | tuple[str, ...]]) -> dict[str, list[str]]:
    """
    :param attributes: Attribute allow-list per tag.
    :returns: A copy without any attribute whose name starts with ``on`` (any case).
    """
    return {tag: [a for a in names if not a.lower().startswith("on")] for tag, names in attributes.items()}


def build_engine_options(policy: Policy) -> dict[str, Any]:
    """
    Translate a policy into keyword arguments for :func:`htmlwasher.engine.clean`.

    Fields the policy leaves unset are not passed, so the engine keeps its own
    defaults for them. The blocked-tag filter is always added.
    """
    options: dict[str, Any] = {"exclusive_filter": is_blocked}
    if policy.allowed_tags is not None:
        options["allowed_tags"] = list(policy.allowed_tags)
    if policy.allowed_attributes is not None:
        options["allowed_attributes"] = filter_event_handlers(policy.allowed_attributes)
    if policy.allowed_classes is not None:
        options["allowed_classes"] = {tag: list(names) for tag, names in policy.allowed_classes.items()}
    if policy.disallowed_tags_mode is not None:
        options["disallowed_tags_mode"] = policy.disallowed_tags_mode
    if policy.self_closing is not None:
        options["self_closing"] = list(policy.self_closing)
    if policy.allow_protocol_relative is not None:
        options["allow_protocol_relative"] = policy.allow_protocol_relative
    return options


def _resolve_policy(setup: str | None, warnings: list[str]) -> Policy:
    parsed = parse_setup(setup if setup is not None else presets.standard)
    if parsed.ok:
        return parsed.config

    log.warning("[washer.wash] setup_error code=%s message=%s", parsed.error_code.value, parsed.error_message)
    warnings.append(f"Setup error: {parsed.error_message}")
    fallback = parse_setup(presets.standard)
    if not fallback.ok:
        raise PresetError(f"standard preset is invalid: {fallback.error_message}")
    return fallback.config


def wash(html: str | bytes, *, setup: str | None = None, title: str | None = None) -> WashResult:
    """
    Sanitize ``html`` and apply the document fixes.

    :param html: Untrusted markup. ``bytes`` are decoded as UTF-8.
    :param setup: Policy YAML. ``None`` means the standard preset.
    :param title: Title to add when the markup has none.
    :returns: :class:`WashResult` with the cleaned markup and any warnings.
    :workflow:
        1. Parse ``setup``; on any error record a warning and use the standard preset.
        2. Build engine options, dropping ``on*`` attributes and always removing
           the tags in :data:`ALWAYS_BLOCKED` together with their content.
        3. Run the sanitizer.
        4. Add a ``<title>`` if asked, then empty ``alt`` on images lacking one.
    """
    if isinstance(html, bytes):
        html = html.decode("utf-8", errors="ignore")

    warnings: list[str] = []
    policy = _resolve_policy(setup, warnings)
    result = engine.clean(html, **build_engine_options(policy))
    result = ensure_title(result, title)
    result = ensure_image_alt(result, warnings)
    log.debug("[washer.wash] done in_len=%d out_len=%d warnings=%d", len(html), len(result), len(warnings))
    return WashResult(html=result, warnings=warnings)
