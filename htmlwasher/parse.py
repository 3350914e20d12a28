"""
SPDX-License-Identifier: LicenseRef-NonCommercial-Only
© 2025 github.com/defmon3 — Non-commercial use only. Commercial use requires permission.

parse.py – turn policy YAML into a validated :class:`~htmlwasher.schema.Policy`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

import yaml
from jsonschema import Draft7Validator

from htmlwasher.schema import POLICY_SCHEMA, Policy

log = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    YAML_SYNTAX_ERROR = "YAML_SYNTAX_ERROR"
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"


@dataclass(frozen=True, slots=True)
class ParseOk:
    config: Policy
    ok: Literal[True] = True


@dataclass(frozen=True, slots=True)
class ParseError:
    error_code: ErrorCode
    error_message: str
    ok: Literal[False] = False


ParseResult = ParseOk | ParseError


class _PolicyLoader(yaml.SafeLoader):
    """Safe loader that refuses duplicate mapping keys."""


def _construct_unique_mapping(loader: _PolicyLoader, node: yaml.MappingNode) -> dict[Any, Any]:
    seen: set[str] = set()
    for key_node, _ in node.value:
        if not isinstance(key_node, yaml.ScalarNode) or key_node.tag == "tag:yaml.org,2002:merge":
            continue
        if key_node.value in seen:
            raise yaml.constructor.ConstructorError(
                "while constructing a mapping",
                node.start_mark,
                f"found duplicate key {key_node.value!r}",
                key_node.start_mark,
            )
        seen.add(key_node.value)
    return loader.construct_mapping(node)


_PolicyLoader.add_constructor(yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, _construct_unique_mapping)

# Built once, read-only afterwards.
_VALIDATOR = Draft7Validator(POLICY_SCHEMA)


def _pointer(path) -> str:
    return "".join("/" + str(part).replace("~", "~0").replace("/", "~1") for part in path)


def parse_setup(text: str) -> ParseResult:
    """
    Parse and validate a policy document.

    :param text: Policy YAML. Empty or whitespace-only text is an empty policy.
    :returns: :class:`ParseOk` carrying the policy, or :class:`ParseError`
              with ``YAML_SYNTAX_ERROR`` / ``SCHEMA_VALIDATION_ERROR``.
    :notes:
        - Only the first validation error is reported. Object-level problems
          (wrong top-level type, unknown keys) come before per-field ones.
        - Never raises for textual input.
    """
    if not text.strip():
        return ParseOk(Policy())

    try:
        data = yaml.load(text, Loader=_PolicyLoader)  # noqa: S506 - SafeLoader subclass
    except Exception as e:
        # PyYAML's scalar constructors can fail with IndexError, AttributeError, ...
        # on malformed tagged scalars; all of them are bad input.
        message = str(e) or "Unknown YAML syntax error"
        log.debug("[parse.parse_setup] yaml_error=%s", message)
        return ParseError(ErrorCode.YAML_SYNTAX_ERROR, message)

    if data is None:
        data = {}

    error = next(_VALIDATOR.iter_errors(data), None)
    if error is not None:
        path = _pointer(error.absolute_path)
        message = f"{path}: {error.message}" if path else error.message
        log.debug("[parse.parse_setup] schema_error=%s", message)
        return ParseError(ErrorCode.SCHEMA_VALIDATION_ERROR, message)

    return ParseOk(Policy.from_dict(data))
