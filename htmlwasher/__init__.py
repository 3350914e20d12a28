from htmlwasher.parse import ErrorCode, ParseError, ParseOk, ParseResult, parse_setup
from htmlwasher.preset import PRESET_NAMES, get_preset, presets
from htmlwasher.schema import Policy
from htmlwasher.washer import PresetError, WashResult, wash

__all__ = [
    "ErrorCode",
    "ParseError",
    "ParseOk",
    "ParseResult",
    "parse_setup",
    "PRESET_NAMES",
    "get_preset",
    "presets",
    "Policy",
    "PresetError",
    "WashResult",
    "wash",
]
