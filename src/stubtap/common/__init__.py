"""
StubTap Common Utilities

Shared utilities and helpers used across StubTap modules.
"""

from .utils import StubFileParser, safe_json_parse, get_env_setting

__all__ = [
    'StubFileParser',
    'safe_json_parse',
    'get_env_setting',
]
