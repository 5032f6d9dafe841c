"""Utility modules for pagegrab."""

from .config import ConfigManager
from .http import create_session, cookies_for_url, set_cookies_for_url
from .logging import LoggerFactory, log_with_context, StructuredLogFormatter

__all__ = [
    'ConfigManager',
    'create_session',
    'cookies_for_url',
    'set_cookies_for_url',
    'LoggerFactory',
    'log_with_context',
    'StructuredLogFormatter'
]
