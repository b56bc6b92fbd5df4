"""
Utility modules for the Discord log transport.
"""

from .message_formatter import (
    DEFAULT_COLORS,
    format_message,
    format_error,
    populate_error,
    resolve_color,
    merge_colors
)

__all__ = [
    'DEFAULT_COLORS',
    'format_message',
    'format_error',
    'populate_error',
    'resolve_color',
    'merge_colors'
]
