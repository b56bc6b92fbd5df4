"""
Message formatting for Discord embeds.

This module turns a log entry plus the transport's global metadata into a
FormattedMessage: a title, a compact two-column metadata block, a color
picked from the level palette and, for errors, a fenced traceback.

Everything here is a plain function of its inputs. Nothing is cached or
shared between calls, so the same entry formatted at the same timestamp
always yields the same message.
"""

import json
import re
import socket
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from ..types.models import EmbedField, FormattedMessage, LogEntry

# Default embed color palette
DEFAULT_COLORS: Dict[str, int] = {
    'debug': 2196944,
    'error': 14362664,
    'info': 2196944,
    'silly': 2210373,
    'verbose': 6559689,
    'warn': 16497928,
}

# Discord embed limits
EMBED_TITLE_LIMIT = 256
EMBED_DESCRIPTION_LIMIT = 4096
EMBED_FIELD_VALUE_LIMIT = 1024

METADATA_FIELD_NAME = 'Metadata'
BLANK_FIELD_NAME = '\u200b'

# Summary line of a rendered exception, e.g. "ValueError: disk full"
_ERROR_SUMMARY = re.compile(r'^[\w.]+: (.+)$', re.MULTILINE)

_FENCE = '```'


def merge_colors(overrides: Optional[Mapping[str, int]] = None) -> Dict[str, int]:
    """Merge caller colors over the defaults, key by key."""
    colors = dict(DEFAULT_COLORS)
    if overrides:
        colors.update(overrides)
    return colors


def resolve_color(level: Any, overrides: Optional[Mapping[str, int]] = None) -> Optional[int]:
    """
    Get the embed color for a level.

    Args:
        level: Level name of the entry
        overrides: Optional per-level colors supplied by the caller

    Returns:
        Optional[int]: Override, else default, else None for unknown levels
    """
    if not isinstance(level, str):
        return None
    return merge_colors(overrides).get(level)


def populate_error(entry: LogEntry) -> LogEntry:
    """
    Ensure that an error attached to a log entry is bubbled to the top.

    If the entry has no explicit error, the first exception among its extra
    positional arguments becomes ``entry.error``.
    """
    if entry.error is not None:
        return entry

    for value in entry.splat or []:
        if isinstance(value, BaseException):
            entry.error = value
            break

    return entry


def format_error(entry: LogEntry) -> Optional[str]:
    """
    Fetch a formatted error string if applicable.

    Prefers the traceback, but falls back to "Type: message" when the
    exception was never raised and so carries no traceback. Explicit error
    values that are not exceptions are rendered with ``str``.
    """
    error = entry.error
    if error is None:
        return None

    if not isinstance(error, BaseException):
        return str(error)

    if error.__traceback__ is not None:
        lines = traceback.format_exception(type(error), error, error.__traceback__)
        return ''.join(lines).rstrip('\n')

    return ''.join(traceback.format_exception_only(type(error), error)).rstrip('\n')


def format_timestamp(timestamp: datetime) -> str:
    """Render an instant as ISO-8601 UTC plus a Discord relative-time marker."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    timestamp = timestamp.astimezone(timezone.utc)

    iso = timestamp.strftime('%Y-%m-%dT%H:%M:%S') + f'.{timestamp.microsecond // 1000:03d}Z'
    return f'{iso} (<t:{round(timestamp.timestamp())}:R>)'


def stringify_value(value: Any) -> str:
    """
    Render a metadata value for display.

    Structured values are serialized as JSON; anything JSON can't handle
    falls back to ``str``.
    """
    if isinstance(value, str):
        return value

    if isinstance(value, (Mapping, list, tuple)):
        try:
            return json.dumps(value, default=str)
        except (TypeError, ValueError):
            return str(value)

    return str(value)


def uc_first(value: str) -> str:
    """Capitalize the first character in a string."""
    return value[:1].upper() + value[1:]


def get_embed_fields(
    level: Any,
    global_meta: Optional[Mapping[str, Any]] = None,
    entry_meta: Optional[Mapping[str, Any]] = None,
    timestamp: Optional[datetime] = None
) -> List[EmbedField]:
    """
    Fetch the formatted and sorted metadata fields.

    Built-in keys come first, then global metadata, then entry metadata, so
    later sources win on collision. Keys are sorted and rendered as two
    inline columns (names, values) to keep the embed compact.

    Args:
        level: Level name of the entry
        global_meta: Metadata attached to every message of the transport
        entry_meta: Metadata attached to this entry only
        timestamp: Instant to display, defaults to now

    Returns:
        List[EmbedField]: The names column and the values column
    """
    timestamp = timestamp or datetime.now(timezone.utc)

    key_values: Dict[str, Any] = {
        'level': level,
        'host': socket.gethostname(),
        'timestamp': format_timestamp(timestamp),
    }

    for source in (global_meta, entry_meta):
        if source:
            for key, value in source.items():
                key_values[str(key)] = value

    names = []
    values = []
    for key in sorted(key_values):
        value = key_values[key]
        if value is None:
            continue
        names.append(uc_first(key))
        values.append(stringify_value(value))

    return [
        EmbedField(METADATA_FIELD_NAME, _truncate_text('\n'.join(names), EMBED_FIELD_VALUE_LIMIT), True),
        EmbedField(BLANK_FIELD_NAME, _truncate_text('\n'.join(values), EMBED_FIELD_VALUE_LIMIT), True),
    ]


def strip_error_summary(title: Optional[str], description: Optional[str]) -> Optional[str]:
    """
    Strip the error's own message out of the title.

    Loggers commonly interpolate the exception into the message; the text is
    already visible in the traceback block so it is dropped from the title.
    """
    if not title or not description:
        return title

    matches = _ERROR_SUMMARY.findall(description)
    if not matches:
        return title

    summary = matches[-1]
    if summary not in title:
        return title

    return title.replace(summary, '', 1).strip()


def format_message(
    entry: Union[LogEntry, Mapping[str, Any]],
    global_meta: Optional[Mapping[str, Any]] = None,
    colors: Optional[Mapping[str, int]] = None,
    timestamp: Optional[datetime] = None
) -> FormattedMessage:
    """
    Create a formatted message from a log entry and optional metadata.

    Args:
        entry: The log entry; its ``error`` is normalized in place
        global_meta: Metadata to include in every message
        colors: Optional per-level color overrides
        timestamp: Instant to display, defaults to now

    Returns:
        FormattedMessage: The embed-shaped message
    """
    if not isinstance(entry, LogEntry):
        entry = LogEntry.from_mapping(entry)

    populate_error(entry)

    level = entry.level
    fields = get_embed_fields(level, global_meta, entry.meta, timestamp)
    error_text = format_error(entry)

    title = entry.message if entry.message is None else str(entry.message)
    title = strip_error_summary(title, error_text)
    if title is not None:
        title = _truncate_text(title, EMBED_TITLE_LIMIT)

    description = None
    if level == 'error' and error_text:
        description = _fence(error_text)

    return FormattedMessage(
        title=title,
        fields=fields,
        color=resolve_color(level, colors),
        description=description,
    )


def _fence(text: str) -> str:
    # Keep the closing fence intact when the traceback is too long
    room = EMBED_DESCRIPTION_LIMIT - len(_FENCE) * 2 - 2
    return f'{_FENCE}\n{_truncate_text(text, room)}\n{_FENCE}'


def _truncate_text(text: str, max_length: int) -> str:
    """
    Truncate text to maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length

    Returns:
        str: Truncated text
    """
    if len(text) <= max_length:
        return text

    return text[:max_length - 3] + '...'
