"""Render an Annotation into its display string."""

import re
from datetime import datetime

from .blame import UNKNOWN_AUTHOR, Annotation
from .config import DisplayConfig

ELLIPSIS = "..."

# Only these placeholders are expanded; any other %x is left as-is.
_PLACEHOLDER_RE = re.compile(r"%([admh])")


def truncate_message(message: str, max_len: int) -> str:
    """Cut `message` to `max_len` characters, adding an ellipsis if cut."""
    if len(message) > max_len:
        return message[:max_len] + ELLIPSIS
    return message


def render_date(timestamp: int | None, date_format: str) -> str:
    """Format an epoch timestamp in local time, or "" if there is none."""
    if timestamp is None:
        return ""
    try:
        return datetime.fromtimestamp(timestamp).strftime(date_format)
    except (OverflowError, OSError, ValueError):
        return ""


def format_annotation(annotation: Annotation | None, config: DisplayConfig) -> str:
    """
    Expand the template in `config` for `annotation`.

    Returns an empty string when there is no annotation. Substituted values
    are not themselves scanned for placeholders.
    """
    if annotation is None:
        return ""

    values = {
        "a": annotation.author or UNKNOWN_AUTHOR,
        "d": render_date(annotation.timestamp, config.date_format),
        "m": truncate_message(annotation.summary or "", config.max_msg_len),
        "h": annotation.short_hash,
    }
    return _PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], config.template)
