"""
Text rendering of events for status bars and terminals
"""
import re
from datetime import datetime

from icsagenda.events import Event

LINK_PATTERN = re.compile(
    r'https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b([-a-zA-Z0-9()@:%_+.~#?&/=]*)'
)


def time_string(dt: datetime) -> str:
    return f"{dt.hour:02d}:{dt.minute:02d}"


def fixed_size(text: str, width: int | None, ellipsis: str = '...') -> str:
    """Cut `text` to `width` characters and mark the cut with `ellipsis`."""
    if width is not None and len(text) > width:
        return text[:width] + ellipsis
    return text


def find_link(event: Event) -> str:
    """Return the first http(s) URL in the location or description, or ''."""
    match = LINK_PATTERN.search(event.location + '\n' + event.description)
    return match.group(0) if match else ''


def render_event(event: Event, width: int | None = None) -> str:
    return f"[{time_string(event.start)} - {time_string(event.end)}] {fixed_size(event.summary, width)}"


def quote(text: str) -> str:
    return "'" + text.replace("'", "'\\''") + "'"


def render_list_entry(event: Event, current: bool) -> str:
    """Render an agenda entry as `TRUE|FALSE 'HH:MM' 'HH:MM' 'summary'`.

    Values are single quoted the way a POSIX shell expects them, so a list of
    entries can be split with `eval set -- ...`.
    """
    flag = 'TRUE' if current else 'FALSE'
    return f"{flag} {quote(time_string(event.start))} {quote(time_string(event.end))} {quote(event.summary)}"
