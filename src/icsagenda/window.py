"""
Resolve the current and the next event of a day
"""
from datetime import datetime

from icsagenda.events import Event


def current_event(events: list[Event], now: datetime) -> Event | None:
    """Return the first event whose interval [start, end) contains `now`.

    Args:
        events: Events sorted ascending by start
        now: Reference instant, naive local time

    Returns:
        The first matching event in sort order, or None
    """
    for event in events:
        if event.start <= now < event.end:
            return event
    return None


def next_event(events: list[Event], now: datetime) -> Event | None:
    """Return the first event starting strictly after `now`.

    This does not depend on the current event: with a current event running,
    the result is simply the next one to start.
    """
    for event in events:
        if event.start > now:
            return event
    return None


def same_event(e1: Event | None, e2: Event | None) -> bool:
    if e1 is None and e2 is None:
        return True
    if e1 is not None and e2 is not None:
        return e1.id == e2.id
    return False
