"""
Load today's events of a calendar feed, from the cache when it is fresh
"""
import logging
from datetime import datetime, timedelta

import requests

from icsagenda.cache import CacheStore
from icsagenda.errors import FetchError
from icsagenda.events import Event
from icsagenda.ical import parse_events

USER_AGENT = 'ics-agenda/1.0.0'


def day_window(now: datetime) -> tuple[datetime, datetime]:
    day_start = datetime(now.year, now.month, now.day)
    return day_start, day_start + timedelta(days=1)


def fetch_feed(url: str, timeout: float = 30) -> bytes:
    """Download the raw calendar document.

    Raises:
        FetchError: On connection errors, timeouts and HTTP error statuses
    """
    try:
        response = requests.get(url, headers={'User-Agent': USER_AGENT}, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"Could not retrieve events from url: {e}") from e
    return response.content


def load_events_from_url(url: str, now: datetime, timeout: float = 30) -> list[Event]:
    day_start, day_end = day_window(now)
    content = fetch_feed(url, timeout=timeout)
    events = parse_events(content, day_start, day_end)
    # sorted() is stable, events starting together keep feed order
    return sorted(events, key=lambda e: e.start)


def get_todays_events(
    url: str,
    max_age: timedelta,
    cache: CacheStore | None = None,
    now: datetime | None = None,
    timeout: float = 30,
) -> list[Event]:
    """Return today's events sorted by start.

    The cache is consulted first. It never serves an entry written before
    local midnight, whatever `max_age` allows.

    Args:
        url: Calendar feed URL
        max_age: Maximum age of a usable cache entry
        cache: Cache store, defaults to one in the system temp dir
        now: Reference time, defaults to the current local time
        timeout: Network timeout in seconds

    Raises:
        FetchError: If the feed cannot be downloaded
        ParseError: If the feed is not valid iCalendar
    """
    cache = cache or CacheStore()
    now = now or datetime.now()
    day_start, _ = day_window(now)

    events = cache.load(url, min(max_age, now - day_start))
    if events is not None:
        logging.info(f"Loaded {len(events)} events from cache")
        return events

    logging.info(f"Fetching calendar from {url}")
    events = load_events_from_url(url, now, timeout=timeout)
    if not cache.store(url, events):
        logging.warning("Events could not be cached, the feed will be fetched again next time.")
    return events
