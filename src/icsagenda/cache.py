"""
File based cache of a day's resolved events, keyed by feed URL
"""
import base64
import hashlib
import json
import logging
import tempfile
import time
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path

from icsagenda.events import Event

CACHE_PREFIX = 'icsagenda-cache-'


class CacheStore:
    """Key-value store of event lists, one JSON file per feed URL.

    The age of an entry is the modification time of its file. Entries are
    never removed, an expired entry is simply ignored and overwritten by the
    next successful fetch.
    """

    def __init__(self, directory: str | Path | None = None, clock: Callable[[], float] = time.time):
        """
        Args:
            directory: Directory holding cache files, defaults to the system temp dir
            clock: Returns the current time as a POSIX timestamp
        """
        self.directory = Path(directory) if directory else Path(tempfile.gettempdir())
        self.clock = clock

    @staticmethod
    def key(url: str) -> str:
        digest = hashlib.sha1(url.encode('utf-8')).digest()
        return CACHE_PREFIX + base64.urlsafe_b64encode(digest).decode('ascii').rstrip('=')

    def path(self, url: str) -> Path:
        return self.directory / self.key(url)

    def load(self, url: str, max_age: timedelta) -> list[Event] | None:
        """Load the cached events for `url`.

        An entry whose age equals `max_age` is still served.

        Returns:
            The cached events, or None if the entry is missing, expired or unreadable
        """
        path = self.path(url)
        try:
            mtime = path.stat().st_mtime
        except OSError as e:
            logging.debug(f"Cache miss for {url}: {e}")
            return None

        age = self.clock() - mtime
        if age > max_age.total_seconds():
            logging.debug(f"Cache entry {path} is too old ({age:.0f}s).")
            return None

        try:
            with path.open('r', encoding='utf-8') as f:
                data = json.load(f)
            return [Event.from_dict(item) for item in data]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logging.warning(f"Cannot decode cache file {path}: {e}")
            return None

    def store(self, url: str, events: list[Event]) -> bool:
        path = self.path(url)
        try:
            payload = json.dumps([event.to_dict() for event in events])
            self.directory.mkdir(parents=True, exist_ok=True)
            with path.open('w', encoding='utf-8') as f:
                f.write(payload)
        except (OSError, TypeError, ValueError) as e:
            logging.warning(f"Cannot write cache file {path}: {e}")
            return False
        logging.debug(f"Cached {len(events)} events in {path}")
        return True
