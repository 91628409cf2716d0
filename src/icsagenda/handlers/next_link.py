"""
Link of the next event
"""
from collections.abc import Callable
from datetime import datetime

from icsagenda.events import Event
from icsagenda.formatter import find_link
from icsagenda.window import next_event


class Handler:
    """Prints the first URL found in the next event's location or description"""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock

    def __call__(self, events: list[Event]) -> None:
        event = next_event(events, self.clock())
        link = find_link(event) if event is not None else ''
        if link:
            print(link, flush=True)
