"""
Next event output handler
"""
from collections.abc import Callable
from datetime import datetime

from icsagenda.events import Event
from icsagenda.formatter import render_event
from icsagenda.window import next_event


class Handler:
    """Prints the next event to start, or nothing"""

    def __init__(self, width: int | None = None, clock: Callable[[], datetime] = datetime.now):
        self.width = width
        self.clock = clock

    def __call__(self, events: list[Event]) -> None:
        event = next_event(events, self.clock())
        if event is not None:
            print(render_event(event, self.width), flush=True)
