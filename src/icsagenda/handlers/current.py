"""
Current event output handler
"""
from collections.abc import Callable
from datetime import datetime

from icsagenda.events import Event
from icsagenda.formatter import render_event
from icsagenda.window import current_event


class Handler:
    """Prints the event running right now, or nothing"""

    def __init__(self, width: int | None = None, clock: Callable[[], datetime] = datetime.now):
        """
        Args:
            width: Maximum summary length before it is cut, unlimited by default
            clock: Returns the current local time
        """
        self.width = width
        self.clock = clock

    def __call__(self, events: list[Event]) -> None:
        event = current_event(events, self.clock())
        if event is not None:
            print(render_event(event, self.width), flush=True)
