"""
Agenda output handler
"""
from collections.abc import Callable
from datetime import datetime

from icsagenda.events import Event
from icsagenda.formatter import render_list_entry
from icsagenda.window import current_event


class Handler:
    """Prints all of today's events on one machine readable line.

    Each event becomes `TRUE|FALSE 'start' 'end' 'summary'`, TRUE marking the
    current event. Nothing is printed for an empty day.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock

    def __call__(self, events: list[Event]) -> None:
        if not events:
            return

        current = current_event(events, self.clock())
        entries = [render_list_entry(event, event is current) for event in events]
        print(' '.join(entries), flush=True)
