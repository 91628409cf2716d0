"""
Continuous output handler with lead-time alerts
"""
import logging
import time
from collections.abc import Callable
from datetime import datetime

from icsagenda import alerts
from icsagenda.events import Event
from icsagenda.poll import Command, Notify, PlaySound, PollState, Print, advance
from icsagenda.window import current_event, next_event

TICK_INTERVAL = 1.0


class Handler:
    """Prints a line whenever the current or next event changes.

    Plays the alert sound on every change, and once more with a desktop
    notification 15 and 5 minutes before the next event starts. Runs until
    the process is killed.
    """

    def __init__(
        self,
        interval: float = TICK_INTERVAL,
        sound: bool = True,
        notify: bool = True,
        ticks: int | None = None,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], None] = time.sleep,
        play_sound: Callable[[], bool] = alerts.play_sound,
        send_notification: Callable[[str, str], bool] = alerts.send_notification,
    ):
        """
        Args:
            interval: Seconds between two ticks
            sound: Whether to play the alert sound
            notify: Whether to send desktop notifications
            ticks: Stop after this many ticks, run forever if None
        """
        self.interval = interval
        self.sound = sound
        self.notify = notify
        self.ticks = ticks
        self.clock = clock
        self.sleep = sleep
        self.play_sound = play_sound
        self.send_notification = send_notification
        self.state = PollState()

    def __call__(self, events: list[Event]) -> None:
        count = 0
        while self.ticks is None or count < self.ticks:
            count += 1
            self.sleep(self.interval)
            self.tick(events)

    def tick(self, events: list[Event]) -> None:
        now = self.clock()
        self.state, commands = advance(
            self.state,
            current_event(events, now),
            next_event(events, now),
            now,
        )
        for command in commands:
            self.perform(command)

    def perform(self, command: Command) -> None:
        if isinstance(command, Print):
            print(command.line, flush=True)
        elif isinstance(command, PlaySound):
            if self.sound:
                self.play_sound()
        elif isinstance(command, Notify):
            if self.notify and not self.send_notification(command.title, command.body):
                logging.debug(f"Notification '{command.body}' was not delivered")
