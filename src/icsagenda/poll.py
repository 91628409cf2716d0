"""
State machine of the continuous "tail" output

`advance` is pure: it returns the next state and the side effects to
perform, the caller performs them.
"""
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from icsagenda.events import Event
from icsagenda.formatter import fixed_size, time_string
from icsagenda.window import same_event

FIRST_LEAD_TIME = timedelta(minutes=15)
SECOND_LEAD_TIME = timedelta(minutes=5)
NOTIFICATION_TITLE = 'Agenda'


@dataclass(frozen=True)
class PlaySound:
    pass


@dataclass(frozen=True)
class Notify:
    title: str
    body: str


@dataclass(frozen=True)
class Print:
    line: str


Command = PlaySound | Notify | Print


@dataclass(frozen=True)
class PollState:
    current: Event | None = None
    upcoming: Event | None = None
    announced15: bool = False
    announced5: bool = False


def describe(current: Event | None, upcoming: Event | None) -> str:
    if current is None and upcoming is None:
        return 'No upcoming Events'
    if upcoming is None:
        return f"Current: [{time_string(current.start)} - {time_string(current.end)}] {fixed_size(current.summary, 40)}"
    if current is None:
        return f"Upcoming: [{time_string(upcoming.start)} - {time_string(upcoming.end)}] {fixed_size(upcoming.summary, 40)}"
    return (
        f"[{time_string(current.start)} - {time_string(current.end)}] {fixed_size(current.summary, 30)}"
        f" > [{time_string(upcoming.start)} - {time_string(upcoming.end)}] {fixed_size(upcoming.summary, 30)}"
    )


def advance(
    state: PollState,
    current: Event | None,
    upcoming: Event | None,
    now: datetime
) -> tuple[PollState, list[Command]]:
    """Compute one tick of the poll loop.

    While the current and upcoming events keep their identity, each lead-time
    alert fires at most once for the upcoming event. Any identity change resets
    both alerts and prints the new state.

    Args:
        state: State after the previous tick
        current: Current event resolved for this tick
        upcoming: Next event resolved for this tick
        now: Time of this tick

    Returns:
        Tuple of (new state, commands to perform in order)
    """
    if same_event(current, state.current) and same_event(upcoming, state.upcoming):
        if upcoming is None:
            return state, []

        if not state.announced5 and upcoming.start < now + SECOND_LEAD_TIME:
            state = replace(state, announced15=True, announced5=True)
            return state, [PlaySound(), Notify(NOTIFICATION_TITLE, 'Upcoming event in 5 Minutes')]

        if not state.announced15 and upcoming.start < now + FIRST_LEAD_TIME:
            state = replace(state, announced15=True)
            return state, [PlaySound(), Notify(NOTIFICATION_TITLE, 'Upcoming event in 15 Minutes')]

        return state, []

    state = PollState(current=current, upcoming=upcoming)
    return state, [PlaySound(), Print(describe(current, upcoming))]
