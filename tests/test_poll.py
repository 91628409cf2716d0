"""Tests for the tail mode state machine."""
from datetime import timedelta

from icsagenda.poll import Notify, PlaySound, PollState, Print, advance, describe
from icsagenda.window import current_event, next_event


def run_ticks(events, start, end, step=timedelta(seconds=1), state=None):
    """Advance the state machine every `step` from `start` to `end`, collecting commands."""
    state = state or PollState()
    commands = []
    now = start
    while now <= end:
        state, tick_commands = advance(state, current_event(events, now), next_event(events, now), now)
        commands.extend(tick_commands)
        now += step
    return state, commands


def notifications(commands):
    return [c.body for c in commands if isinstance(c, Notify)]


class TestAdvance:

    def test_first_tick_reports_state(self, day_events, day):
        now = day + timedelta(hours=8)
        state, commands = advance(PollState(), None, day_events[0], now)

        assert commands == [PlaySound(), Print("Upcoming: [09:00 - 10:00] Event A")]
        assert state.upcoming is day_events[0]

    def test_first_tick_without_events_is_silent(self, day):
        state, commands = advance(PollState(), None, None, day)
        assert commands == []
        assert state == PollState()

        state, commands = advance(state, None, None, day + timedelta(seconds=1))
        assert commands == []

    def test_day_already_over_is_silent(self, day_events, day):
        _, commands = run_ticks(day_events, day + timedelta(hours=13), day + timedelta(hours=13, minutes=5))
        assert commands == []

    def test_nothing_happens_while_identity_is_unchanged(self, day_events, day):
        now = day + timedelta(hours=7)
        state, _ = advance(PollState(), None, day_events[0], now)

        new_state, commands = advance(state, None, day_events[0], now + timedelta(seconds=1))

        assert commands == []
        assert new_state == state

    def test_each_alert_fires_once(self, day_events, day):
        _, commands = run_ticks(day_events, day + timedelta(hours=8, minutes=30), day + timedelta(hours=8, minutes=59, seconds=59))

        assert notifications(commands) == ['Upcoming event in 15 Minutes', 'Upcoming event in 5 Minutes']
        assert sum(isinstance(c, Print) for c in commands) == 1

    def test_alerts_fire_once_with_sub_second_ticks(self, day_events, day):
        _, commands = run_ticks(
            day_events,
            day + timedelta(hours=8, minutes=44),
            day + timedelta(hours=8, minutes=56),
            step=timedelta(milliseconds=250),
        )
        assert notifications(commands) == ['Upcoming event in 15 Minutes', 'Upcoming event in 5 Minutes']

    def test_alert_times(self, day_events, day):
        now = day + timedelta(hours=8, minutes=40)
        state, _ = advance(PollState(), None, day_events[0], now)

        state, commands = advance(state, None, day_events[0], day + timedelta(hours=8, minutes=45))
        assert commands == []

        state, commands = advance(state, None, day_events[0], day + timedelta(hours=8, minutes=45, seconds=1))
        assert commands == [PlaySound(), Notify('Agenda', 'Upcoming event in 15 Minutes')]
        assert state.announced15 and not state.announced5

        state, commands = advance(state, None, day_events[0], day + timedelta(hours=8, minutes=55, seconds=1))
        assert commands == [PlaySound(), Notify('Agenda', 'Upcoming event in 5 Minutes')]
        assert state.announced15 and state.announced5

    def test_late_start_skips_fifteen_minute_alert(self, day_events, day):
        now = day + timedelta(hours=8, minutes=57)
        _, commands = run_ticks(day_events, now, now + timedelta(minutes=2))

        assert notifications(commands) == ['Upcoming event in 5 Minutes']

    def test_alerts_are_not_fired_on_the_transition_tick(self, day_events, day):
        now = day + timedelta(hours=8, minutes=58)
        _, commands = advance(PollState(), None, day_events[0], now)
        assert notifications(commands) == []

    def test_transition_resets_alerts(self, day_events, day):
        state, commands = run_ticks(day_events, day + timedelta(hours=8, minutes=50), day + timedelta(hours=9, minutes=5))
        assert state.current is day_events[0]
        assert state.upcoming is day_events[1]
        assert not state.announced15 and not state.announced5

        prints = [c.line for c in commands if isinstance(c, Print)]
        assert prints == [
            "Upcoming: [09:00 - 10:00] Event A",
            "[09:00 - 10:00] Event A > [11:00 - 12:00] Event B",
        ]

    def test_every_transition_plays_sound(self, day_events, day):
        _, commands = run_ticks(
            day_events, day + timedelta(hours=8), day + timedelta(hours=13), step=timedelta(minutes=1)
        )
        prints = [c for c in commands if isinstance(c, Print)]
        sounds = [c for c in commands if isinstance(c, PlaySound)]
        # 09:00, 10:00, 11:00 and 12:00 transitions plus the first tick
        assert len(prints) == 5
        # four lead-time alerts, two per next event
        assert len(sounds) == len(prints) + 4
        assert prints[-1] == Print("No upcoming Events")


class TestDescribe:

    def test_current_only(self, make_event, day):
        current = make_event('1', day + timedelta(hours=9), day + timedelta(hours=10), "x" * 50)
        assert describe(current, None) == "Current: [09:00 - 10:00] " + "x" * 40 + "..."

    def test_next_only(self, make_event, day):
        upcoming = make_event('2', day + timedelta(hours=11), day + timedelta(hours=12), "Lunch")
        assert describe(None, upcoming) == "Upcoming: [11:00 - 12:00] Lunch"

    def test_both(self, make_event, day):
        current = make_event('1', day + timedelta(hours=9), day + timedelta(hours=10), "c" * 35)
        upcoming = make_event('2', day + timedelta(hours=11), day + timedelta(hours=12), "Lunch")
        assert describe(current, upcoming) == (
            "[09:00 - 10:00] " + "c" * 30 + "... > [11:00 - 12:00] Lunch"
        )

    def test_none(self):
        assert describe(None, None) == "No upcoming Events"
