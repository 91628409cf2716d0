from datetime import datetime, timedelta

import pytest

from icsagenda.events import Event


@pytest.fixture
def make_event():
    def _make_event(event_id, start, end, summary='Meeting', location='', description=''):
        return Event(
            id=event_id,
            start=start,
            end=end,
            summary=summary,
            location=location,
            description=description,
        )
    return _make_event


@pytest.fixture
def day():
    return datetime(2025, 1, 15)


@pytest.fixture
def day_events(make_event, day):
    """A at 09:00-10:00, B at 11:00-12:00"""
    return [
        make_event('1', day + timedelta(hours=9), day + timedelta(hours=10), 'Event A'),
        make_event('2', day + timedelta(hours=11), day + timedelta(hours=12), 'Event B'),
    ]


@pytest.fixture
def sample_ics_simple():
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Test//Test//EN
BEGIN:VEVENT
UID:late-event@example.com
DTSTART:20250115T140000
DTEND:20250115T150000
SUMMARY:Team Meeting
LOCATION:Conference Room A
DESCRIPTION:Join at https://meet.example.com/abc-defg
END:VEVENT
BEGIN:VEVENT
UID:early-event@example.com
DTSTART:20250115T090000
DTEND:20250115T093000
SUMMARY:Standup
END:VEVENT
BEGIN:VEVENT
UID:tomorrow-event@example.com
DTSTART:20250116T090000
DTEND:20250116T100000
SUMMARY:Tomorrow
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def sample_ics_recurring():
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Test//Test//EN
BEGIN:VEVENT
UID:recurring-event@example.com
DTSTART:20250113T100000
DTEND:20250113T103000
SUMMARY:Daily Standup
RRULE:FREQ=DAILY;COUNT=10
EXDATE:20250117T100000
END:VEVENT
BEGIN:VEVENT
UID:recurring-event@example.com
RECURRENCE-ID:20250116T100000
DTSTART:20250116T150000
DTEND:20250116T153000
SUMMARY:Daily Standup (moved)
END:VEVENT
END:VCALENDAR
"""
