"""
iCalendar parsing for a single day window
"""
import hashlib
import logging
from datetime import date, datetime, timedelta
from typing import Literal, cast, overload

import dateutil.rrule
import dateutil.tz
from icalendar import Calendar, Component, vDDDLists, vDDDTypes, vRecur

from icsagenda.errors import ParseError
from icsagenda.events import Event


def to_naive_local_datetime(dt: date) -> datetime:
    """Convert a date or datetime to a naive datetime in local timezone.

    Naive datetimes are floating times and are taken as local already.

    Args:
        dt: date or datetime object, optionally timezone-aware

    Returns:
        Naive datetime object in local timezone
    """
    if isinstance(dt, datetime):
        if dt.tzinfo:
            local_tz = dateutil.tz.tzlocal()
            return dt.astimezone(local_tz).replace(tzinfo=None)
        return dt
    return datetime(dt.year, dt.month, dt.day)


@overload
def extract_datetime(component: Component, key: Literal['DTSTART', 'DTEND', 'RECURRENCE-ID']) -> datetime | None: ...

@overload
def extract_datetime(component: Component, key: Literal['DURATION']) -> timedelta | None: ...

def extract_datetime(component: Component, key: str) -> datetime | timedelta | None:
    ddd: list[vDDDTypes] | vDDDTypes | None = component.get(key)
    if not ddd:
        return None

    if isinstance(ddd, list):
        ddd = ddd[0]

    dt = ddd.dt

    if key == 'DURATION':
        return dt if isinstance(dt, timedelta) else None

    if isinstance(dt, date):
        return to_naive_local_datetime(dt)

    return None


def event_duration(component: Component, dtstart: datetime) -> timedelta:
    dtend = extract_datetime(component, 'DTEND')
    if dtend is not None:
        return dtend - dtstart

    duration = extract_datetime(component, 'DURATION')
    if duration is not None:
        return duration

    # RFC 5545: an all-day event without DTEND lasts one day
    if not isinstance(component.decoded('DTSTART'), datetime):
        return timedelta(days=1)
    return timedelta(0)


def event_start(component: Component) -> datetime:
    """DTSTART as expanded by recurrence rules: aware in the event's own zone, or naive for floating and all-day values."""
    dt = component.decoded('DTSTART')
    if isinstance(dt, datetime):
        return dt
    return datetime(dt.year, dt.month, dt.day)


def get_occurrences_in_range(
    component: Component,
    start_time: datetime,
    end_time: datetime
) -> list[datetime]:
    """Get all occurrences of an event starting within a time range.

    Handles recurring events using RRULE, RDATE, and EXDATE properties.
    Rules are expanded in the event's own zone, so occurrences keep their
    wall-clock time there across DST changes.

    Args:
        component: VEVENT component
        start_time: Start of the query range, naive local time
        end_time: End of the query range, naive local time

    Returns:
        List of naive local datetimes for each occurrence
    """
    dtstart = event_start(component)
    event_tz = dtstart.tzinfo

    def to_event_time(dt: date) -> datetime:
        if not isinstance(dt, datetime):
            dt = datetime(dt.year, dt.month, dt.day)
        if event_tz is None:
            return to_naive_local_datetime(dt)
        if dt.tzinfo is None:
            return dt.replace(tzinfo=event_tz)
        return dt

    if event_tz is not None:
        local_tz = dateutil.tz.tzlocal()
        start_time = start_time.replace(tzinfo=local_tz)
        end_time = end_time.replace(tzinfo=local_tz)

    rules = dateutil.rrule.rruleset()

    has_rrule = False

    rrule_props: list[vRecur] | vRecur | None = component.get('RRULE')
    if rrule_props:
        if not isinstance(rrule_props, list):
            rrule_props = [rrule_props]

        for prop in rrule_props:
            try:
                rrule_str = prop.to_ical().decode('utf-8')
                rule = dateutil.rrule.rrulestr(
                    s=rrule_str,
                    dtstart=dtstart,
                    forceset=False,
                    ignoretz=event_tz is None
                )
                rule = cast(dateutil.rrule.rrule, rule)
                rules.rrule(rule)
                has_rrule = True
            except ValueError:
                logging.warning(f"Invalid RRULE format: {prop.to_ical().decode('utf-8')}, skipped.")
                continue

    if not has_rrule:
        rules.rdate(dtstart)

    def extract_dates(props: list[vDDDLists] | vDDDLists) -> list[datetime]:
        extracted = []
        if not isinstance(props, list):
            props = [props]
        for prop in props:
            for ddd in prop.dts:
                # periods are reduced to their start
                ddd_dt = ddd.dt[0] if isinstance(ddd.dt, tuple) else ddd.dt
                if isinstance(ddd_dt, date):
                    extracted.append(to_event_time(ddd_dt))
        return extracted

    rdates = component.get('RDATE')
    if rdates:
        for rdate in extract_dates(rdates):
            rules.rdate(rdate)

    exdates = component.get('EXDATE')
    if exdates:
        for exdate in extract_dates(exdates):
            rules.exdate(exdate)

    try:
        occurrences = list(rules.between(start_time, end_time, inc=True))
    except Exception as e:
        logging.warning(f"Error expanding occurrences: {e}")
        return []

    return [to_naive_local_datetime(occurrence) for occurrence in occurrences]


def overlaps(start: datetime, end: datetime, day_start: datetime, day_end: datetime) -> bool:
    if start == end:
        return day_start <= start < day_end
    return start < day_end and end > day_start


def make_event_id(component: Component, dtstart: datetime, recurring: bool) -> str:
    uid = component.get('UID')
    if uid is None:
        seed = f"{component.get('SUMMARY', '')}|{dtstart.isoformat()}"
        return hashlib.sha1(seed.encode('utf-8')).hexdigest()
    if recurring:
        return f"{uid}/{dtstart:%Y%m%dT%H%M%S}"
    return str(uid)


def build_event(component: Component, event_id: str, start: datetime, duration: timedelta) -> Event:
    return Event(
        id=event_id,
        start=start,
        end=start + duration,
        summary=str(component.get('SUMMARY', '')),
        location=str(component.get('LOCATION', '')),
        description=str(component.get('DESCRIPTION', '')),
    )


def parse_events(content: bytes | str, day_start: datetime, day_end: datetime) -> list[Event]:
    """Parse an iCalendar document into the events overlapping a time window.

    Recurring events are expanded inside the window and instances replaced by
    a RECURRENCE-ID override are dropped in favour of the override.

    Args:
        content: Raw iCalendar document
        day_start: Start of the window, naive local time
        day_end: End of the window (exclusive), naive local time

    Returns:
        Events in feed order, not sorted

    Raises:
        ParseError: If the document is not valid iCalendar
    """
    if isinstance(content, bytes):
        content = content.decode('utf-8-sig', 'replace')
    if not content.strip():
        logging.warning("Calendar feed is empty.")
        return []

    try:
        calendar = Calendar.from_ical(content)
    except Exception as e:
        raise ParseError(f"Cannot parse calendar feed: {e}") from e

    try:
        vevents = calendar.walk('VEVENT')

        overridden: set[tuple[str, datetime]] = set()
        for component in vevents:
            rid = extract_datetime(component, 'RECURRENCE-ID')
            if rid is not None and component.get('UID') is not None:
                overridden.add((str(component['UID']), rid))

        events: list[Event] = []
        for component in vevents:
            dtstart = extract_datetime(component, 'DTSTART')
            if dtstart is None:
                logging.warning(f"Event {component.get('UID')} has no DTSTART, skipped.")
                continue
            duration = event_duration(component, dtstart)

            rid = extract_datetime(component, 'RECURRENCE-ID')
            if rid is not None:
                if overlaps(dtstart, dtstart + duration, day_start, day_end):
                    events.append(build_event(component, make_event_id(component, rid, True), dtstart, duration))
                continue

            recurring = bool(component.get('RRULE') or component.get('RDATE'))
            uid = str(component.get('UID', ''))
            for occurrence in get_occurrences_in_range(component, day_start - max(duration, timedelta(0)), day_end):
                if recurring and (uid, occurrence) in overridden:
                    continue
                if not overlaps(occurrence, occurrence + duration, day_start, day_end):
                    continue
                events.append(build_event(component, make_event_id(component, occurrence, recurring), occurrence, duration))
    except Exception as e:
        raise ParseError(f"Cannot read calendar events: {e}") from e

    return events
