"""
Event model shared by the parser, the cache and the output handlers
"""
from dataclasses import asdict, dataclass
from datetime import datetime


@dataclass(frozen=True)
class Event:
    """A calendar event resolved to naive local time.

    Equality of two events for the purpose of the agenda is decided by `id`
    alone, see `icsagenda.window.same_event`.
    """

    id: str
    start: datetime
    end: datetime
    summary: str = ''
    location: str = ''
    description: str = ''

    def to_dict(self) -> dict[str, str]:
        data = asdict(self)
        data['start'] = self.start.isoformat()
        data['end'] = self.end.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Event':
        """Build an event from `to_dict` output.

        Raises:
            KeyError: If a required field is missing
            ValueError: If a datetime is not ISO formatted
            TypeError: If a field has the wrong type
        """
        return cls(
            id=str(data['id']),
            start=datetime.fromisoformat(data['start']),
            end=datetime.fromisoformat(data['end']),
            summary=data.get('summary') or '',
            location=data.get('location') or '',
            description=data.get('description') or '',
        )
