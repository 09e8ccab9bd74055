from enum import Enum
from dataclasses import dataclass


class EventType(Enum):
    DECREMENT_BACKOFF = 'Decrement Backoff'
    START_TRANSMIT = 'Start TX'
    END_TRANSMIT = 'End TX'

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Event:
    """
    A pending action of one station

    Events are immutable once created, the scheduler owns them until they are dispatched.

    Attributes:
        kind: what the station should do
        station_id: identifier of the station that handles the event
        time: scheduled time, in simulated microseconds
        epoch: backoff epoch of the station when a DecrementBackoff was issued, ticks from an older epoch are stale
    """

    kind: EventType
    station_id: int
    time: int
    epoch: int = 0

    def __post_init__(self):
        if not isinstance(self.kind, EventType):
            raise ValueError('Unknown event kind: %r' % (self.kind,))
        if isinstance(self.time, bool) or not isinstance(self.time, int) or self.time < 0:
            raise ValueError('Event time must be a non-negative integer, got %r' % (self.time,))

    def __str__(self):
        return '%s for station %s at %s' % (self.kind, self.station_id, self.time)
