from __future__ import annotations


class MeetError(ValueError):
    """Base class for caller errors raised by the meet engine."""


class UnknownEventError(MeetError):
    def __init__(self, event_id: int):
        super().__init__(f"Event {event_id} is not loaded.")
        self.event_id = event_id


class InvalidDirectionError(MeetError):
    def __init__(self, direction: str):
        super().__init__(f"Unknown move direction: {direction!r} (expected 'up' or 'down').")
        self.direction = direction


class RosterImportError(MeetError):
    """Raised when a roster file cannot be parsed as supported Excel."""
