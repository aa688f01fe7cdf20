"""rangepick — date range selection state machine with synchronized calendars."""

__version__ = "0.1.0"
