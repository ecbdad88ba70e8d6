# seatwatch/services/errors.py
"""
Failure types raised by the polling pipeline.
shop_poller catches SeatWatchError per shop so one bad shop never stops the run.
"""


class SeatWatchError(Exception):
    """Base class for expected, per-shop failures."""


class FetchError(SeatWatchError):
    """Venue API unreachable, returned a non-2xx status, bad JSON, or an error code."""


class ParseError(SeatWatchError):
    """Layout payload is missing mandatory structure."""


class PersistenceError(SeatWatchError):
    """A snapshot write failed and was rolled back."""
