"""Exception taxonomy shared by the store, the tracker and the HTTP layer.

A missing entity is not an error: lookups return ``None``.
"""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for every error raised by the tracking core."""


class ValidationError(TrackerError):
    """Malformed input, rejected before any write takes place."""


class ReferentialError(TrackerError):
    """A record points at a parent record that does not exist."""


class IOFailure(TrackerError):
    """A durable read or write could not complete.

    The previously persisted state is left intact.
    """
