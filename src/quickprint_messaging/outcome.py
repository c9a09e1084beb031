"""Outcome — how a delivery attempt is settled with the broker."""

from __future__ import annotations

from enum import Enum

from quickprint_core.exceptions import PermanentError

from .exceptions import MessagingSerializationError


class Outcome(str, Enum):
    """Settlement of one delivery attempt."""

    ACK = "ack"
    RETRY = "nack-requeue"
    DISCARD = "nack-discard"


def classify_failure(exc: BaseException) -> Outcome:
    """Map a handler failure to an outcome.

    ``PermanentError`` and undecodable envelopes are discarded;
    ``TransientError`` and unclassified exceptions are retried, bounded by
    the retry limit.
    """
    if isinstance(exc, (PermanentError, MessagingSerializationError)):
        return Outcome.DISCARD
    return Outcome.RETRY
