"""Messaging-specific exceptions for quickprint-messaging."""

from __future__ import annotations

from quickprint_core.exceptions import InfrastructureError


class MessagingError(InfrastructureError):
    """Base class for all messaging-related infrastructure errors."""


class PublishError(MessagingError):
    """Raised when an envelope could not be durably published.

    Covers an unreachable broker, a closed channel, an unroutable or returned
    message, and serialization failures.
    """


class MessagingConnectionError(MessagingError):
    """Raised when connectivity to the message broker fails."""


class NotConnectedError(MessagingConnectionError, PublishError):
    """Raised immediately when the broker connection is not CONNECTED."""


class MessagingSerializationError(MessagingError):
    """Raised when message serialization or deserialization fails."""
