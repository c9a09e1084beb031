"""IBackgroundWorker — start/drain lifecycle shared by consumers and the worker process."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IBackgroundWorker(Protocol):
    """
    Long-running component that can be drained on shutdown.

    Implemented by ``EventConsumer`` and ``NotificationWorker``.
    """

    async def start(self) -> None:
        """Begin work; returns once running."""
        ...

    async def stop(self) -> bool:
        """Stop taking new work and finish what is in flight.

        Returns ``False`` when in-flight work had to be abandoned.
        """
        ...
