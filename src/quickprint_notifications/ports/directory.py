"""Recipient directory port."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..recipients import Recipient


@runtime_checkable
class IRecipientDirectory(Protocol):
    """
    Resolves contact details for the people an event concerns.

    The worker never queries the relational store directly; implementations
    call the API's internal contact endpoint or hold fixtures.
    Unreachable backends raise ``TransientError``.
    """

    async def get_user(self, user_id: str) -> Recipient | None:
        """Customer by user id, or ``None`` if unknown."""
        ...

    async def get_shop_owner(self, shop_id: str) -> Recipient | None:
        """Owner of *shop_id*, or ``None`` if unknown."""
        ...

    async def aclose(self) -> None: ...
