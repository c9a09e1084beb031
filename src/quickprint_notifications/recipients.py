"""Recipient contact details and directory adapters."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from quickprint_core.correlation import get_correlation_id
from quickprint_core.exceptions import PermanentError, TransientError

from .delivery import NotificationChannel
from .ports.directory import IRecipientDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recipient:
    """Resolved recipient information."""

    user_id: str
    name: str | None = None
    phone: str | None = None
    email: str | None = None
    push_token: str | None = None
    locale: str = "en"
    opted_out: frozenset[NotificationChannel] = frozenset()

    def address_for(self, channel: NotificationChannel) -> str | None:
        """Address for *channel*, or ``None`` if missing or opted out."""
        if channel in self.opted_out:
            return None
        if channel is NotificationChannel.SMS:
            return self.phone or None
        if channel is NotificationChannel.EMAIL:
            return self.email or None
        return self.push_token or None

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> Recipient:
        """Build from the JSON shape of the contact endpoint (camelCase)."""
        opted_out: set[NotificationChannel] = set()
        for value in data.get("optedOut") or data.get("opted_out") or []:
            try:
                opted_out.add(NotificationChannel(value))
            except ValueError:
                logger.debug(f"Ignoring unknown opt-out channel {value!r}")
        return cls(
            user_id=str(data.get("userId") or data.get("user_id") or data.get("id") or ""),
            name=data.get("name"),
            phone=data.get("phone"),
            email=data.get("email"),
            push_token=data.get("pushToken") or data.get("push_token"),
            locale=data.get("locale") or "en",
            opted_out=frozenset(opted_out),
        )


class InMemoryRecipientDirectory(IRecipientDirectory):
    """Fixture-backed directory for tests and local runs."""

    def __init__(
        self,
        users: dict[str, Recipient] | None = None,
        shop_owners: dict[str, str] | None = None,
    ) -> None:
        self._users: dict[str, Recipient] = dict(users or {})
        # shop_id -> owner user_id
        self._shop_owners: dict[str, str] = dict(shop_owners or {})

    def add_user(self, recipient: Recipient) -> None:
        self._users[recipient.user_id] = recipient

    def add_shop(self, shop_id: str, owner: Recipient) -> None:
        self.add_user(owner)
        self._shop_owners[shop_id] = owner.user_id

    async def get_user(self, user_id: str) -> Recipient | None:
        return self._users.get(user_id)

    async def get_shop_owner(self, shop_id: str) -> Recipient | None:
        owner_id = self._shop_owners.get(shop_id)
        return self._users.get(owner_id) if owner_id else None

    async def aclose(self) -> None:
        return None


class HttpRecipientDirectory(IRecipientDirectory):
    """
    Looks up contacts through the API's internal recipient endpoints.

    ``GET {base_url}/internal/recipients/users/{user_id}`` and
    ``GET {base_url}/internal/recipients/shops/{shop_id}/owner``.
    404 means unknown; 429, 5xx and transport errors raise
    ``TransientError``; other 4xx raise ``PermanentError``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json", "User-Agent": "quickprint-worker"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def get_user(self, user_id: str) -> Recipient | None:
        return await self._fetch(f"/internal/recipients/users/{user_id}")

    async def get_shop_owner(self, shop_id: str) -> Recipient | None:
        return await self._fetch(f"/internal/recipients/shops/{shop_id}/owner")

    async def _fetch(self, path: str) -> Recipient | None:
        headers = {"X-Correlation-ID": get_correlation_id() or ""}
        try:
            response = await self._client.get(path, headers=headers)
        except httpx.HTTPError as e:
            raise TransientError(f"Recipient directory unreachable: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code == 429 or response.status_code >= 500:
            raise TransientError(
                f"Recipient directory returned HTTP {response.status_code} for {path}"
            )
        if response.status_code >= 400:
            raise PermanentError(
                f"Recipient directory rejected {path}: HTTP {response.status_code}"
            )
        try:
            data = response.json()
        except ValueError as e:
            raise TransientError(f"Recipient directory sent invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise PermanentError(f"Unexpected recipient payload for {path}")
        return Recipient.from_mapping(data)

    async def aclose(self) -> None:
        await self._client.aclose()
