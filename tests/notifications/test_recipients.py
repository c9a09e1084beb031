"""Tests for Recipient and the recipient directories."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from quickprint_core.correlation import correlation_scope
from quickprint_core.exceptions import PermanentError, TransientError
from quickprint_notifications.delivery import NotificationChannel
from quickprint_notifications.recipients import (
    HttpRecipientDirectory,
    InMemoryRecipientDirectory,
    Recipient,
)

USER_JSON = {
    "userId": "u-1",
    "name": "Asha",
    "phone": "+919800000001",
    "email": "asha@example.com",
    "pushToken": "device-token-1",
    "optedOut": ["push", "carrier-pigeon"],
}


def test_from_mapping_reads_camel_case() -> None:
    recipient = Recipient.from_mapping(USER_JSON)
    assert recipient.user_id == "u-1"
    assert recipient.push_token == "device-token-1"
    assert recipient.opted_out == {NotificationChannel.PUSH}
    assert recipient.address_for(NotificationChannel.PUSH) is None
    assert recipient.address_for(NotificationChannel.SMS) == "+919800000001"


def test_empty_address_counts_as_missing() -> None:
    recipient = Recipient(user_id="u-1", email="")
    assert recipient.address_for(NotificationChannel.EMAIL) is None


@pytest.mark.asyncio
async def test_in_memory_directory_resolves_shop_owner() -> None:
    directory = InMemoryRecipientDirectory()
    directory.add_shop("s-1", Recipient(user_id="u-9", name="Ravi"))
    owner = await directory.get_shop_owner("s-1")
    assert owner is not None and owner.name == "Ravi"
    assert await directory.get_shop_owner("s-404") is None
    assert await directory.get_user("u-9") == owner


def _directory(handler: Callable[[httpx.Request], httpx.Response]) -> HttpRecipientDirectory:
    return HttpRecipientDirectory(
        "https://api.quickprint.test/",
        token="internal-token",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_http_directory_fetches_user() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=USER_JSON)

    directory = _directory(handler)
    with correlation_scope("c-42"):
        recipient = await directory.get_user("u-1")
    await directory.aclose()

    assert recipient is not None and recipient.email == "asha@example.com"
    request = seen[0]
    assert request.url.path == "/internal/recipients/users/u-1"
    assert request.headers["Authorization"] == "Bearer internal-token"
    assert request.headers["X-Correlation-ID"] == "c-42"


@pytest.mark.asyncio
async def test_http_directory_shop_owner_path() -> None:
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(200, json={"userId": "u-9", "name": "Ravi"})

    directory = _directory(handler)
    owner = await directory.get_shop_owner("s-1")
    await directory.aclose()
    assert owner is not None and owner.user_id == "u-9"
    assert paths == ["/internal/recipients/shops/s-1/owner"]


@pytest.mark.asyncio
async def test_http_directory_not_found_is_none() -> None:
    directory = _directory(lambda request: httpx.Response(404))
    assert await directory.get_user("u-404") is None
    await directory.aclose()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "error"), [(503, TransientError), (429, TransientError), (403, PermanentError)]
)
async def test_http_directory_error_classification(status: int, error: type[Exception]) -> None:
    directory = _directory(lambda request: httpx.Response(status))
    with pytest.raises(error):
        await directory.get_user("u-1")
    await directory.aclose()


@pytest.mark.asyncio
async def test_http_directory_unreachable_is_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    directory = _directory(handler)
    with pytest.raises(TransientError, match="unreachable"):
        await directory.get_user("u-1")
    await directory.aclose()


@pytest.mark.asyncio
async def test_http_directory_non_object_payload_is_permanent() -> None:
    directory = _directory(lambda request: httpx.Response(200, json=["u-1"]))
    with pytest.raises(PermanentError):
        await directory.get_user("u-1")
    await directory.aclose()
