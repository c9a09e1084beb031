"""Tests for MetadataSanitizer."""

from __future__ import annotations

from quickprint_notifications.sanitization import MetadataSanitizer, default_sanitizer


def test_contact_details_are_hashed_consistently() -> None:
    first = default_sanitizer.sanitize({"recipient": "+919800000001"})
    second = default_sanitizer.sanitize({"Recipient": "+919800000001"})
    assert first["recipient"].startswith("sha256:")
    assert len(first["recipient"]) == len("sha256:") + 16
    assert first["recipient"] == second["Recipient"]
    assert "+919800000001" not in str(first)


def test_credentials_are_redacted() -> None:
    result = default_sanitizer.sanitize(
        {"auth_token": "abc", "nested": {"password": "pw"}, "status": "delivered"}
    )
    assert result == {"auth_token": "***", "nested": {"password": "***"}, "status": "delivered"}


def test_lists_and_none_values() -> None:
    result = default_sanitizer.sanitize({"email": ["a@x.com", None], "error": None})
    assert result["email"][0].startswith("sha256:")
    assert result["email"][1] is None
    assert result["error"] is None


def test_custom_redact_fields_and_mask() -> None:
    sanitizer = MetadataSanitizer(redact_fields={"order_note"})
    assert sanitizer.sanitize({"order_note": "gift"}) == {"order_note": "***"}
    assert sanitizer.mask("phone", "+919800000001").startswith("sha256:")
    assert sanitizer.mask("status", "ok") == "ok"
