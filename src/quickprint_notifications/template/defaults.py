"""Built-in QuickPrint message templates (English)."""

from __future__ import annotations

from quickprint_core.events import EventKind

from ..delivery import NotificationChannel
from ..ports.renderer import NotificationTemplate
from .providers.memory import InMemoryTemplateProvider
from .registry import TemplateRegistry

_HTML_WRAPPER = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8"><title>QuickPrint</title></head>
<body style="margin:0;padding:0;font-family:Arial,sans-serif;background-color:#f3f4f6;">
<table role="presentation" style="max-width:600px;margin:0 auto;background:white;">
<tr><td style="background:#7c3aed;padding:32px;text-align:center;color:white;font-size:24px;font-weight:bold;">QuickPrint</td></tr>
<tr><td style="padding:40px 32px;">{content}</td></tr>
<tr><td style="background:#f9fafb;padding:24px 32px;text-align:center;color:#6b7280;font-size:14px;">Your trusted campus printing partner.</td></tr>
</table>
</body>
</html>"""


def _html(content: str) -> str:
    return _HTML_WRAPPER.replace("{content}", content)


def _sms(kind: EventKind, body: str) -> tuple[str, NotificationTemplate]:
    return kind.value, NotificationTemplate(
        template_id=f"{kind.value}.sms",
        channel=NotificationChannel.SMS,
        body_template=body,
    )


def _push(kind: EventKind, title: str, body: str) -> tuple[str, NotificationTemplate]:
    return kind.value, NotificationTemplate(
        template_id=f"{kind.value}.push",
        channel=NotificationChannel.PUSH,
        subject_template=title,
        body_template=body,
    )


def _email(
    kind: EventKind, subject: str, text: str, html: str
) -> tuple[str, NotificationTemplate]:
    return kind.value, NotificationTemplate(
        template_id=f"{kind.value}.email",
        channel=NotificationChannel.EMAIL,
        subject_template=subject,
        body_template=text,
        html_template=_html(html),
    )


DEFAULT_TEMPLATES: tuple[tuple[str, NotificationTemplate], ...] = (
    # order.created goes to the shop owner
    _sms(
        EventKind.ORDER_CREATED,
        "📋 New Order: {{ order_number }}. Open QuickPrint to accept.",
    ),
    _push(EventKind.ORDER_CREATED, "New Order! 🔔", "New order: {{ order_number }}"),
    _sms(
        EventKind.ORDER_CONFIRMED,
        "✅ Order {{ order_number }} confirmed"
        "{% if shop_name %} by {{ shop_name }}{% endif %}.",
    ),
    _push(
        EventKind.ORDER_CONFIRMED,
        "Order Confirmed ✅",
        "Order {{ order_number }} confirmed",
    ),
    _email(
        EventKind.ORDER_CONFIRMED,
        "Order Confirmed - {{ order_number }}",
        "Your order {{ order_number }} has been confirmed"
        "{% if shop_name %} by {{ shop_name }}{% endif %}."
        "{% if total_cost is not none %} Total: ₹{{ total_cost }}{% endif %}",
        "<h2>Order Confirmed!</h2><p>{{ order_number }} confirmed"
        "{% if shop_name %} by {{ shop_name }}{% endif %}."
        "{% if total_cost is not none %} Total: ₹{{ total_cost }}{% endif %}</p>",
    ),
    _sms(
        EventKind.ORDER_READY,
        "🎉 Order {{ order_number }} is ready"
        "{% if shop_name %} at {{ shop_name }}{% endif %}!",
    ),
    _push(EventKind.ORDER_READY, "Order Ready! 🎉", "Order {{ order_number }} is ready"),
    _email(
        EventKind.ORDER_READY,
        "Order Ready - {{ order_number }}",
        "Your order {{ order_number }} is ready for pickup"
        "{% if shop_name %} at {{ shop_name }}{% endif %}.",
        "<h2>Order Ready!</h2><p>{{ order_number }} is ready"
        "{% if shop_name %} at {{ shop_name }}{% endif %}</p>",
    ),
    _sms(
        EventKind.ORDER_CANCELLED,
        "❌ Order {{ order_number }} cancelled."
        "{% if reason %} Reason: {{ reason }}{% endif %}",
    ),
    _push(
        EventKind.ORDER_CANCELLED,
        "Order Cancelled ❌",
        "Order {{ order_number }} cancelled",
    ),
    _sms(
        EventKind.PAYMENT_SUCCESS,
        "💰 Payment of ₹{{ amount_display }} received for {{ order_number }}.",
    ),
    _email(
        EventKind.PAYMENT_SUCCESS,
        "Payment Receipt - {{ order_number }}",
        "We received ₹{{ amount_display }} for {{ order_number }}. "
        "Payment reference: {{ payment_id }}.",
        "<h2>Payment Received</h2><p>₹{{ amount_display }} for {{ order_number }}</p>"
        "<p>Payment reference: {{ payment_id }}</p>",
    ),
    _sms(
        EventKind.PAYMENT_FAILED,
        "⚠️ Payment for {{ order_number }} failed: {{ reason }}. "
        "Please try again in QuickPrint.",
    ),
    _push(
        EventKind.PAYMENT_FAILED,
        "Payment Failed ⚠️",
        "Payment for {{ order_number }} failed",
    ),
    _email(
        EventKind.SHOP_REGISTERED,
        "Welcome to QuickPrint!",
        "Welcome, {{ recipient_name or business_name }}! "
        "{{ business_name }} is now registered. Start printing today.",
        "<h2>Welcome, {{ recipient_name or business_name }}!</h2>"
        "<p>{{ business_name }} is now registered. Start printing today.</p>",
    ),
)


def default_template_registry() -> TemplateRegistry:
    """Registry preloaded with every built-in template."""
    return TemplateRegistry(InMemoryTemplateProvider(DEFAULT_TEMPLATES))
