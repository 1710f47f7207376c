# polyhomes_app/services/notifications.py
# -*- coding: utf-8 -*-
"""
Best-effort notification sink.

No mail transport is wired up: each notification is rendered, written to the
app log and kept in a bounded in-process outbox (``app.extensions["notification_outbox"]``).
``notify`` never raises; callers may ignore its result.
"""
from __future__ import annotations
from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from flask import current_app

TEMPLATES = {
    "new_quote": (
        "New Quote Request - Expert Polyhomes",
        "New quote received: {windowWidth}m x {windowHeight}m, {meshType} nets. Total: KES {totalPrice}",
    ),
    "payment_confirmation": (
        "Payment Confirmed - Expert Polyhomes",
        "Payment of KES {amount} confirmed. M-Pesa Code: {confirmationCode}",
    ),
    "quote_status_update": (
        "Quote Status Updated - Expert Polyhomes",
        "Quote status updated to: {status}",
    ),
    "contact_form": (
        "New Contact Form Submission - Expert Polyhomes",
        "New message from {name} ({email}): {message}",
    ),
}


@dataclass
class NotificationResult:
    event_type: str
    delivered: bool
    subject: str = ""
    body: str = ""
    error: Optional[str] = None
    created_at: str = field(default_factory=lambda: datetime.utcnow().isoformat(timespec="seconds"))

    def to_dict(self) -> dict:
        return asdict(self)


def init_notifications(app):
    app.extensions["notification_outbox"] = deque(maxlen=app.config.get("NOTIFICATION_OUTBOX_SIZE", 100))


def outbox() -> deque:
    box = current_app.extensions.get("notification_outbox")
    if box is None:
        init_notifications(current_app)
        box = current_app.extensions["notification_outbox"]
    return box


def notify(event_type: str, payload: Mapping[str, Any]) -> NotificationResult:
    try:
        template = TEMPLATES.get(event_type)
        if template is None:
            current_app.logger.warning("Unknown notification type: %s", event_type)
            return NotificationResult(event_type, False, error="unknown event type")

        subject, body = template[0], template[1].format(**payload)
        result = NotificationResult(event_type, True, subject=subject, body=body)
        current_app.logger.info("Email notification [%s]: %s | %s", event_type, subject, body)
        outbox().append(result)
        return result
    except Exception as e:
        current_app.logger.exception("Email sending failed: %s", event_type)
        return NotificationResult(event_type, False, error=str(e))


def recent(limit: int = 50) -> list[NotificationResult]:
    items = list(outbox())
    return list(reversed(items))[:limit]
