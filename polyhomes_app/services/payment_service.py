# polyhomes_app/services/payment_service.py
# -*- coding: utf-8 -*-
"""
Simulated M-Pesa STK push.

``initiate_payment`` records the payment and hands it to the completion
queue; ``complete_payment`` runs later (default 3s) in its own app context
and flips payment + quote in a single commit. There is no provider callback:
completion always succeeds unless storage fails, in which case the payment is
marked ``failed``.
"""
from __future__ import annotations
import time
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation

from apscheduler.jobstores.base import JobLookupError
from flask import current_app

from phone import InvalidPhoneFormat, normalize_phone
from pricing import q2
from ..errors import Forbidden, InvalidPhone, NotFound, ValidationError
from ..extensions import db, scheduler
from ..models import Payment, Quote
from .auth_service import Identity
from .notifications import notify

PAYABLE_QUOTE_STATUSES = ("pending", "confirmed")
JOB_PREFIX = "payment-complete-"
# Payment.amount é Numeric(10, 2)
MAX_AMOUNT = Decimal("99999999.99")


def _job_id(payment_id: int) -> str:
    return f"{JOB_PREFIX}{payment_id}"


def _confirmation_code() -> str:
    return f"MPE{int(time.time() * 1000)}"


# ---------------------------------------------------------------------
# Filas de confirmação
# ---------------------------------------------------------------------
class SchedulerCompletionQueue:
    """One-shot APScheduler ``date`` jobs, one per payment."""

    def __init__(self, app, sched, delay_seconds: float):
        self.app = app
        self.scheduler = sched
        self.delay = float(delay_seconds)

    def schedule(self, payment_id: int) -> str:
        job = self.scheduler.add_job(
            complete_payment,
            "date",
            run_date=datetime.now() + timedelta(seconds=self.delay),
            args=[self.app, payment_id],
            id=_job_id(payment_id),
            replace_existing=True,
            misfire_grace_time=300,
        )
        return job.id

    def cancel(self, payment_id: int) -> bool:
        try:
            self.scheduler.remove_job(_job_id(payment_id))
        except JobLookupError:
            return False
        return True

    def pending(self) -> list[int]:
        jobs = self.scheduler.get_jobs()
        return sorted(int(j.id[len(JOB_PREFIX):]) for j in jobs if j.id.startswith(JOB_PREFIX))


class ManualCompletionQueue:
    """
    Virtual-clock queue: nothing runs until ``advance`` moves the clock past a
    payment's due time. Used by the test suite and for local debugging.
    """

    def __init__(self, app, delay_seconds: float):
        self.app = app
        self.delay = float(delay_seconds)
        self.now = 0.0
        self._due: dict[int, float] = {}

    def schedule(self, payment_id: int) -> str:
        self._due[payment_id] = self.now + self.delay
        return _job_id(payment_id)

    def cancel(self, payment_id: int) -> bool:
        return self._due.pop(payment_id, None) is not None

    def pending(self) -> list[int]:
        return sorted(self._due)

    def advance(self, seconds: float) -> dict[int, str | None]:
        self.now += float(seconds)
        ready = sorted((due, pid) for pid, due in self._due.items() if due <= self.now)
        results = {}
        for _, pid in ready:
            del self._due[pid]
            results[pid] = complete_payment(self.app, pid)
        return results


def init_payments(app):
    delay = app.config.get("PAYMENT_COMPLETION_DELAY", 3)
    backend = (app.config.get("PAYMENT_COMPLETION_BACKEND") or "scheduler").lower()
    if backend == "manual":
        queue = ManualCompletionQueue(app, delay)
    elif backend == "scheduler":
        queue = SchedulerCompletionQueue(app, scheduler, delay)
    else:
        raise RuntimeError(f"Unknown PAYMENT_COMPLETION_BACKEND: {backend}")
    app.extensions["payment_completions"] = queue


def get_completion_queue():
    return current_app.extensions["payment_completions"]


# ---------------------------------------------------------------------
# Operações
# ---------------------------------------------------------------------
def _positive_amount(raw) -> Decimal:
    if raw is None or isinstance(raw, bool) or str(raw).strip() == "":
        raise ValidationError("amount is required")
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        raise ValidationError("amount must be a number")
    if not value.is_finite():
        raise ValidationError("amount must be a number")
    if value > MAX_AMOUNT:
        raise ValidationError(f"amount must be at most {MAX_AMOUNT}")
    value = q2(value)
    if value <= 0:
        raise ValidationError("amount must be at least 0.01")
    return value


def _load_quote(quote_id) -> Quote:
    if quote_id is None or str(quote_id).strip() == "":
        raise ValidationError("quoteId is required")
    try:
        q = db.session.get(Quote, int(quote_id))
    except (TypeError, ValueError):
        q = None
    if q is None:
        raise NotFound("Quote not found")
    return q


def initiate_payment(identity: Identity, quote_id, amount, phone) -> Payment:
    try:
        formatted_phone = normalize_phone(phone)
    except InvalidPhoneFormat as e:
        raise InvalidPhone(str(e))

    value = _positive_amount(amount)
    quote = _load_quote(quote_id)
    if quote.user_id != identity.user_id and not identity.is_admin:
        raise Forbidden("Access denied")

    payment = Payment(
        user_id=identity.user_id,
        quote_id=quote.id,
        amount=value,
        phone=formatted_phone,
        status="initiated",
        provider="mpesa-sim",
    )
    db.session.add(payment)
    db.session.commit()

    get_completion_queue().schedule(payment.id)
    current_app.logger.info("Payment %s initiated for quote %s (KES %s)", payment.id, quote.id, value)
    return payment


def get_payment_status(identity: Identity, payment_id) -> Payment:
    try:
        payment = db.session.get(Payment, int(payment_id))
    except (TypeError, ValueError):
        payment = None
    if payment is None:
        raise NotFound("Payment not found")
    if payment.user_id != identity.user_id and not identity.is_admin:
        raise Forbidden("Access denied")
    return payment


def _mark_failed(payment_id: int, reason: str) -> None:
    try:
        payment = db.session.get(Payment, payment_id)
        if payment is None:
            return
        payment.status = "failed"
        payment.failure_reason = reason[:255]
        payment.completed_at = datetime.utcnow()
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Could not mark payment %s as failed", payment_id)


def complete_payment(app, payment_id: int) -> str | None:
    """Scheduled job body. Returns the resulting payment status (None if skipped)."""
    with app.app_context():
        payment = db.session.get(Payment, payment_id)
        if payment is None:
            current_app.logger.warning("Payment %s vanished before completion", payment_id)
            return None
        if payment.status != "initiated":
            current_app.logger.warning("Payment %s already %s; skipping completion", payment_id, payment.status)
            return None

        try:
            quote = db.session.get(Quote, payment.quote_id)
            if quote is None:
                raise LookupError(f"quote {payment.quote_id} not found")
            payment.status = "completed"
            payment.confirmation_code = _confirmation_code()
            payment.completed_at = datetime.utcnow()
            if quote.status in PAYABLE_QUOTE_STATUSES:
                quote.status = "paid"
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.exception("Error updating payment status for payment %s", payment_id)
            _mark_failed(payment_id, str(e) or e.__class__.__name__)
            return "failed"

        current_app.logger.info("Payment completed for quote %s", payment.quote_id)
        notify("payment_confirmation", {
            "paymentId": payment.id,
            "quoteId": payment.quote_id,
            "amount": float(payment.amount),
            "confirmationCode": payment.confirmation_code,
        })
        return "completed"
