# phone.py
# -*- coding: utf-8 -*-
"""Kenyan mobile number rules for M-Pesa payments."""
from __future__ import annotations
import re

# 07XXXXXXXX / 01XXXXXXXX, 254[17]XXXXXXXX, +254[17]XXXXXXXX
PHONE_RE = re.compile(r"^(0[17]\d{8}|\+?254[17]\d{8})$")
COUNTRY_CODE = "254"


class InvalidPhoneFormat(ValueError):
    pass


def _compact(raw) -> str:
    return re.sub(r"\s+", "", str(raw or ""))


def is_valid_phone(raw) -> bool:
    return bool(PHONE_RE.match(_compact(raw)))


def normalize_phone(raw) -> str:
    """Returns the number as ``254XXXXXXXXX`` (12 digits) or raises InvalidPhoneFormat."""
    phone = _compact(raw)
    if not PHONE_RE.match(phone):
        raise InvalidPhoneFormat(
            "Invalid phone number format. Use 2547XXXXXXXX or 07XXXXXXXX"
        )
    if phone.startswith("+"):
        phone = phone[1:]
    elif phone.startswith("0"):
        phone = COUNTRY_CODE + phone[1:]
    return phone
