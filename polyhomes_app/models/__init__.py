# polyhomes_app/models/__init__.py
# -*- coding: utf-8 -*-
from .user import User
from .quote import Quote
from .payment import Payment
from .contact import ContactMessage


__all__ = [
    "User",
    "Quote",
    "Payment",
    "ContactMessage",
]
