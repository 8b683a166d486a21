"""
Module 'payments' (feature-first): point d'entrée public.
Réunit la délégation au paiement externe (deep link) et le rapprochement au retour.
"""

from .models import PaymentStatus, PaymentSession
from .handoff import to_minor_units, build_callback_urls, build_deep_link, start_checkout
from .reconciler import ReturnOutcome, RETURN_PARAMS, read_marker, handle_return

__all__ = [
    # models
    "PaymentStatus",
    "PaymentSession",
    # handoff
    "to_minor_units",
    "build_callback_urls",
    "build_deep_link",
    "start_checkout",
    # reconciler
    "ReturnOutcome",
    "RETURN_PARAMS",
    "read_marker",
    "handle_return",
]
