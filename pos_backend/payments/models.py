# module pos_backend.payments.models
from enum import Enum
from typing import Any, Dict, List, Union


class PaymentStatus(str, Enum):
    IDLE = "idle"
    SUCCESS = "success"
    FAILED = "failed"


class PaymentSession:
    """
    Tentative de paiement en cours de délégation à l'application externe.
    Vit uniquement entre le checkout et le retour (jamais persistée).
    """

    def __init__(
        self,
        reference: str,
        amount: int,
        currency: str,
        success_url: str,
        failure_url: str,
        deep_link: str,
        cart_snapshot: List[Union[int, str]],
    ):
        self.reference = reference
        self.amount = amount
        self.currency = currency
        self.success_url = success_url
        self.failure_url = failure_url
        self.deep_link = deep_link
        self.cart_snapshot = list(cart_snapshot)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reference": self.reference,
            "amount": self.amount,
            "currency": self.currency,
            "success_url": self.success_url,
            "failure_url": self.failure_url,
            "deep_link": self.deep_link,
        }
