"""
Taxonomie des erreurs du terminal.
- NetworkError: backend injoignable ou réponse HTTP en échec (transitoire).
- MalformedResponseError: le backend viole son contrat (JSON invalide, pas une liste...).
- ValidationError: précondition locale non respectée (ex: panier vide au checkout).
- InvalidPriceError: prix produit non exploitable (sous-cas de ValidationError).
- SyncError: l'écriture de la commande a échoué APRÈS un paiement réussi.
  Ne doit jamais être confondue avec un échec de paiement.
"""
from typing import Optional


class PosError(Exception):
    """Erreur de base du terminal (message lisible par l'opérateur)."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class NetworkError(PosError):
    pass


class MalformedResponseError(PosError):
    pass


class ValidationError(PosError):
    pass


class InvalidPriceError(ValidationError):
    def __init__(self, product_id, price):
        super().__init__(f"Prix invalide pour le produit {product_id}: {price!r}")
        self.product_id = product_id
        self.price = price


class SyncError(PosError):
    def __init__(self, message: str, reference: Optional[str] = None):
        super().__init__(message)
        self.reference = reference
