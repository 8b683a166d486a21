"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production, un process manager (ex: uvicorn, hypercorn) importe `pos_backend.asgi:app`.
- Un seul worker et pas de reload: l'état du terminal (panier, paiements en attente) vit dans
  le processus et un redémarrage en cours de paiement perdrait la session à rapprocher.
"""

from pos_backend.app import app

if __name__ == "__main__":
    from pos_backend.__main__ import main
    main()
