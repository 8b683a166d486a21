"""
Lance le terminal de caisse: `python -m pos_backend`.

Variables lues: HOST (défaut 127.0.0.1, la caisse est servie localement au navigateur du terminal),
PORT (8000), LOG_LEVEL (info). Toujours un seul worker: panier et paiement en attente vivent en mémoire.
"""
import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "pos_backend.asgi:app",
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "8000")),
        log_level=os.environ.get("LOG_LEVEL", "info"),
        workers=1,
    )


if __name__ == "__main__":
    main()
