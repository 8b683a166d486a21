# module pos_backend.utils.urls
from typing import Iterable, Optional
from urllib.parse import urlencode

from fastapi import Request

from pos_backend.config import PUBLIC_BASE_URL

def request_origin(request: Request) -> str:
    """Origine publique du terminal: PUBLIC_BASE_URL si défini, sinon déduite de la requête."""
    return PUBLIC_BASE_URL or str(request.base_url).rstrip("/")

def url_without_params(request: Request, drop: Iterable[str]) -> str:
    """Chemin courant sans les paramètres listés (les autres sont conservés)."""
    dropped = set(drop)
    kept = [(k, v) for k, v in request.query_params.multi_items() if k not in dropped]
    return request.url.path + (f"?{urlencode(kept)}" if kept else "")

def home_url(category: Optional[str] = None) -> str:
    return f"/?{urlencode({'category': category})}" if category else "/"
