"""
Gestionnaires d'exceptions du terminal.
- Web (formulaires de la page caisse): redirection 303 vers / avec le message en ?error= (catégorie conservée).
- API (/api/*): JSON {"detail": ...} pour les clients programmatiques.
- ValidationError => 400, autres PosError (backend WooCommerce) => 502.
"""
import logging
import urllib.parse
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from pos_backend.errors import PosError, ValidationError

logger = logging.getLogger(__name__)

def _is_api(request: Request) -> bool:
    return request.url.path.startswith("/api/")

def register_exception_handlers(app: FastAPI) -> None:
    """
    Enregistre le handler PosError.
    - UX web: l'opérateur reste sur la caisse et voit le message bloquant.
    - UX API: code et body JSON standards.
    """
    @app.exception_handler(PosError)
    async def pos_error_handler(request: Request, exc: PosError):
        status_code = 400 if isinstance(exc, ValidationError) else 502
        if status_code == 502:
            logger.warning("PosError %s sur %s: %s", type(exc).__name__, request.url.path, exc.message)
        if not _is_api(request):
            params = {}
            category = request.query_params.get("category")
            if category:
                # L'opérateur reste sur la catégorie en cours
                params["category"] = category
            params["error"] = exc.message or "Erreur"
            return RedirectResponse(url=f"/?{urllib.parse.urlencode(params)}", status_code=HTTP_303_SEE_OTHER)
        return JSONResponse(status_code=status_code, content={"detail": exc.message, "error": type(exc).__name__})
