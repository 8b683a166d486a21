"""
Construction de l'application caisse (utilisée par pos_backend.app et les tests).
"""
from fastapi import FastAPI
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_security_middleware, register_no_cache_middleware
from .exceptions import register_exception_handlers
from .routes import register_routes
from .routers import register_routers

def create_app() -> FastAPI:
    """
    Étapes, dans l'ordre:
      1. lifespan: état du terminal, catalogue, rate limiter
      2. middlewares CORS/TrustedHost, en-têtes de sécurité, no-cache de la caisse
      3. handler PosError, alias /index.html et favicon
      4. routers page caisse, API /api/v1/pos, health
    """
    app = FastAPI(title="WooZettle POS", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_no_cache_middleware(app)
    register_exception_handlers(app)
    register_routes(app)
    register_routers(app)
    return app
