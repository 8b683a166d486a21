"""
Registre central des routers (web, API v1, health).
- Web: page caisse et actions de formulaire (pages_views.web_router)
- API v1: état, catalogue, panier, checkout (payments_views.router)
- Health: health_router
"""
from fastapi import FastAPI
from pos_backend.pages import views as pages_views
from pos_backend.payments import views as payments_views
from pos_backend.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l'application.
    - L'ordre n'a pas d'impact sauf conflits de chemins (évités par préfixes).
    """
    # Pages web (HTML)
    app.include_router(pages_views.web_router)
    # API v1
    app.include_router(payments_views.router)
    # Health & monitoring
    app.include_router(health_router)
