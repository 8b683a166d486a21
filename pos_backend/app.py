# module pos_backend.app
"""
Instance globale de l'application (construite par la factory).
Toute la configuration (middlewares, routers, lifespan, handlers) est centralisée dans app_setup.
"""
from pos_backend.app_setup.factory import create_app

# App globale
app = create_app()
