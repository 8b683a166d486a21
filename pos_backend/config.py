# pos_backend.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

TEMPLATES_DIR = BASE_DIR / "templates"

"""
Configuration centrale du terminal de caisse.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise l'URL de l'API WooCommerce et la paire de clés (consumer key/secret)
- Expose les paramètres du paiement externe (schéma deep link Zettle, devise)
- Paramètres de pagination du catalogue et timeouts HTTP
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _int_env(name: str, default: int) -> int:
    try:
        return int(_clean_env(os.getenv(name) or "") or default)
    except ValueError:
        return default

# WooCommerce: URL de l'API REST (ex: https://boutique.example/wp-json/wc/v3)
# - Accepte aussi les noms REACT_APP_* hérités du front historique
WC_API_URL = _clean_env(os.getenv("WC_API_URL") or os.getenv("REACT_APP_WC_API_URL") or "")
WC_CONSUMER_KEY = _clean_env(os.getenv("WC_CONSUMER_KEY") or os.getenv("REACT_APP_WC_CONSUMER_KEY") or "")
WC_CONSUMER_SECRET = _clean_env(os.getenv("WC_CONSUMER_SECRET") or os.getenv("REACT_APP_WC_CONSUMER_SECRET") or "")

if WC_API_URL and not WC_API_URL.startswith("http"):
    WC_API_URL = "https://" + WC_API_URL
WC_API_URL = WC_API_URL.rstrip("/")

# Catalogue: taille de page imposée par l'API et garde-fou sur le nombre de pages
CATALOG_PER_PAGE = _int_env("CATALOG_PER_PAGE", 100)
CATALOG_MAX_PAGES = _int_env("CATALOG_MAX_PAGES", 50)
HTTP_TIMEOUT_SECONDS = float(_clean_env(os.getenv("HTTP_TIMEOUT_SECONDS") or "") or 15)

# Paiement externe (application Zettle via deep link)
PAYMENT_APP_SCHEME = _clean_env(os.getenv("PAYMENT_APP_SCHEME") or "iZettle")
PAYMENT_CURRENCY = _clean_env(os.getenv("PAYMENT_CURRENCY") or "GBP").upper()
PAYMENT_METHOD = _clean_env(os.getenv("PAYMENT_METHOD") or "zettle")
PAYMENT_METHOD_TITLE = _clean_env(os.getenv("PAYMENT_METHOD_TITLE") or "Zettle")

# Origine publique du terminal pour les URLs de retour (sinon déduite de la requête)
PUBLIC_BASE_URL = _clean_env(os.getenv("PUBLIC_BASE_URL") or "").rstrip("/")

# Image de repli quand un produit n'a pas d'image
PLACEHOLDER_IMAGE_URL = os.getenv("PLACEHOLDER_IMAGE_URL", "https://via.placeholder.com/150")

# Cookies/ Sécurité
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]
