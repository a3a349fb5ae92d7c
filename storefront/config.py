# storefront.config
from pathlib import Path
import os
from decimal import Decimal, InvalidOperation
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale du backend de la boutique.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs Supabase, la sécurité cookies, CORS/hosts
- Expose les paramètres du tunnel d'achat (remise, délai de paiement simulé, timeout data)
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _float_env(name: str, default: float) -> float:
    raw = _clean_env(os.getenv(name) or "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default

def _rate_env(name: str, default: str) -> Decimal:
    """Taux décimal dans [0, 1]; valeur absente, illisible ou hors bornes -> défaut."""
    raw = _clean_env(os.getenv(name) or "")
    try:
        rate = Decimal(raw)
    except InvalidOperation:
        return Decimal(default)
    if not rate.is_finite() or not (0 <= rate <= 1):
        return Decimal(default)
    return rate

# Supabase: URL et clés (anon)
# - SUPABASE_URL peut parfois être sans schéma: on préfixe en https:// si nécessaire
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or os.getenv("VITE_SUPABASE_URL") or "")
SUPABASE_KEY = _clean_env(os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or SUPABASE_KEY)

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Cookies / sécurité
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")
SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY", "replace_me_with_a_long_random_secret")

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

# Pages du front utilisées pour les redirections HTML (401 -> login, panier vide -> cart)
LOGIN_PAGE_PATH = os.getenv("LOGIN_PAGE_PATH", "/login")
CART_PAGE_PATH = os.getenv("CART_PAGE_PATH", "/cart")

# Tunnel d'achat
# - Remise promotionnelle fixe appliquée à tout panier
# - Délai simulant l'aller-retour vers une passerelle de paiement
# - Borne de temps sur chaque appel PostgREST
CART_DISCOUNT_RATE = _rate_env("CART_DISCOUNT_RATE", "0.10")
PAYMENT_SIMULATED_DELAY_SECONDS = _float_env("PAYMENT_SIMULATED_DELAY_SECONDS", 2.0)
DATA_ACCESS_TIMEOUT_SECONDS = _float_env("DATA_ACCESS_TIMEOUT_SECONDS", 10.0)

# Rate limiting (fastapi-limiter)
RATE_LIMIT_REDIS_URL = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
