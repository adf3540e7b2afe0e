import os
from dotenv import load_dotenv

# Loads .env from the project root
load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tableside.db")
ENV = os.getenv("ENV", "dev")
ENV_NORMALIZED = ENV.lower()
IS_DEV = ENV_NORMALIZED in {"dev", "development", "local"}
IS_TEST = ENV_NORMALIZED == "test"
IS_STAGE = ENV_NORMALIZED in {"stage", "staging", "homolog"}
IS_PROD = ENV_NORMALIZED in {"prod", "production"}

# CORS
_cors_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS = [origin.strip() for origin in _cors_env.split(",") if origin.strip() and origin.strip() != "*"]

if not CORS_ORIGINS and IS_DEV:
    CORS_ORIGINS = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

# Session (signed cookie)
SESSION_SECRET = os.getenv("SESSION_SECRET", "")
if not SESSION_SECRET and (IS_DEV or IS_TEST):
    SESSION_SECRET = "tableside-dev-secret"
SESSION_MAX_AGE_SECONDS = int(os.getenv("SESSION_MAX_AGE_SECONDS", str(24 * 60 * 60)))
SESSION_COOKIE_SECURE = _flag("SESSION_COOKIE_SECURE", "0" if (IS_DEV or IS_TEST) else "1")
SESSION_COOKIE_HTTPONLY = _flag("SESSION_COOKIE_HTTPONLY", "1")
SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "lax").strip().lower()
if SESSION_COOKIE_SAMESITE not in {"lax", "strict", "none"}:
    SESSION_COOKIE_SAMESITE = "lax"
# Browsers reject SameSite=None without Secure.
if SESSION_COOKIE_SAMESITE == "none" and not SESSION_COOKIE_SECURE:
    SESSION_COOKIE_SAMESITE = "lax"
SESSION_COOKIE_DOMAIN = os.getenv("SESSION_COOKIE_DOMAIN", "").strip() or None

# Uploads
UPLOADS_DIR = os.getenv("UPLOADS_DIR", "uploads")
UPLOADS_URL_PREFIX = "/uploads"
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

# Orders
ORDER_STATUS_POLICY = os.getenv("ORDER_STATUS_POLICY", "permissive").strip().lower()
if ORDER_STATUS_POLICY not in {"permissive", "strict"}:
    ORDER_STATUS_POLICY = "permissive"
ORDERS_PUBLIC_LISTING = _flag("ORDERS_PUBLIC_LISTING", "0")

# Polling contract
ORDERS_POLL_INTERVAL_MS = int(os.getenv("ORDERS_POLL_INTERVAL_MS", "2000"))
MENU_POLL_INTERVAL_MS = int(os.getenv("MENU_POLL_INTERVAL_MS", "3000"))

# Seed data
SEED_DEFAULT_MENU = _flag("SEED_DEFAULT_MENU", "1")
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin").strip() or "admin"
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "").strip()
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@restaurant.com").strip() or "admin@restaurant.com"
ADMIN_FULL_NAME = os.getenv("ADMIN_FULL_NAME", "Administrator").strip() or "Administrator"
RESET_ADMIN_PASSWORD = _flag("RESET_ADMIN_PASSWORD", "0")
