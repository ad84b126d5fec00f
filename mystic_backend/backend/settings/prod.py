# backend/settings/prod.py
"""
PATH: backend/settings/prod.py

PRODUCTION SETTINGS

Fail closed on anything that would silently break money or chat timing:
- DEBUG forced off, SECRET_KEY + ALLOWED_HOSTS required
- Postgres only (row locks guard wallet debits and session acceptance)
- Shared cache so throttles hold across workers
- Chat pricing and credit packages must be sane
- https-only CORS/CSRF, hardened cookies and headers
"""

from __future__ import annotations

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403
from .base import (  # explicit for Ruff (F405)
    BASE_DIR,
    CHAT_MAX_DURATION_MINUTES,
    CHAT_MIN_DURATION_MINUTES,
    CHAT_RATE_PER_MINUTE_CENTS,
    MIDDLEWARE,
    WALLET_CREDIT_PACKAGES,
    env,
)

DEBUG = False

# ----------------------------
# SECRET KEY / HOSTS
# ----------------------------
SECRET_KEY = (env("SECRET_KEY", default="") or "").strip()
if not SECRET_KEY or SECRET_KEY == "dev-insecure-change-me":
    raise ImproperlyConfigured("SECRET_KEY must be set to a strong value in production.")

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=[])
if not ALLOWED_HOSTS:
    raise ImproperlyConfigured("ALLOWED_HOSTS must be set in production.")

# ----------------------------
# DATABASE (Postgres only)
# ----------------------------
_database_url = (env("DATABASE_URL", default="") or "").strip()
if not _database_url.startswith(("postgres://", "postgresql://", "pgsql://")):
    raise ImproperlyConfigured("DATABASE_URL must point at Postgres in production.")

DATABASES = {"default": env.db("DATABASE_URL")}
DATABASES["default"]["CONN_MAX_AGE"] = env.int("DB_CONN_MAX_AGE", default=60)

# ----------------------------
# CACHE (throttle counters)
# ----------------------------
CACHES = {"default": env.cache("CACHE_URL", default="locmemcache://")}

# ----------------------------
# CHAT / WALLET SANITY
# ----------------------------
if CHAT_RATE_PER_MINUTE_CENTS <= 0:
    raise ImproperlyConfigured("CHAT_RATE_PER_MINUTE_CENTS must be positive.")
if not 0 < CHAT_MIN_DURATION_MINUTES <= CHAT_MAX_DURATION_MINUTES:
    raise ImproperlyConfigured("Chat duration bounds must satisfy 0 < MIN <= MAX.")
if not WALLET_CREDIT_PACKAGES or any(p <= 0 for p in WALLET_CREDIT_PACKAGES):
    raise ImproperlyConfigured("WALLET_CREDIT_PACKAGES must list positive cent amounts.")

# ----------------------------
# STATIC (WhiteNoise)
# ----------------------------
STATIC_ROOT = env("STATIC_ROOT", default=str(BASE_DIR / "staticfiles"))

MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

# ----------------------------
# TLS behind proxy
# ----------------------------
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)
SECURE_HSTS_SECONDS = env.int("SECURE_HSTS_SECONDS", default=3600)
SECURE_HSTS_INCLUDE_SUBDOMAINS = env.bool("SECURE_HSTS_INCLUDE_SUBDOMAINS", default=True)
SECURE_HSTS_PRELOAD = env.bool("SECURE_HSTS_PRELOAD", default=False)

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_HTTPONLY = True
CSRF_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"
CSRF_COOKIE_SAMESITE = "Lax"

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "same-origin"
X_FRAME_OPTIONS = "DENY"
SECURE_CROSS_ORIGIN_OPENER_POLICY = "same-origin"

# ----------------------------
# CORS / CSRF (https only)
# ----------------------------
CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=[])
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=[])


def _check_origins(name: str, origins: list[str]) -> None:
    if not origins:
        raise ImproperlyConfigured(f"{name} must be set in production.")
    for origin in origins:
        if not origin.startswith("https://") or "localhost" in origin or "127.0.0.1" in origin:
            raise ImproperlyConfigured(f"{name} entries must be public https:// origins (got {origin}).")


_check_origins("CORS_ALLOWED_ORIGINS", CORS_ALLOWED_ORIGINS)
_check_origins("CSRF_TRUSTED_ORIGINS", CSRF_TRUSTED_ORIGINS)

# Auth is bearer JWT; cookies never cross origins.
CORS_ALLOW_CREDENTIALS = False
