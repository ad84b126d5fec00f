# backend/settings/dev.py
"""
PATH: backend/settings/dev.py

LOCAL DEVELOPMENT SETTINGS (also used by the test suite)
SQLite by default; point DATABASE_URL at Postgres to exercise row locking.
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, TESTING, env

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1", "testserver"])
CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=["http://localhost:5173"])
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=["http://localhost:5173"])
CORS_ALLOW_CREDENTIALS = True

# Chat + wallet services log every state change at INFO; show them locally.
if not TESTING:
    LOGGING["loggers"].update(
        {
            "chat": {"handlers": ["console"], "level": "DEBUG", "propagate": False},
            "wallets": {"handlers": ["console"], "level": "DEBUG", "propagate": False},
        }
    )
