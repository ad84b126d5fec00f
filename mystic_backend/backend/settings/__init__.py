# backend/settings/__init__.py
"""
Settings package. Nothing is loaded here; pick a module explicitly:
- backend.settings.dev   local development and tests
- backend.settings.prod  production
"""
