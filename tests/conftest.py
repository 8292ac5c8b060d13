"""Shared test configuration.

Environment is set before any test module imports the app, since main.py
validates OPENAI_API_KEY at import time.
"""
import os

os.environ.setdefault("OPENAI_API_KEY", "sk-test-key")
os.environ["JWT_SECRET"] = "test-secret-that-is-at-least-32-characters-long"
os.environ["JWT_ISSUER"] = "mumbletasks-web"
os.environ["JWT_AUDIENCE"] = "mumbletasks-api"
os.environ.pop("DATABASE_URL", None)
os.environ.pop("ALLOW_ANONYMOUS_AUTH", None)
