"""
asgi.py -- ASGI entry point for the backend.

Builds the app once from the environment (.env is read by Settings).

Run with:  uvicorn asgi:app --reload
           python server.py
"""

from api.main import create_app
from core.config import get_settings

app = create_app(get_settings())
