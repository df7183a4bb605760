# billing/__init__.py
"""
Package entrypoint for the FastAPI application.

This lets us run:
    uvicorn billing:app --reload
"""

from .main import app

__all__ = ["app"]
