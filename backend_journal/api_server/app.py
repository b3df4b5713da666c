"""
FastAPI/ASGI application entrypoint.

Run with: uvicorn backend_journal.api_server.app:app --host 127.0.0.1 --port 9000
"""

from backend_journal.api_server.server import app

__all__ = ["app"]
