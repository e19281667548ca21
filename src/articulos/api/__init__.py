"""API HTTP (FastAPI) do extrator de artigos."""

from .server import app

__all__ = ["app"]
