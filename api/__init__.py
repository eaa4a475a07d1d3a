"""
API Module for the MEDDPICC qualification engine.

FastAPI application with routes for:
- Assessment scoring and updates
- Insights, benchmarks, coaching prompts and export
- Portfolio analytics
- Qualification configuration
"""

from .main import create_app, app

__all__ = ["create_app", "app"]
