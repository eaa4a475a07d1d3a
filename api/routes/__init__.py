"""
API Routes for the MEDDPICC qualification engine.
"""

from . import assessments, analytics, configuration

__all__ = ["assessments", "analytics", "configuration"]
