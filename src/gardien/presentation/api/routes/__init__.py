"""
API routes.
"""

from gardien.presentation.api.routes import auth, health

__all__ = ["auth", "health"]
