"""
API middleware.
"""

from gardien.presentation.api.middleware.error_handler import (
    gardien_exception_handler,
)
from gardien.presentation.api.middleware.request_id_middleware import (
    RequestIDMiddleware,
)

__all__ = ["RequestIDMiddleware", "gardien_exception_handler"]
