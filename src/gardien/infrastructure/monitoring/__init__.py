"""
Monitoring infrastructure.
"""

from gardien.infrastructure.monitoring.logger import (
    bind_request_id,
    get_logger,
    request_id_ctx,
    setup_logging,
)

__all__ = [
    "bind_request_id",
    "get_logger",
    "request_id_ctx",
    "setup_logging",
]
