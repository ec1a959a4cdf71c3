"""
Monitoring and observability infrastructure.
"""

from scholarfi.infrastructure.monitoring import metrics
from scholarfi.infrastructure.monitoring.logger import (
    bind_request_id,
    get_logger,
    get_request_id,
    log_performance,
    reset_request_id,
    setup_logging,
)

__all__ = [
    "metrics",
    "bind_request_id",
    "get_logger",
    "get_request_id",
    "log_performance",
    "reset_request_id",
    "setup_logging",
]
