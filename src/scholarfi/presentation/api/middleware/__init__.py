"""
API middleware for Scholar-Fi.
"""

from scholarfi.presentation.api.middleware.error_handler import (
    scholarfi_exception_handler,
)
from scholarfi.presentation.api.middleware.metrics_middleware import (
    MetricsMiddleware,
)
from scholarfi.presentation.api.middleware.request_id_middleware import (
    RequestIDMiddleware,
)

__all__ = [
    "scholarfi_exception_handler",
    "MetricsMiddleware",
    "RequestIDMiddleware",
]
