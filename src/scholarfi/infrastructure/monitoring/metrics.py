"""
Prometheus metrics collection.
"""

from prometheus_client import Counter, Histogram

# ============================================================
# HTTP Metrics
# ============================================================

http_requests_total = Counter(
    "scholarfi_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "scholarfi_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

# ============================================================
# Wallet Provider Metrics
# ============================================================

provider_requests_total = Counter(
    "scholarfi_provider_requests_total",
    "Total wallet provider API requests",
    ["operation"],
)

provider_errors_total = Counter(
    "scholarfi_provider_errors_total",
    "Total wallet provider API errors",
    ["operation", "error_type"],
)

# ============================================================
# Blockchain Metrics
# ============================================================

blockchain_transactions_total = Counter(
    "scholarfi_blockchain_transactions_total",
    "Total contract transactions submitted",
    ["chain", "function"],
)

blockchain_errors_total = Counter(
    "scholarfi_blockchain_errors_total",
    "Total blockchain errors",
    ["chain", "function"],
)

blockchain_request_duration_seconds = Histogram(
    "scholarfi_blockchain_request_duration_seconds",
    "Contract call duration in seconds (including receipt wait)",
    ["chain", "function"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)

# ============================================================
# Business Metrics
# ============================================================

saga_step_outcomes_total = Counter(
    "scholarfi_saga_step_outcomes_total",
    "Saga step outcomes",
    ["saga", "step", "status"],
)

child_accounts_created_total = Counter(
    "scholarfi_child_accounts_created_total",
    "Child accounts created (including partial successes)",
)

child_account_creation_duration_seconds = Histogram(
    "scholarfi_child_account_creation_duration_seconds",
    "End-to-end child account creation duration in seconds",
    buckets=(1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0),
)

verification_events_total = Counter(
    "scholarfi_verification_events_total",
    "ChildVerified events handled by reconciliation",
    ["outcome"],
)

deposits_recorded_total = Counter(
    "scholarfi_deposits_recorded_total",
    "Deposit webhook outcomes",
    ["outcome"],
)
