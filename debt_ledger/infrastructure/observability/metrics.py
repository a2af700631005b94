"""Prometheus metrics for monitoring collections, schedule edits, and messaging"""

from prometheus_client import Counter, Histogram

# Payment metrics
payment_counter = Counter(
    "debt_ledger_payments_total",
    "Payments recorded against installments",
    ["outcome"],  # paid | postponed
)

collected_amount_counter = Counter(
    "debt_ledger_collected_amount_total",
    "Whole currency units collected through recorded payments",
)

# Debt and schedule metrics
debt_saved_counter = Counter(
    "debt_ledger_debts_saved_total",
    "Debts created or edited",
    ["mode"],  # create | edit
)

schedule_edit_counter = Counter(
    "debt_ledger_schedule_edits_total",
    "Manual schedule edits",
    ["field"],  # amount | due_date
)

# Backup metrics
ledger_import_counter = Counter(
    "debt_ledger_imports_total",
    "Ledger document imports",
    ["result"],  # accepted | rejected
)

# Messaging metrics
messaging_latency_histogram = Histogram(
    "messaging_latency_seconds",
    "Messaging webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

messaging_failure_counter = Counter(
    "messaging_failures_total",
    "Failed messaging webhook deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payment(paid_amount: int) -> None:
    """Count a recorded payment; a zero amount is a postponement"""
    outcome = "postponed" if paid_amount == 0 else "paid"
    payment_counter.labels(outcome=outcome).inc()
    collected_amount_counter.inc(paid_amount)
