"""
Prometheus metrics collection.
"""

from prometheus_client import Counter, Histogram

# ============================================================
# Nonce Metrics
# ============================================================

nonces_issued_total = Counter(
    "gardien_nonces_issued_total",
    "Total sign-in nonces issued",
)

nonces_swept_total = Counter(
    "gardien_nonces_swept_total",
    "Total expired or consumed nonce records removed",
)

# ============================================================
# Sign-in Metrics
# ============================================================

sign_in_attempts_total = Counter(
    "gardien_sign_in_attempts_total",
    "Total sign-in attempts by outcome",
    ["outcome", "reason"],
)

sign_in_duration_seconds = Histogram(
    "gardien_sign_in_duration_seconds",
    "Time spent verifying a sign-in attempt",
    buckets=(0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)


def record_sign_in(reason: str | None, duration_seconds: float) -> None:
    """
    Record the outcome of one verification.

    Args:
        reason: FailureReason value, or None when authenticated
        duration_seconds: Time spent in verification
    """
    outcome = "authenticated" if reason is None else "rejected"
    sign_in_attempts_total.labels(outcome=outcome, reason=reason or "none").inc()
    sign_in_duration_seconds.observe(duration_seconds)
