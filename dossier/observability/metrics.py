"""Prometheus metrics for Dossier.

Counts record saves, stored attachments, validation failures and
history entries.
"""

from prometheus_client import Counter, Histogram

RECORD_SAVES = Counter(
    "dossier_record_saves_total",
    "Total number of record save attempts",
    labelnames=["form", "outcome"],
)

RECORD_SAVE_LATENCY = Histogram(
    "dossier_record_save_latency_seconds",
    "Record save latency in seconds",
    labelnames=["form"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

ATTACHMENTS_STORED = Counter(
    "dossier_attachments_stored_total",
    "Total attachments added to records",
    labelnames=["kind"],
)

ATTACHMENTS_REMOVED = Counter(
    "dossier_attachments_removed_total",
    "Total attachments removed from records",
    labelnames=["kind"],
)

VALIDATION_FAILURES = Counter(
    "dossier_attachment_validation_failures_total",
    "Total attachment validation failures",
    labelnames=["kind", "error_type"],
)

HISTORY_ENTRIES = Counter(
    "dossier_history_entries_total",
    "Total history entries written or skipped",
    labelnames=["kind"],
)
