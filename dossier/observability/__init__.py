"""Observability: structured logging and metrics.

structlog for logging, Prometheus counters and histograms for metrics.
"""
