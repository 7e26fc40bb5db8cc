"""License expiration alerting: scan, notify, orchestrate."""

__version__ = "0.1.0"
