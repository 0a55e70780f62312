"""Triage CI/CD build failures: normalize, sanitize, rank, store and report log findings."""

__version__ = "1.0.0"