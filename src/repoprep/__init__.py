"""Prepare cached git checkouts for reuse in CI jobs."""

__version__ = "0.1.0"
