"""Logging helpers shared across the metrics sink."""
