"""Configuration, logging and self-metrics for the metrics sink."""
