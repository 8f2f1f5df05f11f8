"""Storage backends for snapshots and aggregates."""
