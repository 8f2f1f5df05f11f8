"""Domain types for snapshots, aggregates and pipeline state."""
