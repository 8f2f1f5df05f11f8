"""Pipeline stages: retention sweep, aggregation and the flush controller."""
