"""Data models for declarations, execution targets and results."""
