"""Application layer - use cases and saga orchestration."""
