"""Internal helpers for learnpath."""
