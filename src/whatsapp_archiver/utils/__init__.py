"""Small utilities with no domain knowledge."""
