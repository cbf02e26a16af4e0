"""Infrastructure helpers shared across adapters."""
