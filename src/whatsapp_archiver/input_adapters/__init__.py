"""Input adapters for chat export formats."""
