"""Command-line interface for chunksource."""
