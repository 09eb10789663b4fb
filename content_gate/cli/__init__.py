"""Command-line interface for the content gate."""
