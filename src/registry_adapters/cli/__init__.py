"""Command-line interface for registry-adapters."""
