"""Rich-based output helpers for the CLI."""
