"""Command-line interface for quick-pipreqs."""
