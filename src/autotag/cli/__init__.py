"""Command-line interface for autotag."""
