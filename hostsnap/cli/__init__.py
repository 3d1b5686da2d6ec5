"""Command-line interface for hostsnap."""
