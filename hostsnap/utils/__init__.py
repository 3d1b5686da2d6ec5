"""Utilities for hostsnap."""
