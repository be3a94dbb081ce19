"""Rename strategies and the rename processor."""
