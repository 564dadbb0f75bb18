"""Helpers shared by mdarchive CLI commands."""
