"""Command line interface for mdarchive."""
