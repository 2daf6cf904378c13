"""Command line interface for tag-track."""
