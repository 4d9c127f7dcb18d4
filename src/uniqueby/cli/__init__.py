"""Command line interface for uniqueby."""
