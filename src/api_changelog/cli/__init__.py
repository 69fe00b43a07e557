"""Command line interface for API Changelog."""
