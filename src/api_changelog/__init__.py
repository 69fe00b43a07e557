"""API Changelog - Markdown changelogs from OpenAPI document changes."""

__version__ = "0.1.0"

# Overwritten by release builds.
__commit__ = "unknown"
__build_date__ = "unknown"
