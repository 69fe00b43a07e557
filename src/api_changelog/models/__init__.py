"""Data models for API Changelog."""

from .change import (
    HTTP_METHODS,
    ChangeKind,
    ChangeRecord,
    ContextualChangeGroup,
    DocumentChanges,
    OperationChanges,
    PathChanges,
)
from .changelog import ChangelogDocument, ChangelogSection, Category, ClassifiedLine

__all__ = [
    "HTTP_METHODS",
    "ChangeKind",
    "ChangeRecord",
    "ContextualChangeGroup",
    "DocumentChanges",
    "OperationChanges",
    "PathChanges",
    "Category",
    "ChangelogDocument",
    "ChangelogSection",
    "ClassifiedLine",
]
