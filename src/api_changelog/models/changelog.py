"""Changelog document models."""

from enum import Enum
from typing import List, NamedTuple

from pydantic import BaseModel


class Category(str, Enum):
    """Section a rendered change is filed under.

    Declaration order is the order sections appear in the document.
    """

    BREAKING = "breaking"
    ENDPOINT_ADDED = "endpoint_added"
    ENDPOINT_REMOVED = "endpoint_removed"
    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"

    @property
    def heading(self) -> str:
        return SECTION_HEADINGS[self]


SECTION_HEADINGS = {
    Category.BREAKING: "⚠️ Breaking Changes",
    Category.ENDPOINT_ADDED: "🆕 New Endpoints",
    Category.ENDPOINT_REMOVED: "🗑️ Removed Endpoints",
    Category.ADDED: "✨ Added",
    Category.MODIFIED: "🔄 Modified",
    Category.REMOVED: "❌ Removed",
}


class ClassifiedLine(NamedTuple):
    category: Category
    text: str


class ChangelogSection(BaseModel):
    """A heading plus its bullet lines."""

    category: Category
    lines: List[str] = []

    @property
    def heading(self) -> str:
        return self.category.heading


class ChangelogDocument(BaseModel):
    """Fully classified changelog, ready to be rendered."""

    title: str = "API Changelog"
    api_version: str = "Unknown"
    date: str
    total_changes: int
    sections: List[ChangelogSection] = []

    def section(self, category: Category) -> List[str]:
        """Lines filed under ``category`` (empty if the section is absent)."""
        for section in self.sections:
            if section.category == category:
                return section.lines
        return []

    @property
    def breaking_count(self) -> int:
        return len(self.section(Category.BREAKING))

    @property
    def endpoints_added(self) -> int:
        return len(self.section(Category.ENDPOINT_ADDED))

    @property
    def endpoints_removed(self) -> int:
        return len(self.section(Category.ENDPOINT_REMOVED))
