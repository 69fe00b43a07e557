"""Assigns change records to changelog categories."""

from typing import List, NamedTuple

from api_changelog.models.change import ChangeKind, ChangeRecord
from api_changelog.models.changelog import Category, ClassifiedLine

PRIMARY_CATEGORIES = {
    ChangeKind.OBJECT_ADDED: Category.ADDED,
    ChangeKind.PROPERTY_ADDED: Category.ADDED,
    ChangeKind.MODIFIED: Category.MODIFIED,
    ChangeKind.OBJECT_REMOVED: Category.REMOVED,
    ChangeKind.PROPERTY_REMOVED: Category.REMOVED,
}


class Classification(NamedTuple):
    category: Category
    is_breaking: bool


class Classifier:
    """Maps change records to a primary category plus a breaking verdict."""

    def classify(self, record: ChangeRecord) -> Classification:
        """Classify a single record.

        Path-level records become endpoint additions or removals; removing an
        endpoint is always breaking. Everything else keeps the category of its
        change kind and is breaking only when ``is_breaking`` agrees.
        """
        if record.is_path and record.change_kind != ChangeKind.MODIFIED:
            if record.is_removal:
                return Classification(Category.ENDPOINT_REMOVED, True)
            return Classification(Category.ENDPOINT_ADDED, False)

        return Classification(
            PRIMARY_CATEGORIES[record.change_kind], self.is_breaking(record)
        )

    def is_breaking(self, record: ChangeRecord) -> bool:
        """Narrow the differ's breaking flag to removals and new requirements."""
        if not record.breaking:
            return False
        if record.is_removal:
            return True
        return (
            record.property == "required"
            and record.original == "false"
            and record.new == "true"
        )

    def lines(self, record: ChangeRecord, text: str) -> List[ClassifiedLine]:
        """Expand a formatted record into the bucket entries it belongs to."""
        classification = self.classify(record)
        entries = []
        if classification.is_breaking:
            entries.append(ClassifiedLine(Category.BREAKING, text))
        entries.append(ClassifiedLine(classification.category, text))
        return entries
