"""Change record models produced by the structural differ."""

from enum import Enum
from typing import Dict, Iterator, List, Tuple

from pydantic import BaseModel

# Canonical order in which operations of a path are visited.
HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD", "TRACE")


class ChangeKind(str, Enum):
    """Shape of a single difference between two documents."""

    OBJECT_ADDED = "object_added"
    OBJECT_REMOVED = "object_removed"
    PROPERTY_ADDED = "property_added"
    PROPERTY_REMOVED = "property_removed"
    MODIFIED = "modified"


class ChangeRecord(BaseModel):
    """One atomic difference between the previous and latest document.

    Empty ``original``/``new`` values mean the value is absent on that side.
    The ``breaking`` flag is the differ's opinion only; the classifier decides
    what actually ends up in the breaking section.
    """

    property: str
    original: str = ""
    new: str = ""
    change_kind: ChangeKind
    breaking: bool = False

    model_config = {"frozen": True}

    @property
    def dedup_key(self) -> Tuple[str, str, str, str]:
        """Identity used to collapse repeated occurrences of the same change."""
        return (self.change_kind.value, self.property, self.original, self.new)

    @property
    def is_addition(self) -> bool:
        return self.change_kind in (ChangeKind.OBJECT_ADDED, ChangeKind.PROPERTY_ADDED)

    @property
    def is_removal(self) -> bool:
        return self.change_kind in (
            ChangeKind.OBJECT_REMOVED,
            ChangeKind.PROPERTY_REMOVED,
        )

    @property
    def is_path(self) -> bool:
        """Whether the record describes a whole endpoint path."""
        return self.property.startswith("/")

    @property
    def is_extension(self) -> bool:
        return self.property.startswith("x-")


class ContextualChangeGroup(BaseModel):
    """Records that share one human-readable context label."""

    label: str = ""
    records: List[ChangeRecord] = []


class OperationChanges(BaseModel):
    """Changes to a single HTTP operation of a path."""

    method: str
    path: str
    records: List[ChangeRecord] = []

    @property
    def endpoint(self) -> str:
        return f"{self.method.upper()} {self.path}"


class PathChanges(BaseModel):
    """Changes to the operations of a path present in both documents."""

    path: str
    operations: Dict[str, OperationChanges] = {}

    def iter_operations(self) -> Iterator[OperationChanges]:
        """Yield operations in canonical HTTP method order."""
        for method in HTTP_METHODS:
            operation = self.operations.get(method)
            if operation is not None:
                yield operation


class DocumentChanges(BaseModel):
    """Tree of changes between two documents.

    ``components`` holds every change found under ``components`` (schema
    changes included) and ``all_changes`` is the flattened view of the whole
    tree, so the same record usually appears in more than one place.
    """

    paths: Dict[str, PathChanges] = {}
    schemas: Dict[str, List[ChangeRecord]] = {}
    components: List[ChangeRecord] = []
    all_changes: List[ChangeRecord] = []

    @property
    def total_changes(self) -> int:
        return len(self.all_changes)
