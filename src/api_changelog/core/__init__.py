"""Change classification and changelog rendering."""

from .assembler import CategoryBuckets, DocumentAssembler
from .classifier import Classification, Classifier
from .comparer import ChangelogRun, Comparer
from .dedup import Deduplicator
from .differ import DocumentDiffer
from .formatter import Formatter
from .loader import extract_api_version, load_document

__all__ = [
    "CategoryBuckets",
    "ChangelogRun",
    "Classification",
    "Classifier",
    "Comparer",
    "Deduplicator",
    "DocumentAssembler",
    "DocumentDiffer",
    "Formatter",
    "extract_api_version",
    "load_document",
]
