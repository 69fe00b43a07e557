"""Changelog generation from two OpenAPI documents."""

import contextlib
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from api_changelog.config import ChangelogConfig
from api_changelog.core.assembler import CategoryBuckets, DocumentAssembler
from api_changelog.core.classifier import Classifier
from api_changelog.core.dedup import Deduplicator
from api_changelog.core.differ import DocumentDiffer
from api_changelog.core.formatter import Formatter
from api_changelog.core.loader import extract_api_version, load_document
from api_changelog.errors import ChangelogWriteError
from api_changelog.models.change import ContextualChangeGroup, DocumentChanges
from api_changelog.models.changelog import ChangelogDocument

logger = logging.getLogger(__name__)


class ChangelogRun:
    """Mutable state of a single changelog run.

    Owns the dedup set and the category buckets; create a new run for every
    pair of documents.
    """

    def __init__(
        self,
        formatter: Formatter,
        classifier: Classifier,
        dedup: Optional[Deduplicator] = None,
    ):
        self.formatter = formatter
        self.classifier = classifier
        self.dedup = dedup or Deduplicator()
        self.buckets = CategoryBuckets()
        self.rendered = 0

    def process(self, group: ContextualChangeGroup) -> int:
        """Format, classify and file every not-yet-seen record of a group.

        Returns:
            Number of records rendered from this group
        """
        rendered = 0
        for record in group.records:
            if not self.dedup.observe(record):
                continue
            text = self.formatter.format_with_context(record, group.label)
            if not text:
                continue
            self.buckets.extend(self.classifier.lines(record, text))
            rendered += 1
        self.rendered += rendered
        return rendered


class Comparer:
    """Compares two OpenAPI documents and renders the changelog."""

    def __init__(
        self,
        previous: Dict[str, Any],
        latest: Dict[str, Any],
        config: Optional[ChangelogConfig] = None,
        differ: Optional[DocumentDiffer] = None,
    ):
        self.previous = previous
        self.latest = latest
        self.config = config or ChangelogConfig()
        self.differ = differ or DocumentDiffer()
        self.formatter = Formatter()
        self.classifier = Classifier()
        self.assembler = DocumentAssembler(self.config)
        self._changes: Optional[DocumentChanges] = None

    @classmethod
    def from_files(
        cls,
        latest_path: Path,
        previous_path: Path,
        config: Optional[ChangelogConfig] = None,
    ) -> "Comparer":
        """Load both documents from disk.

        Raises:
            DocumentLoadError: If either document cannot be read or parsed
        """
        latest = load_document(latest_path)
        previous = load_document(previous_path)
        return cls(previous, latest, config=config)

    @property
    def changes(self) -> DocumentChanges:
        """The differ's change tree, computed on first access."""
        if self._changes is None:
            self._changes = self.differ.compare(self.previous, self.latest)
        return self._changes

    @property
    def api_version(self) -> str:
        return extract_api_version(self.latest)

    def context_groups(self) -> Iterator[ContextualChangeGroup]:
        """Yield change groups in traversal order.

        Endpoint and schema groups come before the component group, and the
        unlabelled catch-all group comes last so every change gets its richest
        context.
        """
        changes = self.changes
        for path_changes in changes.paths.values():
            for operation in path_changes.iter_operations():
                yield ContextualChangeGroup(
                    label=operation.endpoint, records=operation.records
                )

        for schema_name, records in changes.schemas.items():
            yield ContextualChangeGroup(
                label=f"Schema `{schema_name}`", records=records
            )

        if changes.components:
            yield ContextualChangeGroup(
                label=self.config.components_label, records=changes.components
            )

        yield ContextualChangeGroup(records=changes.all_changes)

    def build(self, date: Optional[str] = None) -> Optional[ChangelogDocument]:
        """Classify every change into a changelog document.

        Returns:
            The document, or None when no change produced a description
        """
        run = ChangelogRun(self.formatter, self.classifier)
        for group in self.context_groups():
            rendered = run.process(group)
            logger.debug("Group %r: %d changes rendered", group.label, rendered)

        logger.info(
            "%d of %d changes rendered", run.rendered, self.changes.total_changes
        )
        if run.rendered == 0:
            return None

        return self.assembler.build(
            api_version=self.api_version,
            date=date or self.config.today(),
            total_changes=run.rendered,
            sections=run.buckets.sections(),
        )

    def generate_changelog(
        self, output_path: Path, date: Optional[str] = None
    ) -> Optional[Path]:
        """Write the changelog to ``output_path``.

        Returns:
            The written path, or None when there were no changes (nothing is
            written in that case)

        Raises:
            DiffError: If the documents cannot be compared
            ChangelogWriteError: If the file cannot be written
        """
        document = self.build(date=date)
        if document is None:
            return None

        output_path = Path(output_path)
        write_atomic(output_path, self.assembler.render(document))
        logger.info("Changelog written to %s", output_path)
        return output_path


def _output_mode(path: Path) -> int:
    """Mode of the file being replaced, or the umask default for a new one."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_atomic(path: Path, text: str) -> None:
    """Write ``text`` to a sibling temp file and move it over ``path``."""
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
    except OSError as e:
        raise ChangelogWriteError(f"failed to create {path}: {e}") from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.chmod(tmp_name, _output_mode(path))
        os.replace(tmp_name, path)
    except OSError as e:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise ChangelogWriteError(f"failed to write {path}: {e}") from e
