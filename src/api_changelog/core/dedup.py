"""Cross-pass deduplication of change records."""

from typing import Set, Tuple

from api_changelog.models.change import ChangeRecord


class Deduplicator:
    """Remembers which changes have already been rendered in a run.

    One instance is shared by every traversal pass of a single run, so a
    change reached under its endpoint or schema is not rendered again by the
    catch-all pass.
    """

    def __init__(self):
        self._seen: Set[Tuple[str, str, str, str]] = set()

    def observe(self, record: ChangeRecord) -> bool:
        """Return True the first time a change is seen, False afterwards."""
        key = record.dedup_key
        if key in self._seen:
            return False
        self._seen.add(key)
        return True

    def __len__(self) -> int:
        return len(self._seen)
