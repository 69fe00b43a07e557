"""Natural-language rendering of change records."""

import logging

from api_changelog.models.change import ChangeKind, ChangeRecord

logger = logging.getLogger(__name__)

# Properties whose values name an added or removed member of a collection.
NAMED_KINDS = {
    "codes": "Response code",
    "parameters": "Parameter",
    "properties": "Property",
    "schemas": "Schema",
}

CHANGED_LABELS = {
    "url": "URL",
    "type": "Type",
    "format": "Format",
}


def flatten(value: str) -> str:
    """Collapse newlines so a value fits on one line. Never truncates."""
    return value.replace("\n", " ")


class Formatter:
    """Turns a change record into a one-line (or short multi-line) sentence.

    An empty string means the change carries nothing worth reporting and must
    be dropped by the caller.
    """

    def format(self, record: ChangeRecord) -> str:
        prop = record.property
        original = record.original
        new = record.new

        if prop in NAMED_KINDS:
            return self._format_named(NAMED_KINDS[prop], record)
        elif prop == "deprecated":
            if new == "true":
                return "Marked as deprecated"
            return "No longer deprecated"
        elif prop == "version":
            return f"API version updated from `{original}` to `{new}`"
        elif prop == "description":
            return self._format_description(record)
        elif prop == "summary":
            return self._format_summary(record)
        elif prop in ("$ref", "reference"):
            return self._format_reference(record)
        elif prop in CHANGED_LABELS:
            if original and new:
                return f"{CHANGED_LABELS[prop]} changed from `{original}` to `{new}`"
            return ""
        elif prop == "required":
            if original == "false" and new == "true":
                return "Now required"
            elif original == "true" and new == "false":
                return "No longer required"
            return ""
        elif record.is_path:
            return self._format_endpoint(record)
        elif record.is_extension:
            if original and new:
                return f"Extension `{prop}` modified"
            elif new:
                return f"Extension `{prop}` added"
            return f"Extension `{prop}` removed"
        return self._format_generic(record)

    def format_with_context(self, record: ChangeRecord, context: str = "") -> str:
        """Format a record and prefix it with its context label.

        The prefix is skipped when the description already mentions the
        context, e.g. an endpoint line that names its own path.
        """
        description = self.format(record)
        if not description:
            logger.debug("Suppressed change %s", record.dedup_key)
            return ""
        if context and context not in description:
            return f"**{context}**: {description}"
        return description

    def _format_named(self, kind: str, record: ChangeRecord) -> str:
        if record.new:
            return f"{kind} `{record.new}` added"
        elif record.original:
            return f"{kind} `{record.original}` removed"
        return ""

    def _format_description(self, record: ChangeRecord) -> str:
        old = flatten(record.original)
        new = flatten(record.new)
        return f"Description updated:\n  - Old: {old}\n  - New: {new}"

    def _format_summary(self, record: ChangeRecord) -> str:
        old = flatten(record.original)
        new = flatten(record.new)
        return f"Summary updated from '{old}' to '{new}'"

    def _format_reference(self, record: ChangeRecord) -> str:
        original = record.original
        new = record.new
        if original and new:
            if original == new:
                return ""
            return f"Reference changed from `{original}` to `{new}`"
        elif new:
            return f"Reference set to `{new}`"
        elif original:
            return f"Reference `{original}` removed"
        return ""

    def _format_endpoint(self, record: ChangeRecord) -> str:
        if record.is_removal:
            return f"Endpoint `{record.property}` removed"
        elif record.change_kind == ChangeKind.MODIFIED:
            return f"Endpoint `{record.property}` modified"
        return f"Endpoint `{record.property}` added"

    def _format_generic(self, record: ChangeRecord) -> str:
        prop = record.property
        original = record.original
        new = record.new
        if original and new:
            if original == new:
                return ""
            return f"`{prop}` changed from '{flatten(original)}' to '{flatten(new)}'"
        elif new:
            return f"`{prop}` set to '{flatten(new)}'"
        elif original:
            return f"`{prop}` removed (was '{flatten(original)}')"
        return f"`{prop}` modified"
