"""Collects classified lines into a changelog document and renders it."""

from typing import Dict, Iterable, List, Optional

from api_changelog.config import ChangelogConfig
from api_changelog.models.changelog import (
    Category,
    ChangelogDocument,
    ChangelogSection,
    ClassifiedLine,
)


class CategoryBuckets:
    """Ordered lines per category for one changelog run."""

    def __init__(self):
        self._lines: Dict[Category, List[str]] = {
            category: [] for category in Category
        }

    def add(self, line: ClassifiedLine) -> None:
        self._lines[line.category].append(line.text)

    def extend(self, lines: Iterable[ClassifiedLine]) -> None:
        for line in lines:
            self.add(line)

    def count(self, category: Category) -> int:
        return len(self._lines[category])

    def sections(self) -> List[ChangelogSection]:
        """Non-empty sections in document order."""
        return [
            ChangelogSection(category=category, lines=list(lines))
            for category, lines in self._lines.items()
            if lines
        ]


class DocumentAssembler:
    """Renders a changelog document as Markdown."""

    def __init__(self, config: Optional[ChangelogConfig] = None):
        self.config = config or ChangelogConfig()

    def build(
        self,
        api_version: str,
        date: str,
        total_changes: int,
        sections: List[ChangelogSection],
    ) -> ChangelogDocument:
        order = list(Category)
        return ChangelogDocument(
            title=self.config.title,
            api_version=api_version,
            date=date,
            total_changes=total_changes,
            sections=sorted(
                (section for section in sections if section.lines),
                key=lambda section: order.index(section.category),
            ),
        )

    def assemble(
        self,
        api_version: str,
        date: str,
        total_changes: int,
        sections: List[ChangelogSection],
    ) -> str:
        """Build and render a document in one step."""
        return self.render(self.build(api_version, date, total_changes, sections))

    def render(self, document: ChangelogDocument) -> str:
        """Render the header, summary and non-empty sections."""
        out = [
            f"# {document.title}",
            "",
            f"## [{document.api_version}] - {document.date}",
            "",
        ]

        out.append(f"**Total Changes:** {document.total_changes}")
        out.append(f"**Breaking Changes:** {document.breaking_count}")
        if self.config.show_endpoint_counts:
            if document.endpoints_added:
                out.append(f"**Endpoints Added:** {document.endpoints_added}")
            if document.endpoints_removed:
                out.append(f"**Endpoints Removed:** {document.endpoints_removed}")
        out.append("")

        for section in document.sections:
            if not section.lines:
                continue
            out.append(f"### {section.heading}")
            out.extend(f"- {line}" for line in section.lines)
            out.append("")

        return "\n".join(out)
