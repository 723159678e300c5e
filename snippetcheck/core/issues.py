"""Core issue tracking data structures."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Iterator

from typing_extensions import Literal, NotRequired, TypedDict


UNUSED_IMPORT = "unused-import"
MISSING_IMPORT = "missing-import"

IssueKind = Literal["unused-import", "missing-import"]

ISSUE_KINDS = (UNUSED_IMPORT, MISSING_IMPORT)


class IssueDict(TypedDict):
    """Serialized issue record as written to the report file."""
    type: str
    file: str
    line: int
    name: str
    moduleName: NotRequired[str]


@dataclass(frozen=True)
class Issue:
    """A single unused or missing import found in a snippet."""

    kind: IssueKind
    file: str
    line: int
    name: str
    module_name: Optional[str] = None

    @property
    def message(self) -> str:
        if self.kind == UNUSED_IMPORT:
            return f"'{self.name}' is imported from '{self.module_name}' but never used"
        return f"'{self.name}' is used but never imported or declared"

    def to_dict(self) -> IssueDict:
        """Convert to dictionary for report serialization."""
        result: IssueDict = {
            "type": self.kind,
            "file": self.file,
            "line": self.line,
            "name": self.name,
        }
        if self.module_name is not None:
            result["moduleName"] = self.module_name
        return result


@dataclass(frozen=True)
class SnippetDiagnostic:
    """A snippet that could not be analyzed. Never reported as an issue."""

    file: str
    line: int
    language: str
    message: str


@dataclass
class IssueCollection:
    """Append-only collection of issues in discovery order."""

    issues: List[Issue] = field(default_factory=list)
    diagnostics: List[SnippetDiagnostic] = field(default_factory=list)

    def add(self, issue: Issue) -> None:
        """Add an issue to the collection."""
        self.issues.append(issue)

    def add_diagnostic(self, diagnostic: SnippetDiagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def count_by_kind(self) -> Dict[str, int]:
        counts = {kind: 0 for kind in ISSUE_KINDS}
        for issue in self.issues:
            counts[issue.kind] = counts.get(issue.kind, 0) + 1
        return counts

    def __len__(self) -> int:
        """Number of issues."""
        return len(self.issues)

    def __iter__(self) -> Iterator[Issue]:
        """Iterate over issues."""
        return iter(self.issues)
