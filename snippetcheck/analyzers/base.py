"""Base analyzer interface and context."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List

from ..core.allowlist import DEFAULT_GLOBALS
from ..core.issues import Issue, SnippetDiagnostic


@dataclass
class AnalysisContext:
    """Context provided to analyzers during a run."""
    root_dir: Path
    documents: List[str]
    config: Dict[str, Any] = field(default_factory=dict)
    allowlist: FrozenSet[str] = DEFAULT_GLOBALS
    diagnostics: List[SnippetDiagnostic] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    def should_ignore_issue(self, issue_kind: str) -> bool:
        """Check if an issue type is disabled by configuration."""
        return issue_kind in (self.config.get("ignore_issue_types") or [])

    def count(self, key: str, amount: int = 1) -> None:
        self.stats[key] = self.stats.get(key, 0) + amount


class BaseAnalyzer(ABC):
    """Abstract base class for analyzers."""

    name: str = "base"

    @abstractmethod
    def run(self, ctx: AnalysisContext) -> Iterable[Issue]:
        """Run the analyzer and yield issues."""
        pass
