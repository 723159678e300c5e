"""snippetcheck - find unused and missing imports in documentation code snippets."""

__version__ = "0.1.0"

from .core.issues import Issue, IssueCollection
from .analyzers.import_usage import ImportUsageAnalyzer

__all__ = ["Issue", "IssueCollection", "ImportUsageAnalyzer", "__version__"]
