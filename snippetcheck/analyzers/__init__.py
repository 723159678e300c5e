"""Analyzers for documentation snippets."""

from .base import AnalysisContext, BaseAnalyzer
from .import_usage import ImportUsageAnalyzer, SnippetAnalysis, Role

__all__ = [
    "AnalysisContext",
    "BaseAnalyzer",
    "ImportUsageAnalyzer",
    "SnippetAnalysis",
    "Role",
]
