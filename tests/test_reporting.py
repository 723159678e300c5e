"""Tests for issue records and report output."""

import json
from io import StringIO

import pytest
import yaml
from rich.console import Console

from snippetcheck.core.issues import (
    Issue,
    IssueCollection,
    SnippetDiagnostic,
    MISSING_IMPORT,
    UNUSED_IMPORT,
)
from snippetcheck.core.reporting import Reporter


@pytest.fixture
def issues():
    return [
        Issue(kind=UNUSED_IMPORT, file="docs/hooks.mdx", line=12, name="useRef", module_name="react"),
        Issue(kind=MISSING_IMPORT, file="docs/fetch.mdx", line=40, name="axios"),
    ]


class TestIssue:
    """Issue record serialization."""

    def test_unused_import_record(self, issues):
        assert issues[0].to_dict() == {
            "type": "unused-import",
            "file": "docs/hooks.mdx",
            "line": 12,
            "name": "useRef",
            "moduleName": "react",
        }

    def test_missing_import_has_no_module(self, issues):
        record = issues[1].to_dict()

        assert "moduleName" not in record
        assert record["type"] == "missing-import"

    def test_message(self, issues):
        assert "react" in issues[0].message
        assert "axios" in issues[1].message


class TestIssueCollection:
    """Collection helpers."""

    def test_counts_keep_discovery_order(self, issues):
        collection = IssueCollection()
        for issue in issues:
            collection.add(issue)
        collection.add(Issue(kind=MISSING_IMPORT, file="docs/hooks.mdx", line=14, name="Box"))

        assert len(collection) == 3
        assert collection.count_by_kind() == {UNUSED_IMPORT: 1, MISSING_IMPORT: 2}
        assert [i.name for i in collection] == ["useRef", "axios", "Box"]

    def test_counts_start_at_zero(self):
        assert IssueCollection().count_by_kind() == {UNUSED_IMPORT: 0, MISSING_IMPORT: 0}

    def test_diagnostics_are_not_issues(self):
        collection = IssueCollection()
        collection.add_diagnostic(SnippetDiagnostic("docs/a.mdx", 3, "ts", "syntax error"))

        assert len(collection) == 0
        assert len(collection.diagnostics) == 1


class TestReporter:
    """Report file and console summary."""

    def test_write_json(self, tmp_path, issues):
        output = tmp_path / "nested" / "issues.json"
        reporter = Reporter(output)

        reporter.write(issues)

        data = json.loads(output.read_text(encoding="utf-8"))
        assert data == [issue.to_dict() for issue in issues]

    def test_write_empty_report(self, tmp_path):
        output = tmp_path / "issues.json"

        Reporter(output).write([])

        assert json.loads(output.read_text(encoding="utf-8")) == []

    def test_write_replaces_previous_report(self, tmp_path, issues):
        output = tmp_path / "issues.json"
        reporter = Reporter(output)
        reporter.write(issues)

        reporter.write(issues[:1])

        assert len(json.loads(output.read_text(encoding="utf-8"))) == 1

    def test_write_yaml(self, tmp_path, issues):
        output = tmp_path / "issues.yaml"

        Reporter(output, fmt="yaml").write(issues)

        data = yaml.safe_load(output.read_text(encoding="utf-8"))
        assert data[0]["moduleName"] == "react"
        assert data[1] == {"type": "missing-import", "file": "docs/fetch.mdx", "line": 40, "name": "axios"}

    def test_unknown_format(self, tmp_path):
        with pytest.raises(ValueError):
            Reporter(tmp_path / "x", fmt="xml")

    def test_summary_line(self, tmp_path, issues):
        output = tmp_path / "issues.json"
        reporter = Reporter(output)

        assert reporter.summary_line(issues) == f"Tracked 2 issues -> {output}"

    def test_print_summary_and_table(self, tmp_path, issues):
        stream = StringIO()
        console = Console(file=stream, width=200)
        reporter = Reporter(tmp_path / "issues.json", console=console)

        reporter.print_table(issues)
        reporter.print_summary(issues)

        text = stream.getvalue()
        assert "'useRef' is imported from 'react' but never used" in text
        assert "docs/fetch.mdx:40" in text
        assert "Tracked 2 issues" in text

    def test_print_table_empty(self, tmp_path):
        stream = StringIO()
        reporter = Reporter(tmp_path / "issues.json", console=Console(file=stream))

        reporter.print_table([])

        assert stream.getvalue() == ""
