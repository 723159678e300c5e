"""Report generation for snippet import checks."""

import json
from pathlib import Path
from typing import Iterable, List, Optional, Union

import yaml
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .issues import Issue, IssueDict, UNUSED_IMPORT
from ..utils.logging_setup import get_logger

logger = get_logger(__name__)

REPORT_FORMATS = ("json", "yaml")


class Reporter:
    """Serialize issues to the report file and summarize them on the console."""

    def __init__(self, output: Union[str, Path], fmt: str = "json", console: Optional[Console] = None):
        if fmt not in REPORT_FORMATS:
            raise ValueError(f"Unsupported report format: {fmt}")
        self.output = Path(output)
        self.fmt = fmt
        self.console = console or Console()

    def render(self, issues: Iterable[Issue]) -> str:
        """Render issues in the configured format."""
        records: List[IssueDict] = [issue.to_dict() for issue in issues]
        if self.fmt == "yaml":
            return yaml.safe_dump(records, default_flow_style=False, sort_keys=False)
        return json.dumps(records, indent=2)

    def write(self, issues: List[Issue]) -> Path:
        """Write the full report, replacing any previous one."""
        self.output.parent.mkdir(parents=True, exist_ok=True)
        self.output.write_text(self.render(issues), encoding="utf-8")
        logger.info(f"Wrote {len(issues)} issues to {self.output}")
        return self.output

    def summary_line(self, issues: List[Issue]) -> str:
        return f"Tracked {len(issues)} issues -> {self.output}"

    def print_summary(self, issues: List[Issue]) -> None:
        self.console.print(self.summary_line(issues), markup=False, highlight=False, soft_wrap=True)

    def print_table(self, issues: List[Issue]) -> None:
        """Print every issue as a table row."""
        if not issues:
            return
        table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
        table.add_column("Location")
        table.add_column("Type")
        table.add_column("Message")
        for issue in issues:
            style = "yellow" if issue.kind == UNUSED_IMPORT else "red"
            table.add_row(
                escape(f"{issue.file}:{issue.line}"),
                f"[{style}]{issue.kind}[/{style}]",
                escape(issue.message),
            )
        self.console.print(table)
