"""Command-line interface for the snippet import checker."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from . import __version__
from .analyzers.base import AnalysisContext
from .analyzers.import_usage import ImportUsageAnalyzer
from .config import Config, create_default_config_file
from .core.allowlist import build_allowlist
from .core.errors import ConfigurationError, ContentRootError
from .core.issues import IssueCollection, MISSING_IMPORT, UNUSED_IMPORT
from .core.loader import collect_documents
from .core.reporting import REPORT_FORMATS, Reporter
from .utils.logging_setup import get_logger, log_operation, setup_logging

logger = get_logger(__name__)

console = Console()


def run_check(config: Config, root: Optional[Path] = None) -> IssueCollection:
    """Scan the content root and collect issues from every snippet.

    Raises:
        ContentRootError: if the content root cannot be listed
    """
    root = Path(root) if root is not None else Path(config.get("content.root", "docs"))
    log_operation(logger, "run_check", root=str(root))

    documents = collect_documents(
        root,
        extension=config.get("content.extension", ".mdx"),
        exclude=config.get("content.exclude", []),
    )
    logger.info(f"Found {len(documents)} documents under {root}")

    ctx = AnalysisContext(
        root_dir=root,
        documents=documents,
        config=config.to_dict(),
        allowlist=build_allowlist(config.get("globals.extra", [])),
    )
    analyzer = ImportUsageAnalyzer(
        allowlist=ctx.allowlist,
        skip_on_syntax_error=bool(config.get("analysis.skip_on_syntax_error", False)),
    )

    collection = IssueCollection()
    for issue in analyzer.run(ctx):
        collection.add(issue)
    for diagnostic in ctx.diagnostics:
        collection.add_diagnostic(diagnostic)

    counts = collection.count_by_kind()
    logger.info(
        f"Checked {ctx.stats.get('snippets', 0)} snippets in {ctx.stats.get('documents', 0)} documents: "
        f"{counts[UNUSED_IMPORT]} unused, {counts[MISSING_IMPORT]} missing, "
        f"{len(collection.diagnostics)} snippets skipped"
    )
    return collection


@click.group(name="snippetcheck", invoke_without_command=True)
@click.version_option(__version__, prog_name="snippetcheck")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to configuration file"
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write JSON-lines logs to this file"
)
@click.pass_context
def main(ctx, config_path, verbose, log_file):
    """Check documentation code snippets for unused and missing imports."""
    setup_logging(level="DEBUG" if verbose else "WARNING", log_file=log_file)

    try:
        if config_path:
            config = Config.from_file(config_path)
        else:
            config = Config.find_and_load(Path.cwd())
    except ConfigurationError as e:
        logger.error(str(e))
        sys.stderr.write(f"Error: {e}\n")
        sys.exit(1)

    ctx.obj = config
    if ctx.invoked_subcommand is None:
        ctx.invoke(check)


@main.command(name="check")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    help="Content root to scan (default: docs)"
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Report file (default: /tmp/mdx-import-issues.json)"
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(REPORT_FORMATS),
    help="Report format"
)
@click.option("--show", is_flag=True, help="List every issue on the console")
@click.pass_obj
def check(config, root, output, fmt, show):
    """Scan snippets and write the issue report (the default command)."""
    if output:
        config.set("report.output", str(output))
    if fmt:
        config.set("report.format", fmt)

    try:
        collection = run_check(config, root)
    except ContentRootError as e:
        logger.error(str(e))
        sys.stderr.write(f"Error: {e}\n")
        sys.exit(1)

    try:
        reporter = Reporter(config.get("report.output"), config.get("report.format", "json"), console=console)
    except ValueError as e:
        sys.stderr.write(f"Error: {e}\n")
        sys.exit(1)
    reporter.write(collection.issues)

    if show:
        reporter.print_table(collection.issues)
        counts = ", ".join(f"{n} {kind}" for kind, n in collection.count_by_kind().items())
        console.print(counts, markup=False, highlight=False)
    reporter.print_summary(collection.issues)


@main.group(name="config")
def config_group():
    """Manage snippetcheck configuration."""
    pass


@config_group.command(name="init")
@click.option(
    "--path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(".snippetcheck.yml"),
    show_default=True,
    help="Path for config file"
)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def config_init(path, force):
    """Write a configuration file with the default settings."""
    if path.exists() and not force:
        if not click.confirm(f"Config file {path} already exists. Overwrite?"):
            console.print("[yellow]Aborted[/yellow]")
            return

    create_default_config_file(path)
    console.print(f"[green]Created config file at {escape(str(path))}[/green]")


@config_group.command(name="show")
@click.pass_obj
def config_show(config):
    """Print the effective configuration."""
    source = config.source or "defaults"
    console.print(f"# source: {source}", markup=False, highlight=False)
    console.print(config.to_yaml(), markup=False, highlight=False, soft_wrap=True, end="")


if __name__ == "__main__":
    main()
