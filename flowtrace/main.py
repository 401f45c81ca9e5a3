"""flowtrace CLI - trace where a symbol comes from and where it flows across files."""
from pathlib import Path
from typing import Optional
import typer
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from flowtrace.config import __version__, POLICY_CHOICES, SEED_CHOICES, get_config
from flowtrace.analyzer.file_discovery import SourceEnumerator, SourceRootError
from flowtrace.analyzer.flow_extractor import FlowReport, SeedPolicy, TraversalPolicy
from flowtrace.analyzer.flow_graph import FlowGraph
from flowtrace.analyzer.flow_tracer import trace_symbol_flow_detailed
from flowtrace.utils.logger import configure_logging
from flowtrace.utils.safe_console import SafeConsole

app = typer.Typer(
    name="flowtrace",
    help="Cross-file symbol flow analysis for JavaScript and TypeScript projects",
    add_completion=False
)
console = SafeConsole()
err_console = SafeConsole(stderr=True)

SYNTAX_LEXERS = {
    '.js': 'javascript',
    '.jsx': 'jsx',
    '.ts': 'typescript',
    '.tsx': 'tsx',
}


def _fail(message: str):
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}", soft_wrap=True)
    raise typer.Exit(1)


def _render_graph(graph: FlowGraph):
    """Print every node and edge of the flow graph."""
    nodes = Table(title="Graph Nodes")
    nodes.add_column("Node", style="cyan", no_wrap=False)
    nodes.add_column("Fragments", justify="right", style="green")
    nodes.add_column("Matched", style="yellow")
    matched = set(graph.matched_ids)
    for node in graph.nodes():
        nodes.add_row(escape(node.id), str(len(node.fragments)), "yes" if node.id in matched else "")
    console.print(nodes)

    edges = Table(title="Graph Edges")
    edges.add_column("Source", style="cyan")
    edges.add_column("Target", style="magenta")
    edges.add_column("Imports", style="green")
    for edge in graph.snapshot()['edges']:
        edges.add_row(escape(edge['source']), escape(edge['target']), escape(", ".join(edge['imports'])))
    console.print(edges)


def _render_table(report: FlowReport, symbol: str):
    if not len(report):
        console.print(f"[yellow]No flow found for '{escape(symbol)}'[/yellow]")
        return

    console.print(f"[bold blue]Flow of '{escape(symbol)}'[/bold blue] ({len(report)} file(s))\n")
    for node_id in report:
        record = report[node_id]
        lexer = SYNTAX_LEXERS.get(Path(node_id).suffix.lower(), 'javascript')
        subtitle = None
        if record.imports:
            subtitle = "imports: " + ", ".join(record.imports)
        body = Syntax(record.code, lexer, theme="monokai", line_numbers=False) if record.code else "[dim](no declarations)[/dim]"
        console.print(Panel(body, title=escape(node_id), subtitle=escape(subtitle) if subtitle else None,
                            border_style="cyan"))


@app.command()
def trace(
    symbol: str = typer.Argument(..., help="Identifier or import source string to trace"),
    root: str = typer.Argument(".", help="Source root to analyze"),
    policy: Optional[str] = typer.Option(None, "--policy", "-p", help="Traversal policy: leaves or all (default: FLOWTRACE_POLICY)"),
    seeds: Optional[str] = typer.Option(None, "--seeds", "-s", help="Seed files: all matched files or the first one"),
    output_format: str = typer.Option("json", "--format", "-f", help="Output format: json or table"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write the JSON report to a file"),
    show_graph: bool = typer.Option(False, "--show-graph", help="Print graph nodes and edges"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Threads used to parse files"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug details to stderr"),
):
    """Trace SYMBOL through the import graph rooted at ROOT."""
    configure_logging(verbose, console=err_console)

    try:
        config = get_config()
    except ValueError as e:
        _fail(str(e))

    policy = (policy or config.default_policy or "").lower()
    if not policy:
        _fail(f"Choose a traversal policy with --policy ({'/'.join(POLICY_CHOICES)}) or FLOWTRACE_POLICY")
    if policy not in POLICY_CHOICES:
        _fail(f"Unknown policy '{policy}', expected one of: {', '.join(POLICY_CHOICES)}")

    seeds = (seeds or config.default_seeding).lower()
    if seeds not in SEED_CHOICES:
        _fail(f"Unknown seed policy '{seeds}', expected one of: {', '.join(SEED_CHOICES)}")

    if output_format not in ("json", "table"):
        _fail(f"Unknown format '{output_format}', expected json or table")

    workers = workers if workers is not None else config.workers
    if workers < 1:
        _fail(f"--workers must be >= 1, got {workers}")

    try:
        report, graph, failures = trace_symbol_flow_detailed(
            symbol,
            Path(root),
            TraversalPolicy(policy),
            SeedPolicy(seeds),
            workers=workers,
            enumerator=SourceEnumerator(excluded_dirs=config.excluded_dirs),
        )
    except (SourceRootError, ValueError) as e:
        _fail(str(e))

    if show_graph:
        _render_graph(graph)

    if output:
        Path(output).write_text(report.to_json(), encoding='utf-8')
        err_console.print(f"[green]✓ Report written to {escape(output)}[/green]")
    elif output_format == "json":
        # Plain stdout so the report can be piped into other tools
        typer.echo(report.to_json())
    else:
        _render_table(report, symbol)

    if failures:
        err_console.print(f"\n[yellow]⚠ Skipped {len(failures)} file(s) that could not be read or parsed:[/yellow]")
        for failure in failures:
            err_console.print(f"  • {escape(str(failure))}", soft_wrap=True)


@app.command()
def version():
    """Print the flowtrace version."""
    typer.echo(__version__)


@app.callback()
def main():
    """flowtrace - where does this identifier come from and where does it flow."""
    pass


if __name__ == "__main__":
    app()
