"""CLI entry point for careermap."""

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import DEFAULT_CONFIG, PRESETS, dump_config, load_config

console = Console()

TYPE_STYLES = {
    "role": "cyan",
    "project": "green",
    "education": "magenta",
    "skill": "yellow",
    "goal": "blue",
    "interest": "red",
}

ANALYZER_OPTION = click.option(
    "--analyzer", "-a",
    type=click.Choice(list(PRESETS)),
    default=None,
    help="Analyzer preset (default from config)",
)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@click.group()
@click.option("--config", "-c", "config_path", default=None, help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, config_path, verbose):
    """careermap - Map a career journey from resumes, journals and notes."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    setup_logging(verbose)


def _get_config(ctx) -> dict:
    try:
        return load_config(ctx.obj.get("config_path"))
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/]")
        ctx.exit(1)


def _analyze(ctx, documents, analyzer_name):
    from .analyzer import get_analyzer

    config = _get_config(ctx)
    try:
        analyzer = get_analyzer(analyzer_name, config)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]{e}[/]")
        ctx.exit(1)
    return analyzer.analyze_documents(documents)


def _load(ctx, paths):
    from .ingest.loader import load_documents

    try:
        docs = load_documents([Path(p) for p in paths])
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/]")
        ctx.exit(1)
    if not docs:
        console.print("[yellow]No supported documents found.[/]")
        ctx.exit(1)
    return docs


def _print_nodes(result) -> None:
    table = Table(title="Career Map")
    table.add_column("Type", style="bold")
    table.add_column("Label", style="cyan", max_width=50)
    table.add_column("Timeframe")
    table.add_column("Conf.", justify="right", style="green")
    table.add_column("Links", justify="right")
    table.add_column("Sources", style="dim")

    for node in result.nodes:
        tf = ""
        if node.timeframe:
            tf = f"{node.timeframe.start} - {node.timeframe.end or 'present'}"
        style = TYPE_STYLES.get(node.type.value, "white")
        table.add_row(
            f"[{style}]{node.type.value}[/]",
            node.label,
            tf,
            f"{node.confidence:.2f}",
            str(len(node.connections)),
            ", ".join(node.source_documents),
        )
    console.print(table)


def _print_summary(result) -> None:
    counts = {}
    for node in result.nodes:
        counts[node.type.value] = counts.get(node.type.value, 0) + 1
    edges = sum(len(n.connections) for n in result.nodes) // 2
    console.print(f"\n[bold]Found {len(result.nodes)} node(s), {edges} connection(s)[/]")
    for type_name, count in counts.items():
        console.print(f"  {type_name}: {count}")
    if result.timeline.start_date:
        console.print(f"  Timeline: {result.timeline.start_date} → {result.timeline.end_date}")


def _report(result, json_path=None) -> None:
    if not result.nodes:
        console.print(
            "[yellow]No career insights could be extracted from the uploaded documents. "
            "Try documents that mention roles, projects, education or skills.[/]"
        )
        return
    _print_nodes(result)
    _print_summary(result)
    if json_path:
        Path(json_path).write_text(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        console.print(f"[green]✓ Wrote {json_path}[/]")


@cli.command()
@click.option("--path", default=None, help="Directory for config.yaml (default: ./config)")
@click.pass_context
def init(ctx, path):
    """Write a starter config.yaml."""
    config_dir = Path(path).expanduser().resolve() if path else Path.cwd() / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    config_file = config_dir / "config.yaml"
    if config_file.exists():
        console.print(f"[yellow]Config already exists: {config_file}[/]")
        return

    header = (
        "# Analyzer preset: simple, standard or smart (or set CAREERMAP_ANALYZER)\n"
        "# Per-setting overrides go under settings, e.g.\n"
        "# settings:\n"
        "#   threshold: 0.45\n"
        "#   adjacency_months: 6\n"
        "# Extra keywords: point lexicon_path at a YAML file with lists such as\n"
        "#   extra_role_keywords: [barista, nurse]\n\n"
    )
    config_file.write_text(header + dump_config(DEFAULT_CONFIG))
    console.print(f"[bold green]✓ Created config: {config_file}[/]")


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@ANALYZER_OPTION
@click.option("--json", "json_path", default=None, type=click.Path(), help="Write the result as JSON")
@click.pass_context
def analyze(ctx, paths, analyzer, json_path):
    """Analyze documents and print the extracted career map."""
    docs = _load(ctx, paths)
    console.print(f"[blue]Analyzing {len(docs)} document(s)...[/]")
    result = _analyze(ctx, docs, analyzer)
    _report(result, json_path)


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@ANALYZER_OPTION
@click.pass_context
def timeline(ctx, paths, analyzer):
    """Print the chronological timeline of the documents."""
    docs = _load(ctx, paths)
    result = _analyze(ctx, docs, analyzer)
    if not result.timeline.events:
        console.print("[yellow]No dated events found.[/]")
        return

    labels = {n.id: n.type.value for n in result.nodes}
    table = Table(title="Timeline")
    table.add_column("Date", style="green")
    table.add_column("Type", style="bold")
    table.add_column("Event", style="cyan")
    for event in result.timeline.events:
        table.add_row(event.date, labels.get(event.node_id, ""), event.description)
    console.print(table)


@cli.command()
@ANALYZER_OPTION
@click.option("--json", "json_path", default=None, type=click.Path(), help="Write the result as JSON")
@click.pass_context
def demo(ctx, analyzer, json_path):
    """Analyze the built-in sample resume and journal entry."""
    from .demo import DEMO_DOCUMENTS

    console.print("[blue]Analyzing demo content...[/]")
    result = _analyze(ctx, DEMO_DOCUMENTS, analyzer)
    _report(result, json_path)


if __name__ == "__main__":
    cli()
