"""CLI interface for search-eval."""

import asyncio
import json
import logging
import subprocess
import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from search_eval.config import load_evaluation_config
from search_eval.consts import (
    BINARY_SCORING_SYSTEM,
    DEFAULT_PROMPT_TEMPLATES,
    DEFAULT_ROUNDS,
    DEFAULT_SEARCH_ENGINES,
    OPTIONAL_SEARCH_ENGINES,
)
from search_eval.evaluation.orchestrator import run_batch_evaluation
from search_eval.evaluation.validation import ConfigurationError
from search_eval.evaluators.stats_generator import (
    compute_engine_stats,
    compute_overall_stats,
    find_top_engine,
)
from search_eval.models.model_config import SearchEngine
from search_eval.presentation.render import (
    config_table,
    dimensions_table,
    engine_results_panel,
    log_table,
    overview_table,
    progress_text,
    trends_table,
)
from search_eval.presentation.stream_logs import build_log_entries
from search_eval.state import AppState, StateError

app = typer.Typer(
    name="search-eval",
    help="search-eval - Compare search engines by grading their results with a scoring model",
)

console = Console()

WEB_APP_PATH = Path(__file__).parent / "presentation" / "web_app.py"


def _known_engines() -> list[SearchEngine]:
    return [SearchEngine(**engine) for engine in DEFAULT_SEARCH_ENGINES + OPTIONAL_SEARCH_ENGINES]


def _select_engines(codes: list[str] | None) -> list[SearchEngine]:
    """Resolve engine codes; defaults when none are given."""
    if not codes:
        return [SearchEngine(**engine) for engine in DEFAULT_SEARCH_ENGINES]

    known = {engine.code: engine for engine in _known_engines()}
    unknown = [code for code in codes if code not in known]
    if unknown:
        raise StateError(f"Unknown engine code(s): {', '.join(unknown)}")
    return [known[code] for code in codes]


def _select_dimensions(state: AppState, names: list[str] | None) -> None:
    """Enable exactly the named dimensions, adding any that are not defaults."""
    if not names:
        return

    for name in names:
        if not any(dimension.name == name for dimension in state.dimensions):
            state.add_dimension(name)

    for dimension in list(state.dimensions):
        if dimension.enabled != (dimension.name in names):
            state.toggle_dimension(dimension.id)


@app.command()
def run(
    query: str = typer.Option(None, "--query", "-q", help="Single query to evaluate"),
    batch_file: Path = typer.Option(None, "--batch-file", "-b", help="File with one query per line"),
    engine: list[str] = typer.Option(None, "--engine", "-e", help="Engine code (repeatable)"),
    dimension: list[str] = typer.Option(None, "--dimension", "-d", help="Dimension name (repeatable)"),
    rounds: int = typer.Option(DEFAULT_ROUNDS, "--rounds", "-r", help="Evaluation rounds per engine"),
    scoring_system: str = typer.Option(
        BINARY_SCORING_SYSTEM, "--scoring-system", "-s", help="Scoring system (binary, fivePoint)"
    ),
    stream: bool = typer.Option(False, "--stream/--no-stream", help="Stream scoring responses"),
    delay: float = typer.Option(None, "--delay", help="Seconds between scoring calls"),
    output: Path = typer.Option(None, "--output", "-o", help="Write results as JSON"),
) -> None:
    """Run an evaluation and show results and summary."""
    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not query and not batch_file:
        console.print("[red]Error:[/red] Must specify --query or --batch-file")
        raise typer.Exit(1)

    try:
        state = AppState(engines=_select_engines(engine))
        state.single_query = query or ""
        if batch_file:
            state.batch_queries = batch_file.read_text(encoding="utf-8")
        state.set_rounds(rounds)
        state.select_scoring_system(scoring_system)
        _select_dimensions(state, dimension)
    except (StateError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    try:
        config = load_evaluation_config(
            scoring_system=scoring_system,
            stream=stream,
            scoring_delay_seconds=delay,
        )
    except ValidationError as e:
        for error in e.errors():
            field_name = ".".join(str(part) for part in error["loc"])
            console.print(f"[red]Error:[/red] {field_name}: {error['msg']}")
        raise typer.Exit(1)
    queries = state.collect_queries()

    console.print(config_table(state.engines, state.dimensions, config, state.rounds))
    console.print(f"\n[bold]Evaluating {len(queries)} queries...[/bold]\n")

    async def run_evaluation():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            console=console,
        ) as progress:
            task = progress.add_task("Searching...", total=100)

            def on_progress(update):
                state.handle_progress(update)
                progress.update(task, completed=update.progress, description=progress_text(update))

            return await run_batch_evaluation(
                queries,
                state.engines,
                state.dimensions_with_prompts(),
                config,
                state.rounds,
                on_progress=on_progress,
                on_search_result=state.handle_search_result,
                on_stream_message=state.handle_stream_message if stream else None,
                scoring_systems=state.scoring_systems,
            )

    try:
        results = asyncio.run(run_evaluation())
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    state.set_results(results)
    scoring = state.get_scoring_system(state.scoring_system)

    console.print(f"\n[bold green]Evaluation complete![/bold green] {len(results)} results\n")

    for search_engine in state.engines:
        console.print(
            engine_results_panel(search_engine, state.dimensions, results, state.rounds, scoring.max_score)
        )

    enabled = state.enabled_dimensions()
    engine_stats = compute_engine_stats(state.engines, enabled, results)
    overall = compute_overall_stats(state.engines, results, engine_stats)

    console.print()
    console.print(overview_table(engine_stats, overall, find_top_engine(engine_stats), scoring))
    console.print(trends_table(engine_stats))
    console.print(dimensions_table(engine_stats, enabled, scoring))

    if stream:
        console.print(log_table(build_log_entries(state.search_events, state.stream_messages)))

    if output:
        data = [result.model_dump(mode="json") for result in results]
        output.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        console.print(f"[green]Exported {len(results)} results to {output}[/green]")


@app.command()
def engines() -> None:
    """List known search engines."""
    default_codes = {engine["code"] for engine in DEFAULT_SEARCH_ENGINES}

    table = Table(title="Search Engines")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Code", style="bold")
    table.add_column("Name")
    table.add_column("Default", justify="center")

    for search_engine in _known_engines():
        table.add_row(
            str(search_engine.id),
            search_engine.code,
            search_engine.name,
            "[green]✓[/green]" if search_engine.code in default_codes else "",
        )

    console.print(table)


@app.command()
def dimensions() -> None:
    """List default evaluation dimensions."""
    state = AppState()

    table = Table(title="Dimensions")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Weight", justify="right", style="magenta")
    table.add_column("Enabled", justify="center")

    for item in state.dimensions:
        table.add_row(str(item.id), item.name, f"{item.weight:g}", "✓" if item.enabled else "")

    console.print(table)


@app.command()
def prompts(
    scoring_system: str = typer.Option(
        BINARY_SCORING_SYSTEM, "--scoring-system", "-s", help="Scoring system (binary, fivePoint)"
    ),
) -> None:
    """Show the default grading prompt per dimension."""
    templates = DEFAULT_PROMPT_TEMPLATES.get(scoring_system)
    if templates is None:
        valid = ", ".join(DEFAULT_PROMPT_TEMPLATES)
        console.print(f"[red]Error:[/red] Unknown scoring system '{scoring_system}'. Must be: {valid}")
        raise typer.Exit(1)

    table = Table(title=f"Prompt Templates ({scoring_system})")
    table.add_column("Dimension", style="cyan")
    table.add_column("Prompt")

    for name, template in templates.items():
        table.add_row(name, template)

    console.print(table)


@app.command()
def web(
    port: int = typer.Option(8501, "--port", "-p", help="Port for the web app"),
) -> None:
    """Launch the Streamlit web app."""
    console.print(f"[bold]Starting web app on port {port}...[/bold]")
    result = subprocess.run(
        [sys.executable, "-m", "streamlit", "run", str(WEB_APP_PATH), "--server.port", str(port)]
    )
    if result.returncode != 0:
        raise typer.Exit(result.returncode)


if __name__ == "__main__":
    app()
