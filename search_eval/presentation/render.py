"""Rich renderables for configuration, results, logs and summary views."""

from collections.abc import Sequence

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from search_eval.evaluators.stats_generator import (
    engine_average_score,
    engine_round_progress,
    results_for_engine,
    score_bar,
    trend_heights,
)
from search_eval.models.model_config import Dimension, EvaluationConfig, ScoringSystem, SearchEngine
from search_eval.models.model_eval import EvaluationProgress, EvaluationResult, SearchResultEvent
from search_eval.models.model_summary import EngineStats, LogEntry, LogStatus, OverallStats

SPARK_BLOCKS = "▁▂▃▄▅▆▇█"
BAR_WIDTH = 20


def _truncate(text: str, max_len: int = 60) -> str:
    """Truncate text with ellipsis."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _mask(secret: str) -> str:
    if not secret:
        return "[red]not set[/red]"
    return secret[:4] + "*" * max(len(secret) - 4, 4)


def score_bar_text(score: float, max_score: float = 5.0) -> Text:
    """Horizontal bar coloured by the score band."""
    percentage, color = score_bar(score, max_score)
    filled = round(percentage / 100 * BAR_WIDTH)
    bar = Text("█" * filled, style=color)
    bar.append("░" * (BAR_WIDTH - filled), style="dim")
    bar.append(f" {score:.2f}")
    return bar


def sparkline(score_history: Sequence[float]) -> str:
    heights = trend_heights(score_history)
    if heights is None:
        return "insufficient data"
    last = len(SPARK_BLOCKS) - 1
    return "".join(SPARK_BLOCKS[min(round(h / 100 * last), last)] for h in heights)


def config_table(
    engines: Sequence[SearchEngine],
    dimensions: Sequence[Dimension],
    config: EvaluationConfig,
    rounds: int,
) -> Table:
    table = Table(title="Evaluation Configuration", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Engines", ", ".join(f"{e.name} ({e.code})" for e in engines))
    table.add_row(
        "Dimensions",
        ", ".join(f"{d.name} x{d.weight:g}" for d in dimensions if d.enabled),
    )
    table.add_row("Rounds", str(rounds))
    table.add_row("Scoring system", config.scoring_system)
    table.add_row("Model", config.model_key)
    table.add_row("Search API", config.websearch_url)
    table.add_row("Evaluation API", config.evaluation_url)
    table.add_row("API key", _mask(config.api_key))
    return table


def progress_text(progress: EvaluationProgress | None) -> str:
    if progress is None:
        return "Idle"
    text = (
        f"{progress.current_engine} - round {progress.current_round}/{progress.total_rounds}"
    )
    if progress.current_dimension:
        text += f" - {progress.current_dimension}"
    return f"{text} ({progress.progress}%)"


def search_results_table(event: SearchResultEvent) -> Table:
    """Instant search results for one engine and query."""
    table = Table(title=f"{event.engine_name}: '{event.query}' ({len(event.search_results)} results)")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("URL", style="blue")
    table.add_column("Snippet", style="dim")

    for item in event.search_results:
        table.add_row(str(item.rank), _truncate(item.title, 40), _truncate(item.url, 40), _truncate(item.snippet))
    return table


def engine_results_panel(
    engine: SearchEngine,
    dimensions: Sequence[Dimension],
    results: Sequence[EvaluationResult],
    total_rounds: int,
    max_score: float = 5.0,
) -> Panel:
    """Per-round score details for one engine with its average and round counter."""
    engine_results = results_for_engine(results, engine.id)
    enabled = [d for d in dimensions if d.enabled]

    table = Table(show_edge=False)
    table.add_column("Query", style="cyan")
    table.add_column("Round", justify="right")
    for dimension in enabled:
        table.add_column(dimension.name, justify="right")
    table.add_column("Weighted", justify="right", style="bold")

    for result in engine_results:
        table.add_row(
            _truncate(result.query, 30),
            str(result.round),
            *[f"{result.scores.get(d.name, 0.0):g}" for d in enabled],
            f"{result.weighted_score:.2f}",
        )

    average = engine_average_score(results, engine.id)
    footer = Text("Average ")
    footer.append_text(score_bar_text(average, max_score))

    counter = engine_round_progress(results, engine.id, total_rounds)
    body = Group(table, footer) if engine_results else Text("No results yet", style="dim")
    return Panel(body, title=f"[bold]{engine.name}[/bold]", subtitle=f"Rounds {counter}")


def log_table(entries: Sequence[LogEntry]) -> Table:
    table = Table(title="Logs")
    table.add_column("Time", style="dim")
    table.add_column("Type")
    table.add_column("Engine", style="cyan")
    table.add_column("Query")
    table.add_column("Content")

    status_styles = {
        LogStatus.PENDING: "blue",
        LogStatus.SUCCESS: "green",
        LogStatus.ERROR: "red",
    }
    for entry in entries:
        style = "magenta" if entry.is_stream else status_styles[entry.status]
        content = entry.content
        if entry.details:
            details = "".join(entry.details) if entry.is_stream else "\n".join(entry.details)
            content += "\n" + _truncate(details, 200)
        table.add_row(
            entry.timestamp.strftime("%H:%M:%S"),
            Text(entry.type, style=style),
            entry.engine or "",
            _truncate(entry.query or "", 30),
            content,
        )
    return table


def overview_table(
    engine_stats: Sequence[EngineStats],
    overall: OverallStats,
    top: EngineStats | None,
    scoring_system: ScoringSystem | None = None,
) -> Group:
    max_score = scoring_system.max_score if scoring_system else 5.0

    totals = Table(title="Overview", show_header=False)
    totals.add_column("Metric", style="cyan")
    totals.add_column("Value", justify="right", style="magenta")
    totals.add_row("Evaluations", str(overall.total_evaluations))
    totals.add_row("Average score", f"{overall.average_score:.2f}")
    totals.add_row("Queries", str(overall.unique_queries))
    totals.add_row("Engines", str(overall.active_engines))
    if top is not None:
        totals.add_row("Top engine", f"[bold green]{top.engine_name}[/bold green] ({top.average_score:.2f})")

    ranking = Table(title="Engine Ranking")
    ranking.add_column("Rank", justify="right", style="cyan")
    ranking.add_column("Engine", style="bold")
    ranking.add_column("Rounds", justify="right")
    ranking.add_column("Average")

    ordered = sorted(engine_stats, key=lambda s: s.average_score, reverse=True)
    for rank, stats in enumerate(ordered, 1):
        ranking.add_row(
            str(rank),
            stats.engine_name,
            str(stats.total_rounds),
            score_bar_text(stats.average_score, max_score),
        )

    return Group(totals, ranking)


def trends_table(engine_stats: Sequence[EngineStats]) -> Table:
    table = Table(title="Score Trends")
    table.add_column("Engine", style="bold")
    table.add_column("Trend")
    table.add_column("History", style="dim")

    for stats in engine_stats:
        table.add_row(
            stats.engine_name,
            sparkline(stats.score_history),
            ", ".join(f"{score:.2f}" for score in stats.score_history),
        )
    return table


def dimensions_table(
    engine_stats: Sequence[EngineStats],
    dimensions: Sequence[Dimension],
    scoring_system: ScoringSystem | None = None,
) -> Table:
    max_score = scoring_system.max_score if scoring_system else 5.0

    table = Table(title="Dimension Averages")
    table.add_column("Engine", style="bold")
    for dimension in dimensions:
        table.add_column(f"{dimension.name} ({dimension.weight:g})")

    for stats in engine_stats:
        table.add_row(
            stats.engine_name,
            *[score_bar_text(stats.dimension_scores.get(d.name, 0.0), max_score) for d in dimensions],
        )
    return table
