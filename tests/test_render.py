"""Tests for rich renderables."""

from io import StringIO

from rich.console import Console

from search_eval.evaluators.stats_generator import compute_engine_stats, compute_overall_stats, find_top_engine
from search_eval.models.model_config import EvaluationConfig, ScoringSystem
from search_eval.models.model_eval import EvaluationProgress, SearchResultEvent
from search_eval.presentation.render import (
    config_table,
    dimensions_table,
    engine_results_panel,
    overview_table,
    progress_text,
    score_bar_text,
    search_results_table,
    sparkline,
    trends_table,
)


def render(renderable) -> str:
    console = Console(file=StringIO(), width=200, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


class TestHelpers:
    def test_sparkline(self) -> None:
        assert sparkline([1.0]) == "insufficient data"
        assert sparkline([0.0, 2.0]) == "▂█"

    def test_score_bar_text(self) -> None:
        text = score_bar_text(5.0, 5.0)

        assert text.plain.startswith("█" * 20)
        assert text.plain.endswith("5.00")

    def test_progress_text(self) -> None:
        assert progress_text(None) == "Idle"
        progress = EvaluationProgress(
            current_engine="Std", current_round=2, total_rounds=3, current_dimension="相关性", progress=40
        )
        assert progress_text(progress) == "Std - round 2/3 - 相关性 (40%)"


class TestTables:
    def test_config_table_masks_key(self, engines, dimensions) -> None:
        config = EvaluationConfig(api_key="sk-secret-value")

        output = render(config_table(engines, dimensions, config, 3))

        assert "search_std" in output
        assert "sk-s" in output
        assert "secret-value" not in output

    def test_engine_results_panel(self, engines, dimensions, make_result) -> None:
        results = [make_result(engine_id=1, scores={"权威性": 2.0}, weighted_score=2.0)]

        output = render(engine_results_panel(engines[0], dimensions, results, total_rounds=3, max_score=2.0))

        assert "Standard" in output
        assert "Rounds 1/3" in output
        assert "2.00" in output

    def test_engine_without_results(self, engines, dimensions) -> None:
        output = render(engine_results_panel(engines[1], dimensions, [], total_rounds=3))

        assert "No results yet" in output
        assert "Rounds 0/3" in output

    def test_search_results_table(self, search_items) -> None:
        event = SearchResultEvent(engine_id=1, engine_name="Std", query="q", search_results=search_items)

        output = render(search_results_table(event))

        assert "Result 1" in output
        assert "5 results" in output

    def test_summary_tables(self, engines, dimensions, make_result) -> None:
        results = [
            make_result(engine_id=1, weighted_score=1.0, offset_seconds=1),
            make_result(engine_id=1, weighted_score=2.0, offset_seconds=2),
        ]
        stats = compute_engine_stats(engines, dimensions, results)
        overall = compute_overall_stats(engines, results, stats)
        system = ScoringSystem(key="binary", label="b", min_score=0, max_score=2)

        overview = render(overview_table(stats, overall, find_top_engine(stats), system))
        trends = render(trends_table(stats))
        dims = render(dimensions_table(stats, dimensions, system))

        assert "Top engine" in overview
        assert "Standard" in overview
        assert "insufficient data" in trends
        assert "1.00, 2.00" in trends
        assert "权威性" in dims
