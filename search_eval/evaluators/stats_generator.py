"""Summary statistics over evaluation results.

Feeds the results and summary views:
- per-engine averages, per-dimension averages and score history
- the top-ranked engine
- overall totals across the run
- trend-bar heights and score-bar colour bands
"""

import logging
from collections.abc import Sequence

from search_eval.consts import SCORE_BAR_FAIR, SCORE_BAR_GOOD, TREND_MIN_HEIGHT
from search_eval.models.model_config import Dimension, SearchEngine
from search_eval.models.model_eval import EvaluationResult
from search_eval.models.model_summary import EngineStats, OverallStats

logger = logging.getLogger(__name__)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def results_for_engine(
    results: Sequence[EvaluationResult], engine_id: int
) -> list[EvaluationResult]:
    """Return the results produced by one engine, in list order."""
    return [result for result in results if result.engine_id == engine_id]


def compute_engine_stats(
    engines: Sequence[SearchEngine],
    dimensions: Sequence[Dimension],
    results: Sequence[EvaluationResult],
) -> list[EngineStats]:
    """Compute statistics for each configured engine.

    A dimension missing from a result's scores counts as 0 in that
    dimension's average.

    Args:
        engines: Engines to report on (one entry each, even without results).
        dimensions: Dimensions to average.
        results: All evaluation results.

    Returns:
        One EngineStats per engine, in engine order.
    """
    stats = []
    for engine in engines:
        engine_results = results_for_engine(results, engine.id)

        dimension_scores = {
            dimension.name: _mean([r.scores.get(dimension.name, 0.0) for r in engine_results])
            for dimension in dimensions
        }
        history = [
            r.weighted_score for r in sorted(engine_results, key=lambda r: r.timestamp)
        ]

        stats.append(
            EngineStats(
                engine_id=engine.id,
                engine_name=engine.name,
                average_score=_mean([r.weighted_score for r in engine_results]),
                total_rounds=len(engine_results),
                dimension_scores=dimension_scores,
                score_history=history,
            )
        )

    logger.debug(f"Computed stats for {len(stats)} engines from {len(results)} results")
    return stats


def find_top_engine(engine_stats: Sequence[EngineStats]) -> EngineStats | None:
    """Return the engine with the highest average; the first one wins ties."""
    top = None
    for stats in engine_stats:
        if top is None or stats.average_score > top.average_score:
            top = stats
    return top


def compute_overall_stats(
    engines: Sequence[SearchEngine],
    results: Sequence[EvaluationResult],
    engine_stats: Sequence[EngineStats],
) -> OverallStats:
    """Totals across the whole run."""
    return OverallStats(
        total_evaluations=len(results),
        average_score=_mean([s.average_score for s in engine_stats]),
        unique_queries=len({r.query for r in results}),
        active_engines=len(engines),
    )


def engine_average_score(results: Sequence[EvaluationResult], engine_id: int) -> float:
    """Mean weighted score of one engine, 0.0 when it has no results."""
    return _mean([r.weighted_score for r in results_for_engine(results, engine_id)])


def engine_round_progress(
    results: Sequence[EvaluationResult], engine_id: int, total_rounds: int
) -> str:
    """Completed rounds for an engine as 'done/total'."""
    return f"{len(results_for_engine(results, engine_id))}/{total_rounds}"


def trend_heights(score_history: Sequence[float]) -> list[float] | None:
    """Bar heights (percent) for a mini trend chart.

    Heights are scaled between the history's min and max and floored at
    TREND_MIN_HEIGHT so every bar stays visible.

    Returns:
        One height per score, or None when there are fewer than two scores.
    """
    if len(score_history) < 2:
        return None

    high = max(score_history)
    low = min(score_history)
    spread = (high - low) or 1.0

    return [max((score - low) / spread * 100, TREND_MIN_HEIGHT) for score in score_history]


def score_bar(score: float, max_score: float = 5.0) -> tuple[float, str]:
    """Fill percentage (capped at 100) and colour band for a score bar."""
    percentage = (score / max_score) * 100 if max_score > 0 else 0.0
    if percentage >= SCORE_BAR_GOOD:
        color = "green"
    elif percentage >= SCORE_BAR_FAIR:
        color = "yellow"
    else:
        color = "red"
    return min(percentage, 100.0), color
