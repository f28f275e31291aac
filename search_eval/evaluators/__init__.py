"""Evaluators for grading search results across dimensions.

Each enabled dimension is graded by the scoring model; the answers are turned
into numbers and combined into a weighted score per (query, engine, round):
- Prompt building (query + results + dimension instruction + score range)
- Score extraction (labeled score, first number, or 0)
- Weighted average over the dimensions actually scored
- Summary statistics for the result and summary views
"""

from search_eval.evaluators.composite import calculate_weighted_score
from search_eval.evaluators.prompt_builder import (
    build_evaluation_prompt,
    dimension_instruction,
    format_search_results,
)
from search_eval.evaluators.score_parser import extract_score
from search_eval.evaluators.stats_generator import (
    compute_engine_stats,
    compute_overall_stats,
    engine_average_score,
    engine_round_progress,
    find_top_engine,
    results_for_engine,
    score_bar,
    trend_heights,
)

__all__ = [
    # Prompting
    "build_evaluation_prompt",
    "dimension_instruction",
    "format_search_results",
    # Scoring
    "calculate_weighted_score",
    "extract_score",
    # Statistics
    "compute_engine_stats",
    "compute_overall_stats",
    "engine_average_score",
    "engine_round_progress",
    "find_top_engine",
    "results_for_engine",
    "score_bar",
    "trend_heights",
]
