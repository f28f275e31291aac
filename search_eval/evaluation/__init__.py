"""Evaluation runs: preflight checks and the search/score orchestration."""

from search_eval.evaluation.orchestrator import (
    EvaluationOrchestrator,
    default_scoring_systems,
    run_batch_evaluation,
    run_single_evaluation,
)
from search_eval.evaluation.validation import (
    ConfigurationError,
    parse_batch_queries,
    preflight,
    resolve_scoring_system,
    validate_evaluation_config,
)

__all__ = [
    # Orchestration
    "EvaluationOrchestrator",
    "default_scoring_systems",
    "run_batch_evaluation",
    "run_single_evaluation",
    # Validation
    "ConfigurationError",
    "parse_batch_queries",
    "preflight",
    "resolve_scoring_system",
    "validate_evaluation_config",
]
