"""Checks run before an evaluation starts, plus batch query parsing."""

import logging
from collections.abc import Sequence

from search_eval.models.model_config import Dimension, EvaluationConfig, ScoringSystem, SearchEngine

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised before any API call when a run cannot start."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


def parse_batch_queries(text: str) -> list[str]:
    """Split batch input into queries: one per line, trimmed, blanks dropped.

    Example:
        >>> parse_batch_queries("q1\\n \\nq2\\n")
        ['q1', 'q2']
    """
    return [line.strip() for line in text.split("\n") if line.strip()]


def validate_evaluation_config(config: EvaluationConfig) -> list[str]:
    """Return a list of problems with the endpoint settings (empty if valid)."""
    errors = []

    if not config.evaluation_url.strip():
        errors.append("Evaluation API URL is required")
    if not config.api_key.strip():
        errors.append("API key is required")
    if not config.model_key.strip():
        errors.append("Model key is required")
    if not config.websearch_url.strip():
        errors.append("WebSearch API URL is required")

    return errors


def resolve_scoring_system(key: str, scoring_systems: Sequence[ScoringSystem]) -> ScoringSystem | None:
    """Look up a scoring system by key."""
    for system in scoring_systems:
        if system.key == key:
            return system
    return None


def preflight(
    queries: Sequence[str],
    engines: Sequence[SearchEngine],
    dimensions: Sequence[Dimension],
    config: EvaluationConfig,
    scoring_systems: Sequence[ScoringSystem],
) -> ScoringSystem:
    """Validate everything a run needs before the first call goes out.

    Returns:
        The scoring system selected by ``config.scoring_system``.

    Raises:
        ConfigurationError: Listing every problem found.
    """
    errors = validate_evaluation_config(config)

    if not queries:
        errors.append("At least one query is required")
    if not engines:
        errors.append("At least one search engine is required")
    if not any(dimension.enabled for dimension in dimensions):
        errors.append("At least one enabled dimension is required")

    scoring_system = resolve_scoring_system(config.scoring_system, scoring_systems)
    if scoring_system is None:
        errors.append(f"Unknown scoring system: {config.scoring_system}")

    if errors:
        logger.error(f"Evaluation preflight failed: {'; '.join(errors)}")
        raise ConfigurationError(errors)

    return scoring_system
