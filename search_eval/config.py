"""Environment-driven settings.

Every setting has a default in consts; the environment variables below
override it, and CLI options override the environment.

- SEARCH_EVAL_WEBSEARCH_URL
- SEARCH_EVAL_EVALUATION_URL
- SEARCH_EVAL_API_KEY
- SEARCH_EVAL_MODEL
- SEARCH_EVAL_SCORING_DELAY (seconds)
"""

import logging
import math
import os

from search_eval.consts import (
    DEFAULT_EVALUATION_URL,
    DEFAULT_MODEL_KEY,
    DEFAULT_WEBSEARCH_URL,
    SCORING_DELAY_SECONDS,
)
from search_eval.models.model_config import ApiConfig, EvaluationConfig

logger = logging.getLogger(__name__)


def _env(name: str, default: str) -> str:
    value = os.getenv(name, "").strip()
    return value or default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default
    if not math.isfinite(value) or value < 0:
        logger.warning(f"Ignoring out-of-range {name}={raw!r}, using {default}")
        return default
    return value


def load_api_config() -> ApiConfig:
    """Endpoint settings from the environment."""
    return ApiConfig(
        websearch_url=_env("SEARCH_EVAL_WEBSEARCH_URL", DEFAULT_WEBSEARCH_URL),
        evaluation_url=_env("SEARCH_EVAL_EVALUATION_URL", DEFAULT_EVALUATION_URL),
        api_key=_env("SEARCH_EVAL_API_KEY", ""),
        model_key=_env("SEARCH_EVAL_MODEL", DEFAULT_MODEL_KEY),
    )


def load_evaluation_config(**overrides) -> EvaluationConfig:
    """Run settings from the environment, with explicit overrides applied last.

    Overrides whose value is None are ignored so unset CLI options fall
    through to the environment.
    """
    api = load_api_config()
    settings = api.model_dump()
    settings["scoring_delay_seconds"] = _env_float("SEARCH_EVAL_SCORING_DELAY", SCORING_DELAY_SECONDS)
    settings.update({key: value for key, value in overrides.items() if value is not None})
    return EvaluationConfig(**settings)
