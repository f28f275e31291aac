"""Best-effort numeric score extraction from free-text model output."""

import logging
import re

from search_eval.consts import FINAL_SCORE_LABEL

logger = logging.getLogger(__name__)

FINAL_SCORE_PATTERN = re.compile(
    rf"{FINAL_SCORE_LABEL}[：:]\s*(\d+(?:\.\d+)?)",
    re.IGNORECASE,
)
NUMBER_PATTERN = re.compile(r"\d+(?:\.\d+)?")


def extract_score(text: str | None) -> float:
    """Extract a score from the model's answer.

    Order of precedence:
    1. The number after the labeled "最终得分：" / "最终得分:" line
    2. The first bare number anywhere in the text
    3. 0.0

    No check is made that the number lies inside the scoring range.

    Args:
        text: The model's answer.

    Returns:
        Extracted score.
    """
    if not text:
        return 0.0

    labeled = FINAL_SCORE_PATTERN.search(text)
    if labeled:
        return float(labeled.group(1))

    bare = NUMBER_PATTERN.search(text)
    if bare:
        logger.debug(f"No labeled score found, using first number: {bare.group(0)}")
        return float(bare.group(0))

    logger.debug("No number found in model answer, scoring 0")
    return 0.0
