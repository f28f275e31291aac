"""Grading prompt construction."""

from collections.abc import Sequence

from search_eval.consts import DIMENSION_PROMPT_FALLBACK, FINAL_SCORE_LABEL
from search_eval.models.model_config import Dimension, ScoringSystem
from search_eval.models.model_search import SearchResultItem


def dimension_instruction(dimension: Dimension) -> str:
    """Return the dimension's own prompt or the generic fallback."""
    return dimension.prompt or DIMENSION_PROMPT_FALLBACK.format(name=dimension.name)


def format_search_results(results: Sequence[SearchResultItem]) -> str:
    """Render results as a numbered list of title/link/snippet blocks."""
    return "\n".join(
        f"{index}. 标题: {result.title}\n   链接: {result.url}\n   摘要: {result.snippet}\n"
        for index, result in enumerate(results, 1)
    )


def build_evaluation_prompt(
    query: str,
    results: Sequence[SearchResultItem],
    dimension_prompt: str,
    scoring_system: ScoringSystem,
) -> str:
    """Build the user prompt asking the model to grade one result set.

    Args:
        query: The search query.
        results: Result list returned by the engine.
        dimension_prompt: Dimension-specific grading instruction.
        scoring_system: Range convention (e.g. 0-2 or 1-5).

    Returns:
        Prompt text requesting a final score line.

    Raises:
        ValueError: If there are no results to grade.
    """
    if not results:
        raise ValueError("Search results are empty, nothing to grade")

    score_range = scoring_system.score_range

    return f"""你是一个专业的搜索引擎评测专家。请按照以下要求对搜索结果进行评分：

查询内容：{query}

搜索结果：
{format_search_results(results)}

评测维度：{dimension_prompt}

请按照以下结构化格式输出你的评测结果：

## 评测分析
[请从{dimension_prompt}的角度详细评价搜索结果，说明评分理由]

## 得分结果
评分范围：{score_range}
{FINAL_SCORE_LABEL}：[具体数字分数]

注意：{FINAL_SCORE_LABEL}必须是{score_range}范围内的数字，请确保在"{FINAL_SCORE_LABEL}："后面给出明确的数字分数。"""
