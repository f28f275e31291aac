"""Runs search + scoring across queries, engines and rounds with progress callbacks."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from search_eval.clients.evaluation_api import EvaluationClient
from search_eval.clients.rate_limiter import RequestPacer
from search_eval.clients.web_search import WebSearchClient
from search_eval.consts import DEFAULT_SCORING_SYSTEMS, PROGRESS_COMPLETE_LABEL, SCORING_SYSTEM_MESSAGE
from search_eval.evaluation.validation import preflight
from search_eval.evaluators.composite import calculate_weighted_score
from search_eval.evaluators.prompt_builder import build_evaluation_prompt, dimension_instruction
from search_eval.evaluators.score_parser import extract_score
from search_eval.models.model_config import Dimension, EvaluationConfig, ScoringSystem, SearchEngine
from search_eval.models.model_eval import (
    EvaluationProgress,
    EvaluationResult,
    SearchResultEvent,
    StreamMessage,
)
from search_eval.models.model_search import (
    ChatMessage,
    EvaluationRequest,
    SearchResultItem,
    WebSearchRequest,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[EvaluationProgress], None]
SearchResultCallback = Callable[[SearchResultEvent], None]
StreamMessageCallback = Callable[[StreamMessage], None]


def default_scoring_systems() -> list[ScoringSystem]:
    return [ScoringSystem(**system) for system in DEFAULT_SCORING_SYSTEMS]


def _notify(callback: Callable[[Any], None] | None, payload: Any) -> None:
    """Invoke an observer; a failing observer never breaks the run."""
    if callback is None:
        return
    try:
        callback(payload)
    except Exception as e:
        logger.warning(f"Callback {getattr(callback, '__name__', callback)!r} failed: {e}")


def _stream_forwarder(
    on_stream_message: StreamMessageCallback | None,
    engine_name: str | None,
    query: str,
    dimension_name: str,
) -> Callable[[str], None] | None:
    """Wrap raw chunks into StreamMessages tagged with their origin."""
    if on_stream_message is None:
        return None

    def forward(chunk: str) -> None:
        _notify(
            on_stream_message,
            StreamMessage(message=chunk, engine=engine_name, query=query, dimension=dimension_name),
        )

    return forward


class EvaluationOrchestrator:
    """Sequences search and scoring calls for a batch of queries.

    Searches for one query run concurrently across engines; scoring calls run
    strictly one at a time, separated by the pacer's fixed delay.
    """

    def __init__(
        self,
        search_client: WebSearchClient,
        evaluation_client: EvaluationClient,
        config: EvaluationConfig,
        scoring_systems: Sequence[ScoringSystem] | None = None,
        pacer: RequestPacer | None = None,
    ):
        """Initialize EvaluationOrchestrator.

        Args:
            search_client: Client for the web search endpoint
            evaluation_client: Client for the scoring endpoint
            config: Run settings (endpoints, scoring system, sampling)
            scoring_systems: Known scoring systems (default: binary and five-point)
            pacer: Delay between scoring calls (default: from config)
        """
        self.search_client = search_client
        self.evaluation_client = evaluation_client
        self.config = config
        self.scoring_systems = list(scoring_systems) if scoring_systems else default_scoring_systems()
        self.pacer = pacer or RequestPacer(config.scoring_delay_seconds)

    async def search_engine(
        self,
        query: str,
        engine: SearchEngine,
        on_search_result: SearchResultCallback | None = None,
    ) -> list[SearchResultItem] | None:
        """Search one engine; None when the call failed."""
        request = WebSearchRequest(
            search_query=query,
            search_engine=engine.code,
            count=self.config.search_count,
        )
        try:
            response = await self.search_client.search(request)
        except Exception as e:
            logger.error(f"Search failed for query='{query}' engine={engine.name}: {e}")
            return None

        _notify(
            on_search_result,
            SearchResultEvent(
                engine_id=engine.id,
                engine_name=engine.name,
                query=query,
                search_results=response.results,
            ),
        )
        return response.results

    async def _search_all(
        self,
        query: str,
        engines: Sequence[SearchEngine],
        on_search_result: SearchResultCallback | None,
    ) -> list[tuple[SearchEngine, list[SearchResultItem]]]:
        """Search every engine concurrently, keeping engine order and dropping failures."""
        responses = await asyncio.gather(
            *[self.search_engine(query, engine, on_search_result) for engine in engines]
        )
        succeeded = [
            (engine, results)
            for engine, results in zip(engines, responses)
            if results is not None
        ]
        skipped = len(engines) - len(succeeded)
        if skipped:
            logger.warning(f"Skipping {skipped} engine(s) for query='{query}' after failed search")
        return succeeded

    async def score_dimension(
        self,
        query: str,
        search_results: Sequence[SearchResultItem],
        dimension: Dimension,
        scoring_system: ScoringSystem,
        engine_name: str | None = None,
        on_stream_message: StreamMessageCallback | None = None,
    ) -> float:
        """Grade one result set on one dimension.

        Any failure is logged and scores the dimension 0.
        """
        try:
            prompt = build_evaluation_prompt(
                query,
                search_results,
                dimension_instruction(dimension),
                scoring_system,
            )
            request = EvaluationRequest(
                messages=[
                    ChatMessage(role="system", content=SCORING_SYSTEM_MESSAGE),
                    ChatMessage(role="user", content=prompt),
                ],
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
                stream=self.config.stream,
            )

            on_chunk = _stream_forwarder(on_stream_message, engine_name, query, dimension.name)

            await self.pacer.wait()
            response = await self.evaluation_client.evaluate(request, on_chunk=on_chunk)
            score = extract_score(response.content)
            logger.debug(f"{engine_name} / {dimension.name} / '{query}': {score}")
            return score
        except Exception as e:
            logger.error(f"Scoring failed for dimension {dimension.name} (engine={engine_name}): {e}")
            return 0.0

    async def evaluate_with_search_results(
        self,
        query: str,
        engine: SearchEngine,
        search_results: Sequence[SearchResultItem],
        dimensions: Sequence[Dimension],
        round_number: int,
        scoring_system: ScoringSystem,
        on_dimension: Callable[[Dimension], None] | None = None,
        on_stream_message: StreamMessageCallback | None = None,
    ) -> EvaluationResult:
        """Score every enabled dimension sequentially and build one result.

        Args:
            query: The search query
            engine: Engine that produced the results
            search_results: Results already fetched for this query/engine
            dimensions: Dimension configuration (disabled ones are skipped)
            round_number: 1-based round
            scoring_system: Range convention for the prompt
            on_dimension: Called before each dimension is scored
            on_stream_message: Observer for streamed chunks

        Returns:
            EvaluationResult with per-dimension and weighted scores
        """
        enabled = [d for d in dimensions if d.enabled]
        scores: dict[str, float] = {}

        for dimension in enabled:
            _notify(on_dimension, dimension)
            scores[dimension.name] = await self.score_dimension(
                query,
                search_results,
                dimension,
                scoring_system,
                engine_name=engine.name,
                on_stream_message=on_stream_message,
            )

        weighted = calculate_weighted_score(scores, enabled)
        logger.info(f"✓ {engine.name} round {round_number} '{query}': {weighted:.2f}")

        return EvaluationResult(
            engine_id=engine.id,
            engine_name=engine.name,
            query=query,
            round=round_number,
            search_results=list(search_results),
            scores=scores,
            weighted_score=weighted,
        )

    async def run_batch(
        self,
        queries: Sequence[str],
        engines: Sequence[SearchEngine],
        dimensions: Sequence[Dimension],
        rounds: int,
        on_progress: ProgressCallback | None = None,
        on_search_result: SearchResultCallback | None = None,
        on_stream_message: StreamMessageCallback | None = None,
    ) -> list[EvaluationResult]:
        """Evaluate all queries against all engines for the given number of rounds.

        Progress is reported as completed (engine, round) pairs over
        queries × engines × rounds. Per-round values are capped at 99 so that
        the final "complete" notification is the only one at 100.

        Raises:
            ConfigurationError: If the run cannot start. Nothing else escapes.
        """
        scoring_system = preflight(queries, engines, dimensions, self.config, self.scoring_systems)
        self.pacer.reset()

        results: list[EvaluationResult] = []
        total_tasks = len(queries) * len(engines) * rounds
        completed = 0

        def percent() -> int:
            return min(round(completed / total_tasks * 100), 99) if total_tasks else 0

        logger.info(
            f"Starting evaluation: {len(queries)} queries x {len(engines)} engines x {rounds} rounds "
            f"({scoring_system.key})"
        )

        for query in queries:
            searched = await self._search_all(query, engines, on_search_result)

            for engine, search_results in searched:
                for round_number in range(1, rounds + 1):

                    def on_dimension(dimension: Dimension) -> None:
                        _notify(
                            on_progress,
                            EvaluationProgress(
                                current_engine=engine.name,
                                current_round=round_number,
                                total_rounds=rounds,
                                current_dimension=dimension.name,
                                progress=percent(),
                            ),
                        )

                    try:
                        result = await self.evaluate_with_search_results(
                            query,
                            engine,
                            search_results,
                            dimensions,
                            round_number,
                            scoring_system,
                            on_dimension=on_dimension if on_progress else None,
                            on_stream_message=on_stream_message,
                        )
                        results.append(result)
                    except Exception as e:
                        logger.error(
                            f"Evaluation failed for query='{query}' engine={engine.name} "
                            f"round={round_number}: {e}"
                        )

                    completed += 1
                    _notify(
                        on_progress,
                        EvaluationProgress(
                            current_engine=engine.name,
                            current_round=round_number,
                            total_rounds=rounds,
                            progress=percent(),
                        ),
                    )

        _notify(
            on_progress,
            EvaluationProgress(
                current_engine=PROGRESS_COMPLETE_LABEL,
                current_round=rounds,
                total_rounds=rounds,
                progress=100,
            ),
        )
        logger.info(f"Evaluation complete: {len(results)} results")
        return results


async def run_batch_evaluation(
    queries: Sequence[str],
    engines: Sequence[SearchEngine],
    dimensions: Sequence[Dimension],
    config: EvaluationConfig,
    rounds: int,
    on_progress: ProgressCallback | None = None,
    on_search_result: SearchResultCallback | None = None,
    on_stream_message: StreamMessageCallback | None = None,
    scoring_systems: Sequence[ScoringSystem] | None = None,
) -> list[EvaluationResult]:
    """Run a batch evaluation with clients built from ``config``."""
    async with (
        WebSearchClient.from_config(config) as search_client,
        EvaluationClient.from_config(config) as evaluation_client,
    ):
        orchestrator = EvaluationOrchestrator(
            search_client,
            evaluation_client,
            config,
            scoring_systems=scoring_systems,
        )
        return await orchestrator.run_batch(
            queries,
            engines,
            dimensions,
            rounds,
            on_progress=on_progress,
            on_search_result=on_search_result,
            on_stream_message=on_stream_message,
        )


async def run_single_evaluation(
    query: str,
    engines: Sequence[SearchEngine],
    dimensions: Sequence[Dimension],
    config: EvaluationConfig,
    rounds: int,
    on_progress: ProgressCallback | None = None,
    on_search_result: SearchResultCallback | None = None,
    on_stream_message: StreamMessageCallback | None = None,
    scoring_systems: Sequence[ScoringSystem] | None = None,
) -> list[EvaluationResult]:
    """Batch evaluation of a single query."""
    return await run_batch_evaluation(
        [query],
        engines,
        dimensions,
        config,
        rounds,
        on_progress=on_progress,
        on_search_result=on_search_result,
        on_stream_message=on_stream_message,
        scoring_systems=scoring_systems,
    )
