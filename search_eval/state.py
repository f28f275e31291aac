"""In-memory application state shared by the CLI and the web front end.

All mutation goes through the methods below; views read the fields and call
setters, they never reassign lists directly. Nothing is persisted.
"""

import copy
import logging
from dataclasses import dataclass, field

from search_eval.consts import (
    DEFAULT_DIMENSIONS,
    DEFAULT_PROMPT_TEMPLATES,
    DEFAULT_ROUNDS,
    DEFAULT_SCORING_SYSTEMS,
    DEFAULT_SEARCH_ENGINES,
    NEW_DIMENSION_WEIGHT,
)
from search_eval.evaluation.validation import parse_batch_queries
from search_eval.models.model_config import (
    ApiConfig,
    Dimension,
    EvaluationConfig,
    ScoringSystem,
    SearchEngine,
)
from search_eval.models.model_eval import (
    EvaluationProgress,
    EvaluationResult,
    SearchResultEvent,
    StreamMessage,
)

logger = logging.getLogger(__name__)


class StateError(ValueError):
    """An edit that would leave the application state invalid."""


def _default_engines() -> list[SearchEngine]:
    return [SearchEngine(**engine) for engine in DEFAULT_SEARCH_ENGINES]


def _default_dimensions() -> list[Dimension]:
    return [Dimension(**dimension) for dimension in DEFAULT_DIMENSIONS]


def _default_scoring_systems() -> list[ScoringSystem]:
    return [ScoringSystem(**system) for system in DEFAULT_SCORING_SYSTEMS]


def _next_id(items) -> int:
    return max((item.id for item in items), default=0) + 1


@dataclass
class AppState:
    """Configuration, inputs and live run data for one session."""

    engines: list[SearchEngine] = field(default_factory=_default_engines)
    dimensions: list[Dimension] = field(default_factory=_default_dimensions)
    api_config: ApiConfig = field(default_factory=ApiConfig)
    scoring_systems: list[ScoringSystem] = field(default_factory=_default_scoring_systems)
    prompt_templates: dict[str, dict[str, str]] = field(
        default_factory=lambda: copy.deepcopy(DEFAULT_PROMPT_TEMPLATES)
    )
    scoring_system: str = DEFAULT_SCORING_SYSTEMS[0]["key"]
    rounds: int = DEFAULT_ROUNDS
    single_query: str = ""
    batch_queries: str = ""

    # Run data
    results: list[EvaluationResult] = field(default_factory=list)
    search_events: list[SearchResultEvent] = field(default_factory=list)
    stream_messages: list[StreamMessage] = field(default_factory=list)
    progress: EvaluationProgress | None = None
    is_evaluating: bool = False
    error_message: str = ""

    # -- Engines -------------------------------------------------------------

    def add_engine(self, code: str, name: str) -> SearchEngine:
        """Add an engine; code and name are required and codes are unique."""
        code, name = code.strip(), name.strip()
        if not code or not name:
            raise StateError("Engine code and name are required")
        if any(engine.code == code for engine in self.engines):
            raise StateError(f"Engine code already exists: {code}")

        engine = SearchEngine(id=_next_id(self.engines), code=code, name=name)
        self.engines.append(engine)
        logger.debug(f"Added engine {engine.code} ({engine.name})")
        return engine

    def update_engine(self, engine_id: int, code: str | None = None, name: str | None = None) -> SearchEngine:
        index = self._engine_index(engine_id)
        engine = self.engines[index]

        update = {}
        if code is not None:
            code = code.strip()
            if not code:
                raise StateError("Engine code cannot be empty")
            if any(e.code == code and e.id != engine_id for e in self.engines):
                raise StateError(f"Engine code already exists: {code}")
            update["code"] = code
        if name is not None:
            name = name.strip()
            if not name:
                raise StateError("Engine name cannot be empty")
            update["name"] = name

        self.engines[index] = engine.model_copy(update=update)
        return self.engines[index]

    def delete_engine(self, engine_id: int) -> None:
        """Remove an engine; the last one cannot be removed."""
        index = self._engine_index(engine_id)
        if len(self.engines) <= 1:
            raise StateError("At least one search engine must remain")
        del self.engines[index]

    def _engine_index(self, engine_id: int) -> int:
        for index, engine in enumerate(self.engines):
            if engine.id == engine_id:
                return index
        raise StateError(f"Unknown engine id: {engine_id}")

    # -- Dimensions ----------------------------------------------------------

    def add_dimension(self, name: str, weight: float = NEW_DIMENSION_WEIGHT) -> Dimension:
        """Add an enabled dimension with a unique, non-blank name."""
        name = name.strip()
        if not name:
            raise StateError("Dimension name is required")
        if any(dimension.name == name for dimension in self.dimensions):
            raise StateError(f"Dimension already exists: {name}")

        dimension = Dimension(id=_next_id(self.dimensions), name=name, weight=weight)
        self.dimensions.append(dimension)
        return dimension

    def delete_dimension(self, dimension_id: int) -> None:
        index = self._dimension_index(dimension_id)
        if len(self.dimensions) <= 1:
            raise StateError("At least one dimension must remain")
        del self.dimensions[index]

    def toggle_dimension(self, dimension_id: int) -> Dimension:
        index = self._dimension_index(dimension_id)
        dimension = self.dimensions[index]
        self.dimensions[index] = dimension.model_copy(update={"enabled": not dimension.enabled})
        return self.dimensions[index]

    def update_dimension_weight(self, dimension_id: int, weight: float) -> Dimension:
        if not 0.0 <= weight <= 1.0:
            raise StateError(f"Weight must be between 0 and 1, got {weight}")
        index = self._dimension_index(dimension_id)
        self.dimensions[index] = self.dimensions[index].model_copy(update={"weight": weight})
        return self.dimensions[index]

    def rename_dimension(self, dimension_id: int, name: str) -> Dimension:
        """Rename a dimension and carry its prompt templates over to the new name."""
        name = name.strip()
        if not name:
            raise StateError("Dimension name is required")
        index = self._dimension_index(dimension_id)
        old_name = self.dimensions[index].name
        if name != old_name and any(d.name == name for d in self.dimensions):
            raise StateError(f"Dimension already exists: {name}")

        for templates in self.prompt_templates.values():
            if old_name in templates:
                templates[name] = templates.pop(old_name)

        self.dimensions[index] = self.dimensions[index].model_copy(update={"name": name})
        return self.dimensions[index]

    def enabled_dimensions(self) -> list[Dimension]:
        return [dimension for dimension in self.dimensions if dimension.enabled]

    def _dimension_index(self, dimension_id: int) -> int:
        for index, dimension in enumerate(self.dimensions):
            if dimension.id == dimension_id:
                return index
        raise StateError(f"Unknown dimension id: {dimension_id}")

    # -- Scoring systems and prompt templates --------------------------------

    def add_scoring_system(self, key: str, label: str, min_score: float, max_score: float) -> ScoringSystem:
        """Register a scoring system with an empty template table."""
        key, label = key.strip(), label.strip()
        if not key or not label:
            raise StateError("Scoring system key and label are required")
        if any(system.key == key for system in self.scoring_systems):
            raise StateError(f"Scoring system already exists: {key}")
        if min_score >= max_score:
            raise StateError("Minimum score must be below maximum score")

        system = ScoringSystem(key=key, label=label, min_score=min_score, max_score=max_score)
        self.scoring_systems.append(system)
        self.prompt_templates.setdefault(key, {})
        return system

    def get_scoring_system(self, key: str) -> ScoringSystem:
        for system in self.scoring_systems:
            if system.key == key:
                return system
        raise StateError(f"Unknown scoring system: {key}")

    def select_scoring_system(self, key: str) -> None:
        self.get_scoring_system(key)
        self.scoring_system = key

    def set_rounds(self, rounds: int) -> None:
        if rounds < 1:
            raise StateError("Rounds must be at least 1")
        self.rounds = rounds

    def update_prompt_template(self, system_key: str, dimension_name: str, prompt: str) -> None:
        self.get_scoring_system(system_key)
        self.prompt_templates.setdefault(system_key, {})[dimension_name] = prompt

    def reset_prompt_template(self, system_key: str, dimension_name: str) -> str:
        """Restore the built-in template, or clear it when there is none.

        Returns:
            The template now in effect ("" when cleared).
        """
        self.get_scoring_system(system_key)
        default = DEFAULT_PROMPT_TEMPLATES.get(system_key, {}).get(dimension_name, "")
        templates = self.prompt_templates.setdefault(system_key, {})
        if default:
            templates[dimension_name] = default
        else:
            templates.pop(dimension_name, None)
        return default

    def dimensions_with_prompts(self, system_key: str | None = None) -> list[Dimension]:
        """Dimensions with ``prompt`` filled from the selected template table.

        Dimensions without a template keep ``prompt=None`` and are graded with
        the generic instruction.
        """
        templates = self.prompt_templates.get(system_key or self.scoring_system, {})
        return [
            dimension.model_copy(update={"prompt": templates.get(dimension.name) or None})
            for dimension in self.dimensions
        ]

    # -- Queries and config --------------------------------------------------

    def collect_queries(self) -> list[str]:
        """Single query when set, otherwise the parsed batch text."""
        single = self.single_query.strip()
        if single:
            return [single]
        return parse_batch_queries(self.batch_queries)

    def update_api_config(self, **changes) -> ApiConfig:
        self.api_config = self.api_config.model_copy(update=changes)
        return self.api_config

    def build_evaluation_config(self, **overrides) -> EvaluationConfig:
        settings = self.api_config.model_dump()
        settings["scoring_system"] = self.scoring_system
        settings.update(overrides)
        return EvaluationConfig(**settings)

    # -- Run events ----------------------------------------------------------

    def handle_search_result(self, event: SearchResultEvent) -> bool:
        """Record a search event unless one exists for the same engine and query.

        Returns:
            True if the event was added.
        """
        for existing in self.search_events:
            if existing.engine_id == event.engine_id and existing.query == event.query:
                return False
        self.search_events.append(event)
        return True

    def handle_stream_message(self, message: StreamMessage) -> None:
        self.stream_messages.append(message)

    def handle_progress(self, progress: EvaluationProgress) -> None:
        self.progress = progress

    def clear_results(self) -> None:
        """Reset live run data before a new evaluation."""
        self.search_events.clear()
        self.stream_messages.clear()
        self.progress = None
        self.results = []
        self.error_message = ""

    def set_results(self, results: list[EvaluationResult]) -> None:
        self.results = list(results)
