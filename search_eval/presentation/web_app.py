"""Streamlit front end.

Launch with ``search-eval web`` (or ``streamlit run`` on this file). All
state lives in one AppState kept in ``st.session_state``; widgets call its
setters and re-render from it.
"""

import asyncio
import logging

import streamlit as st

from search_eval.config import load_api_config
from search_eval.consts import ROUND_CHOICES
from search_eval.evaluation.orchestrator import run_batch_evaluation
from search_eval.evaluation.validation import ConfigurationError
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
from search_eval.presentation.render import progress_text
from search_eval.presentation.stream_logs import build_log_entries
from search_eval.state import AppState, StateError

logger = logging.getLogger(__name__)

# Streamlit markdown has no yellow
BAND_COLORS = {"green": "green", "yellow": "orange", "red": "red"}


def get_state() -> AppState:
    if "app_state" not in st.session_state:
        st.session_state.app_state = AppState(api_config=load_api_config())
    return st.session_state.app_state


def _apply(action, *args, **kwargs) -> None:
    """Run a state setter, surfacing validation errors in the page."""
    try:
        action(*args, **kwargs)
    except (StateError, ValueError) as e:
        st.error(str(e))
    else:
        st.rerun()


def score_markdown(score: float, max_score: float) -> str:
    percentage, band = score_bar(score, max_score)
    return f":{BAND_COLORS[band]}[**{score:.2f}**] / {max_score:g} ({percentage:.0f}%)"


# -- Sidebar -----------------------------------------------------------------


def render_api_settings(state: AppState) -> None:
    with st.expander("API settings", expanded=not state.api_config.api_key):
        config = state.api_config
        websearch_url = st.text_input("WebSearch URL", value=config.websearch_url)
        evaluation_url = st.text_input("Evaluation URL", value=config.evaluation_url)
        api_key = st.text_input("API key", value=config.api_key, type="password")
        model_key = st.text_input("Model", value=config.model_key)
        if st.button("Save API settings", use_container_width=True):
            state.update_api_config(
                websearch_url=websearch_url,
                evaluation_url=evaluation_url,
                api_key=api_key,
                model_key=model_key,
            )
            st.success("Saved")


def render_engine_editor(state: AppState) -> None:
    with st.expander("Search engines"):
        for engine in state.engines:
            col1, col2, col3 = st.columns([3, 3, 1])
            name = col1.text_input("Name", value=engine.name, key=f"engine_name_{engine.id}")
            code = col2.text_input("Code", value=engine.code, key=f"engine_code_{engine.id}")
            if name != engine.name or code != engine.code:
                _apply(state.update_engine, engine.id, code=code, name=name)
            if col3.button("✕", key=f"engine_delete_{engine.id}"):
                _apply(state.delete_engine, engine.id)

        with st.form("add_engine", clear_on_submit=True):
            new_name = st.text_input("New engine name")
            new_code = st.text_input("New engine code")
            if st.form_submit_button("Add engine"):
                _apply(state.add_engine, new_code, new_name)


def render_dimension_editor(state: AppState) -> None:
    with st.expander("Dimensions", expanded=True):
        for dimension in state.dimensions:
            col1, col2, col3 = st.columns([1, 4, 1])
            enabled = col1.checkbox(
                "on", value=dimension.enabled, key=f"dim_enabled_{dimension.id}", label_visibility="collapsed"
            )
            if enabled != dimension.enabled:
                _apply(state.toggle_dimension, dimension.id)
            name = col2.text_input(
                "Name", value=dimension.name, key=f"dim_name_{dimension.id}", label_visibility="collapsed"
            )
            if name != dimension.name:
                _apply(state.rename_dimension, dimension.id, name)
            weight = col2.slider(
                "Weight", 0.0, 1.0, value=dimension.weight, step=0.05, key=f"dim_weight_{dimension.id}"
            )
            if weight != dimension.weight:
                state.update_dimension_weight(dimension.id, weight)
            if col3.button("✕", key=f"dim_delete_{dimension.id}"):
                _apply(state.delete_dimension, dimension.id)

        with st.form("add_dimension", clear_on_submit=True):
            new_dimension = st.text_input("New dimension")
            if st.form_submit_button("Add dimension"):
                _apply(state.add_dimension, new_dimension)


def render_query_inputs(state: AppState) -> bool:
    """Query, rounds and scoring system inputs; returns True when Run was pressed."""
    state.single_query = st.text_input("Single query", value=state.single_query)
    state.batch_queries = st.text_area(
        "Batch queries (one per line)", value=state.batch_queries, height=120
    )

    rounds_index = ROUND_CHOICES.index(state.rounds) if state.rounds in ROUND_CHOICES else 0
    state.set_rounds(st.selectbox("Rounds", ROUND_CHOICES, index=rounds_index))

    keys = [system.key for system in state.scoring_systems]
    labels = {system.key: system.label for system in state.scoring_systems}
    selected = st.selectbox(
        "Scoring system",
        keys,
        index=keys.index(state.scoring_system),
        format_func=lambda key: labels[key],
    )
    state.select_scoring_system(selected)

    return st.button(
        "Start evaluation",
        type="primary",
        disabled=state.is_evaluating,
        use_container_width=True,
    )


# -- Prompt editor -----------------------------------------------------------


def render_prompt_editor(state: AppState) -> None:
    system = state.get_scoring_system(state.scoring_system)
    st.caption(f"Templates for {system.label}")

    templates = state.prompt_templates.get(system.key, {})
    for dimension in state.dimensions:
        key = f"prompt_{system.key}_{dimension.id}"
        text = st.text_area(dimension.name, value=templates.get(dimension.name, ""), key=key, height=120)
        col1, col2 = st.columns(2)
        if col1.button("Save", key=f"{key}_save"):
            _apply(state.update_prompt_template, system.key, dimension.name, text)
        if col2.button("Reset to default", key=f"{key}_reset"):
            st.session_state.pop(key, None)
            _apply(state.reset_prompt_template, system.key, dimension.name)

    with st.form("add_scoring_system", clear_on_submit=True):
        st.markdown("**New scoring system**")
        key = st.text_input("Key")
        label = st.text_input("Label")
        col1, col2 = st.columns(2)
        min_score = col1.number_input("Min score", value=0.0)
        max_score = col2.number_input("Max score", value=10.0)
        if st.form_submit_button("Add scoring system"):
            _apply(state.add_scoring_system, key, label, min_score, max_score)


# -- Run ---------------------------------------------------------------------


def run_evaluation(state: AppState) -> None:
    """Run the evaluation with live progress and search feedback."""
    state.clear_results()
    state.is_evaluating = True

    progress_bar = st.progress(0, text="Starting...")
    search_status = st.empty()

    def on_progress(progress):
        state.handle_progress(progress)
        progress_bar.progress(progress.progress / 100, text=progress_text(progress))

    def on_search_result(event):
        if state.handle_search_result(event):
            search_status.info(
                f"{event.engine_name}: {len(event.search_results)} results for '{event.query}'"
            )

    try:
        results = asyncio.run(
            run_batch_evaluation(
                state.collect_queries(),
                state.engines,
                state.dimensions_with_prompts(),
                state.build_evaluation_config(),
                state.rounds,
                on_progress=on_progress,
                on_search_result=on_search_result,
                on_stream_message=state.handle_stream_message,
                scoring_systems=state.scoring_systems,
            )
        )
        state.set_results(results)
    except ConfigurationError as e:
        state.error_message = f"Configuration error: {', '.join(e.errors)}"
    except Exception as e:
        logger.error(f"Evaluation failed: {e}")
        state.error_message = f"Evaluation failed: {e}"
    finally:
        state.is_evaluating = False


# -- Results -----------------------------------------------------------------


def render_results(state: AppState) -> None:
    max_score = state.get_scoring_system(state.scoring_system).max_score
    enabled = state.enabled_dimensions()

    columns = st.columns(len(state.engines))
    for column, engine in zip(columns, state.engines):
        with column:
            st.subheader(engine.name)
            counter = engine_round_progress(state.results, engine.id, state.rounds)
            average = engine_average_score(state.results, engine.id)
            st.markdown(f"Average {score_markdown(average, max_score)} · rounds {counter}")

            for event in state.search_events:
                if event.engine_id != engine.id:
                    continue
                with st.expander(f"Search results: {event.query} ({len(event.search_results)})"):
                    for item in event.search_results:
                        st.markdown(f"{item.rank}. [{item.title}]({item.url})  \n{item.snippet}")

            for result in results_for_engine(state.results, engine.id):
                with st.expander(f"Round {result.round}: {result.query} · {result.weighted_score:.2f}"):
                    for dimension in enabled:
                        score = result.scores.get(dimension.name, 0.0)
                        st.markdown(f"{dimension.name}: {score_markdown(score, max_score)}")


def render_summary(state: AppState) -> None:
    max_score = state.get_scoring_system(state.scoring_system).max_score
    engine_stats = compute_engine_stats(state.engines, state.enabled_dimensions(), state.results)
    overall = compute_overall_stats(state.engines, state.results, engine_stats)
    top = find_top_engine(engine_stats)

    overview, trends, dimensions = st.tabs(["Overview", "Trends", "Dimensions"])

    with overview:
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Evaluations", overall.total_evaluations)
        col2.metric("Average score", f"{overall.average_score:.2f}")
        col3.metric("Queries", overall.unique_queries)
        col4.metric("Engines", overall.active_engines)
        if top is not None:
            st.success(f"Top engine: {top.engine_name} ({top.average_score:.2f})")
        for stats in sorted(engine_stats, key=lambda s: s.average_score, reverse=True):
            percentage, _ = score_bar(stats.average_score, max_score)
            st.progress(percentage / 100, text=f"{stats.engine_name}: {stats.average_score:.2f}")

    with trends:
        for stats in engine_stats:
            st.markdown(f"**{stats.engine_name}**")
            heights = trend_heights(stats.score_history)
            if heights is None:
                st.caption("Insufficient data")
            else:
                st.bar_chart({"height": heights})

    with dimensions:
        for stats in engine_stats:
            st.markdown(f"**{stats.engine_name}**")
            for name, score in stats.dimension_scores.items():
                st.markdown(f"{name}: {score_markdown(score, max_score)}")


def render_logs(state: AppState) -> None:
    entries = build_log_entries(state.search_events, state.stream_messages)
    if not entries:
        st.caption("No logs yet. API calls and streamed responses appear here once an evaluation starts.")
        return
    for entry in entries:
        header = f"**{entry.type}** · {entry.timestamp.strftime('%H:%M:%S')} · {entry.engine or ''} · {entry.content}"
        with st.expander(header, expanded=False):
            if entry.details:
                joined = "".join(entry.details) if entry.is_stream else "\n".join(entry.details)
                st.text(joined)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    st.set_page_config(layout="wide", page_title="Search Engine Evaluation")
    st.title("Search Engine Evaluation")

    state = get_state()

    with st.sidebar:
        render_api_settings(state)
        render_engine_editor(state)
        render_dimension_editor(state)
        start = render_query_inputs(state)

    if start:
        run_evaluation(state)

    if state.error_message:
        st.error(state.error_message)

    results_tab, prompts_tab, logs_tab = st.tabs(["Results", "Prompts", "Logs"])
    with results_tab:
        render_results(state)
        if state.results:
            st.divider()
            render_summary(state)
    with prompts_tab:
        render_prompt_editor(state)
    with logs_tab:
        render_logs(state)


if __name__ == "__main__":
    main()
