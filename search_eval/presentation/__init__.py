"""Views over evaluation state: live logs, rich tables and the Streamlit app.

``web_app`` is not imported here; it is loaded by Streamlit on demand.
"""

from search_eval.presentation.render import (
    config_table,
    dimensions_table,
    engine_results_panel,
    log_table,
    overview_table,
    progress_text,
    score_bar_text,
    search_results_table,
    sparkline,
    trends_table,
)
from search_eval.presentation.stream_logs import build_log_entries

__all__ = [
    # Logs
    "build_log_entries",
    # Rich renderables
    "config_table",
    "dimensions_table",
    "engine_results_panel",
    "log_table",
    "overview_table",
    "progress_text",
    "score_bar_text",
    "search_results_table",
    "sparkline",
    "trends_table",
]
