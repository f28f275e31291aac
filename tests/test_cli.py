"""Tests for CLI interface."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import ValidationError
from typer.testing import CliRunner

from search_eval.cli import app
from search_eval.evaluation.validation import ConfigurationError

runner = CliRunner()


@pytest.fixture
def mock_run(make_result):
    """Patch the evaluation run with two canned results."""
    results = [
        make_result(engine_id=1, engine_name="智谱基础版搜索引擎", scores={"权威性": 2, "相关性": 1, "时效性": 1}, weighted_score=1.4),
        make_result(engine_id=3, engine_name="搜狗", scores={"权威性": 1, "相关性": 1, "时效性": 0}, weighted_score=0.75),
    ]
    with patch("search_eval.cli.run_batch_evaluation", new_callable=AsyncMock) as mocked:
        mocked.return_value = results
        yield mocked


class TestRunCommand:
    """Tests for the run command."""

    def test_requires_query(self) -> None:
        result = runner.invoke(app, ["run"])

        assert result.exit_code == 1
        assert "Must specify --query or --batch-file" in result.stdout

    def test_negative_delay_reports_error(self, mock_run) -> None:
        result = runner.invoke(app, ["run", "--query", "q", "--delay", "-1"])

        assert result.exit_code == 1
        assert not isinstance(result.exception, ValidationError)
        assert "Error:" in result.stdout
        assert "scoring_delay_seconds" in result.stdout
        mock_run.assert_not_awaited()

    def test_infinite_delay_reports_error(self, mock_run) -> None:
        result = runner.invoke(app, ["run", "--query", "q", "--delay", "inf"])

        assert result.exit_code == 1
        assert "scoring_delay_seconds" in result.stdout
        mock_run.assert_not_awaited()

    def test_negative_delay_env_falls_back(self, mock_run, monkeypatch) -> None:
        monkeypatch.setenv("SEARCH_EVAL_SCORING_DELAY", "-2")

        result = runner.invoke(app, ["run", "--query", "q"])

        assert result.exit_code == 0, result.stdout
        config = mock_run.await_args.args[3]
        assert config.scoring_delay_seconds == 1.0

    def test_run_single_query(self, mock_run) -> None:
        result = runner.invoke(app, ["run", "--query", "python asyncio", "--rounds", "1"])

        assert result.exit_code == 0, result.stdout
        assert "Evaluation complete" in result.stdout
        assert "Engine Ranking" in result.stdout

        args = mock_run.await_args.args
        queries, engines, dimensions, config, rounds = args
        assert queries == ["python asyncio"]
        assert [e.code for e in engines] == ["search_std", "search_pro_sogou"]
        assert rounds == 1
        assert config.scoring_system == "binary"
        assert all(d.prompt for d in dimensions)
        assert mock_run.await_args.kwargs["on_stream_message"] is None

    def test_batch_file(self, mock_run, tmp_path: Path) -> None:
        batch = tmp_path / "queries.txt"
        batch.write_text("q1\n \nq2\n", encoding="utf-8")

        result = runner.invoke(app, ["run", "--batch-file", str(batch)])

        assert result.exit_code == 0, result.stdout
        assert mock_run.await_args.args[0] == ["q1", "q2"]

    def test_engine_and_dimension_selection(self, mock_run) -> None:
        result = runner.invoke(
            app,
            ["run", "-q", "q", "--engine", "search_pro_quark", "--dimension", "相关性", "--dimension", "准确性"],
        )

        assert result.exit_code == 0, result.stdout
        _, engines, dimensions, _, _ = mock_run.await_args.args
        assert [e.code for e in engines] == ["search_pro_quark"]
        assert sorted(d.name for d in dimensions if d.enabled) == sorted(["相关性", "准确性"])

    def test_unknown_engine(self, mock_run) -> None:
        result = runner.invoke(app, ["run", "-q", "q", "--engine", "bogus"])

        assert result.exit_code == 1
        assert "Unknown engine code" in result.stdout
        mock_run.assert_not_awaited()

    def test_unknown_scoring_system(self, mock_run) -> None:
        result = runner.invoke(app, ["run", "-q", "q", "--scoring-system", "tenPoint"])

        assert result.exit_code == 1
        assert "Error:" in result.stdout

    def test_configuration_error_exits(self, mock_run) -> None:
        mock_run.side_effect = ConfigurationError(["API key is required"])

        result = runner.invoke(app, ["run", "-q", "q"])

        assert result.exit_code == 1
        assert "API key is required" in result.stdout

    def test_stream_and_delay_options(self, mock_run) -> None:
        result = runner.invoke(app, ["run", "-q", "q", "--stream", "--delay", "0"])

        assert result.exit_code == 0, result.stdout
        config = mock_run.await_args.args[3]
        assert config.stream is True
        assert config.scoring_delay_seconds == 0
        assert mock_run.await_args.kwargs["on_stream_message"] is not None
        assert "Logs" in result.stdout

    def test_output_json(self, mock_run, tmp_path: Path) -> None:
        output = tmp_path / "results.json"

        result = runner.invoke(app, ["run", "-q", "q", "--output", str(output)])

        assert result.exit_code == 0, result.stdout
        data = json.loads(output.read_text(encoding="utf-8"))
        assert len(data) == 2
        assert data[0]["engine_name"] == "智谱基础版搜索引擎"
        assert data[0]["scores"]["权威性"] == 2.0


class TestListCommands:
    def test_engines(self) -> None:
        result = runner.invoke(app, ["engines"])

        assert result.exit_code == 0
        for code in ["search_std", "search_pro", "search_pro_sogou", "search_pro_quark"]:
            assert code in result.stdout

    def test_dimensions(self) -> None:
        result = runner.invoke(app, ["dimensions"])

        assert result.exit_code == 0
        assert "权威性" in result.stdout
        assert "0.4" in result.stdout

    def test_prompts(self) -> None:
        result = runner.invoke(app, ["prompts", "--scoring-system", "fivePoint"])

        assert result.exit_code == 0
        assert "相关性" in result.stdout

    def test_prompts_unknown_system(self) -> None:
        result = runner.invoke(app, ["prompts", "-s", "nope"])

        assert result.exit_code == 1
        assert "Unknown scoring system" in result.stdout


class TestWebCommand:
    def test_launches_streamlit(self) -> None:
        with patch("search_eval.cli.subprocess.run") as mock_subprocess:
            mock_subprocess.return_value = MagicMock(returncode=0)
            result = runner.invoke(app, ["web", "--port", "9000"])

        assert result.exit_code == 0
        command = mock_subprocess.call_args.args[0]
        assert command[1:4] == ["-m", "streamlit", "run"]
        assert command[4].endswith("web_app.py")
        assert command[-1] == "9000"
