"""
Unit tests for the qara command-line interface.
"""

import json

import pytest
from typer.testing import CliRunner
from qara import __version__
from qara.cli import app
from qara.runtime import create_runtime

runner = CliRunner()


@pytest.fixture
def cli_env(tmp_path, monkeypatch, fake_functions, emitter):
    """Run the CLI against the fake language-model boundary"""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("qara.cli.setup_logging", lambda config: None)
    monkeypatch.setattr(
        "qara.cli.create_runtime",
        lambda config: create_runtime(config, functions=fake_functions, emitter=emitter),
    )
    return tmp_path


class TestInfoCommands:
    """Commands that never run a skill"""

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert f"qara version {__version__}" in result.output

    def test_list(self):
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "Available Skills" in result.output
        assert "research-standard" in result.output
        assert "code-generate" in result.output

    def test_trie(self, cli_env):
        result = runner.invoke(app, ["trie"])

        assert result.exit_code == 0
        assert "Routing Trie" in result.output
        assert "research-deep" in result.output
        assert "[*]" in result.output


class TestRun:
    """Tests for `qara run`"""

    def test_research(self, cli_env, fake_functions):
        result = runner.invoke(app, ["run", "research", "AI", "safety"])

        assert result.exit_code == 0
        assert "Brief on AI safety from 4 streams" in result.output
        assert fake_functions.calls_to("decompose_query")[0]["query"] == "AI safety"

    def test_quoted_input(self, cli_env, fake_functions):
        result = runner.invoke(app, ["run", "deep research quantum computing"])

        assert result.exit_code == 0
        assert fake_functions.calls_to("decompose_query")[0]["depth"] == 3

    def test_verbose_prints_route(self, cli_env):
        result = runner.invoke(app, ["run", "research test", "--verbose"])

        assert result.exit_code == 0
        assert "Matched" in result.output
        assert "research-standard" in result.output

    def test_depth_option(self, cli_env, fake_functions):
        result = runner.invoke(app, ["run", "research AI", "--depth", "1"])

        assert result.exit_code == 0
        assert fake_functions.calls_to("decompose_query")[0]["depth"] == 1
        assert fake_functions.calls_to("fact_check_claims") == []

    def test_depth_out_of_range(self, cli_env):
        result = runner.invoke(app, ["run", "research AI", "--depth", "5"])
        assert result.exit_code == 2

    def test_full_format(self, cli_env):
        result = runner.invoke(app, ["run", "research AI", "--format", "full"])

        assert result.exit_code == 0
        assert "Executive Brief" in result.output
        assert "Detailed analysis" in result.output

    def test_stream(self, cli_env):
        result = runner.invoke(app, ["run", "research AI", "--stream"])

        assert result.exit_code == 0
        assert "[validate]" in result.output
        assert "[synthesize]" in result.output
        assert "Brief on AI from 4 streams" in result.output

    def test_blog(self, cli_env):
        result = runner.invoke(app, ["run", "write blog about cats"])

        assert result.exit_code == 0
        assert "Blog: about cats" in result.output

    def test_no_input(self, cli_env):
        result = runner.invoke(app, ["run"])

        assert result.exit_code == 1
        assert "No input provided" in result.output

    def test_no_route(self, cli_env):
        result = runner.invoke(app, ["run", "xyzzy foobar baz"])

        assert result.exit_code == 1
        assert "No skill found for" in result.output

    def test_skill_failure(self, cli_env, fake_functions):
        fake_functions.fail_on.add("decompose_query")
        result = runner.invoke(app, ["run", "research AI"])

        assert result.exit_code == 1
        assert "decompose_query failed" in result.output

    def test_observe_prints_event_tree(self, cli_env):
        result = runner.invoke(app, ["run", "research AI", "--observe"])

        assert result.exit_code == 0
        assert "Event Trace" in result.output
        assert "session.start" in result.output
        assert "research.query.start" in result.output

    def test_events_file(self, cli_env):
        path = cli_env / "trace" / "events.jsonl"
        result = runner.invoke(app, ["run", "help", "--events-file", str(path)])

        assert result.exit_code == 0
        types = [json.loads(line)["type"] for line in path.read_text().splitlines()]
        assert types == ["session.start", "skill.route", "session.end"]
