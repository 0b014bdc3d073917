"""Tests for argv routing and the top-level commands."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from ask import history
from ask.cli import exit_status, is_subcommand, main
from ask.config import config_path
from ask.errors import CanceledError, ExitError, ResolutionError


@pytest.fixture
def no_stdin():
    with patch("ask.cli.is_piped", return_value=False):
        yield


@pytest.fixture
def api_mode():
    path = config_path()
    path.parent.mkdir(parents=True)
    path.write_text("mode: api\nprovider: anthropic\n")
    return path


class TestIsSubcommand:
    @pytest.mark.parametrize(
        "argv",
        [
            ["history"],
            ["history", "clear"],
            ["config"],
            ["config", "init"],
            ["config", "init", "--force"],
            ["providers"],
            ["--help"],
            ["--version"],
        ],
    )
    def test_subcommands(self, argv):
        assert is_subcommand(argv)

    @pytest.mark.parametrize(
        "argv",
        [
            [],
            ["how", "to", "rebase"],
            ["history", "of", "rome"],
            ["-m", "opus", "history"],
            ["history", "--raw"],
            ["providers", "--verbose"],
            ["config", "--force"],
            ["what", "is", "config"],
            ["--", "history"],
        ],
    )
    def test_prompts(self, argv):
        assert not is_subcommand(argv)


class TestExitStatus:
    @pytest.mark.parametrize("code, status", [(0, 0), (2, 2), (-9, 137), (-15, 143)])
    def test_exit_status(self, code, status):
        assert exit_status(code) == status


class TestQuery:
    def test_dry_run_prints_claude_command(self, no_stdin, capsys):
        with patch("ask.engine.shutil.which", return_value="/opt/bin/claude"):
            code = main(["how", "to", "rebase", "-m", "opus", "--dry-run", "--verbose"])
        assert code == 0
        assert capsys.readouterr().out == "claude -p 'how to rebase' --model opus --verbose\n"
        assert history.load_all() == []

    def test_dry_run_api_mode(self, no_stdin, api_mode, capsys):
        assert main(["-m", "opus", "--dry-run", "hi"]) == 0
        assert capsys.readouterr().out == "anthropic claude-opus-4-5-20251101: hi\n"

    def test_default_model_from_config(self, no_stdin, capsys):
        path = config_path()
        path.parent.mkdir(parents=True)
        path.write_text("mode: api\nprovider: ollama\ndefault_model: qwen\n")
        assert main(["--dry-run", "hi"]) == 0
        assert capsys.readouterr().out == "ollama qwen3: hi\n"

    def test_unknown_provider(self, no_stdin, capsys):
        path = config_path()
        path.parent.mkdir(parents=True)
        path.write_text("mode: api\nprovider: mistral\n")
        assert main(["hi"]) == 1
        assert "unknown provider 'mistral'" in capsys.readouterr().err

    def test_query_recorded_and_run(self, no_stdin):
        with patch("ask.cli.run_claude", new_callable=AsyncMock) as run:
            assert main(["--output-format", "json", "what", "now"]) == 0

        args = run.call_args
        assert args.args[:3] == ("what now", "", ["--output-format", "json"])
        assert [e.query for e in history.load_all()] == ["what now"]

    def test_piped_input_wraps_prompt(self):
        with patch("ask.cli.is_piped", return_value=True), \
                patch("ask.cli.read_pipe", return_value="x = 1"), \
                patch("ask.cli.execute", return_value=0) as execute:
            assert main(["explain"]) == 0
        prompt = execute.call_args.args[0]
        assert prompt == "Here is the input data:\n\n```\nx = 1\n```\n\nexplain"

    def test_interactive_prompt_when_no_words(self, no_stdin):
        with patch("ask.cli.read_interactive_prompt", return_value="typed"), \
                patch("ask.cli.execute", return_value=0) as execute:
            assert main([]) == 0
        assert execute.call_args.args[0] == "typed"

    def test_no_prompt(self, no_stdin, capsys):
        with patch("ask.cli.read_interactive_prompt", return_value=""):
            assert main([]) == 1
        assert capsys.readouterr().err == "ask: no prompt given\n"

    def test_canceled_prompt(self, no_stdin):
        with patch("ask.cli.read_interactive_prompt", side_effect=CanceledError()):
            assert main([]) == 130

    def test_child_exit_code_propagates(self, no_stdin, capsys):
        with patch("ask.cli.run_claude", new_callable=AsyncMock, side_effect=ExitError("claude", 7)):
            assert main(["q"]) == 7
        assert "ask: claude exited with code 7" in capsys.readouterr().err

    def test_signal_exit_maps_to_shell_status(self, no_stdin, capsys):
        with patch("ask.cli.run_claude", new_callable=AsyncMock, side_effect=ExitError("claude", -15)):
            assert main(["q"]) == 143
        assert "exited with code -15" in capsys.readouterr().err

    def test_missing_binary_exits_one(self, no_stdin, capsys):
        with patch("ask.cli.run_claude", new_callable=AsyncMock, side_effect=ResolutionError("claude")):
            assert main(["q"]) == 1
        assert "claude CLI not found in PATH" in capsys.readouterr().err


class TestSubcommands:
    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert capsys.readouterr().out.startswith("ask ")

    def test_providers(self, capsys):
        assert main(["providers"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 5
        assert lines[0].startswith("* anthropic")
        assert lines[4].startswith("  ollama")

    def test_config_init(self, capsys):
        assert main(["config", "init"]) == 0
        assert config_path().exists()
        assert main(["config", "init"]) == 1
        assert "already exists" in capsys.readouterr().out
        assert main(["config", "init", "--force"]) == 0

    def test_config_show(self, capsys):
        assert main(["config"]) == 0
        out = capsys.readouterr().out
        assert "(not found, using defaults)" in out
        assert "  mode: claude" in out

    def test_history_empty(self, capsys):
        assert main(["history"]) == 0
        assert capsys.readouterr().out == "No history yet.\n"

    def test_history_clear(self, capsys):
        history.append("q")
        assert main(["history", "clear"]) == 0
        assert capsys.readouterr().out == "History cleared.\n"
        assert history.load_all() == []

    def test_history_rerun(self):
        history.append("old question")
        with patch("ask.cli.history.browse", return_value="old question"), \
                patch("ask.cli.execute", return_value=0) as execute:
            assert main(["history"]) == 0
        assert execute.call_args.args[0] == "old question"

    def test_history_dismissed(self):
        history.append("old question")
        with patch("ask.cli.history.browse", return_value=None), \
                patch("ask.cli.execute") as execute:
            assert main(["history"]) == 0
        execute.assert_not_called()
