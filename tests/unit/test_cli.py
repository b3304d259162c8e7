"""Tests for the slacktail command line."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from slacktail import app
from slacktail.cli import main
from slacktail.config import Config


class TestMain:
    """Tests for main()."""

    def test_exits_without_token(self, tmp_path: Path) -> None:
        runner = CliRunner()

        result = runner.invoke(
            main,
            ["--config", str(tmp_path / "missing.toml")],
            env={"SLACK_TOKEN": None},
        )

        assert result.exit_code == 1
        assert "no Slack token" in result.output

    def test_exits_on_invalid_config(self, tmp_path: Path) -> None:
        cfg_path = tmp_path / "config.toml"
        cfg_path.write_text("not = [valid", encoding="utf-8")
        runner = CliRunner()

        result = runner.invoke(main, ["--config", str(cfg_path)], env={"SLACK_TOKEN": None})

        assert result.exit_code == 1
        assert "Invalid config file" in result.output

    def test_token_option_overrides_config(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        cfg_path = tmp_path / "config.toml"
        cfg_path.write_text('[general]\ntoken = "from-file"\n', encoding="utf-8")
        started: list[Config] = []
        monkeypatch.setattr(app, "run_app", started.append)
        runner = CliRunner()

        result = runner.invoke(main, ["--config", str(cfg_path), "--token", "from-flag"])

        assert result.exit_code == 0
        assert "Connecting..." in result.output
        assert started[0].general.token == "from-flag"

    def test_uses_config_token(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        cfg_path = tmp_path / "config.toml"
        cfg_path.write_text('[general]\ntoken = "from-file"\n', encoding="utf-8")
        started: list[Config] = []
        monkeypatch.setattr(app, "run_app", started.append)
        runner = CliRunner()

        result = runner.invoke(main, ["--config", str(cfg_path)], env={"SLACK_TOKEN": None})

        assert result.exit_code == 0
        assert started[0].general.token == "from-file"
