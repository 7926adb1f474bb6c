"""Tests for the command line entry point."""

import logging

import pytest

from echosync import cli
from echosync.core.config import Settings
from echosync.vault.store import CredentialVault


@pytest.fixture
def cli_settings(tmp_path, monkeypatch) -> Settings:
    settings = Settings(_env_file=None, data_dir=tmp_path / "data", log_to_file=False)
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    yield settings
    # main() points the console handler at the captured stdout
    logger = logging.getLogger("echosync")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


def test_no_command_prints_usage(cli_settings, capsys):
    assert cli.main([]) == 1
    assert "Usage: echosync" in capsys.readouterr().out


def test_unknown_command(cli_settings, capsys):
    assert cli.main(["dance"]) == 1
    assert "Unknown command: dance" in capsys.readouterr().out


def test_init_creates_data_dir(cli_settings):
    assert cli.main(["init"]) == 0
    assert cli_settings.data_dir.is_dir()


def test_ask_simulated(cli_settings, capsys):
    assert cli.main(["ask", "hello", "--nodes", "gpt,claude"]) == 0

    out = capsys.readouterr().out
    assert "[conversational 0.50]" in out
    assert "GPT (simulated" in out
    assert "CLAUDE (simulated" in out
    assert "GEMINI (" not in out


def test_ask_blank_message(cli_settings, capsys):
    assert cli.main(["ask", "  "]) == 1
    assert "Message is required" in capsys.readouterr().out


def test_ask_nodes_needs_value(cli_settings, capsys):
    assert cli.main(["ask", "hello", "--nodes"]) == 1
    assert "--nodes needs a value" in capsys.readouterr().out


def test_key_set_and_unset(cli_settings, capsys):
    assert cli.main(["key", "set", "openai", "sk-cli-key-123456"]) == 0
    assert "Key for openai stored" in capsys.readouterr().out

    vault = CredentialVault(cli_settings)
    assert vault.get("openai") == "sk-cli-key-123456"

    assert cli.main(["key", "unset", "openai"]) == 0
    assert "Key for openai removed" in capsys.readouterr().out
    assert not CredentialVault(cli_settings).has("openai")


def test_key_bad_arguments(cli_settings, capsys):
    assert cli.main(["key", "set", "openai"]) == 1
    assert "Usage: echosync" in capsys.readouterr().out


def test_status_lists_providers_and_nodes(cli_settings, capsys):
    assert cli.main(["status"]) == 0

    out = capsys.readouterr().out
    assert "perplexity" in out
    assert "Gemini-Coordinator" in out
    assert "no key" in out


def test_parse_nodes():
    assert cli._parse_nodes("all") == "all"
    assert cli._parse_nodes("auto") == "auto"
    assert cli._parse_nodes("gpt") == "gpt"
    assert cli._parse_nodes("gpt, claude") == ["gpt", "claude"]
