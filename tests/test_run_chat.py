"""
Tests for the command-line chat entry point.
"""

from unittest.mock import patch

import pytest

import run_chat
from bid_assistant.config import Settings
from bid_assistant.errors import ConfigurationError
from bid_assistant.librarian.db_client import DatabaseClient


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'cli.db'}",
        anthropic_api_key="sk-test",
    )


@pytest.fixture
def claude():
    with patch("bid_assistant.chat.ClaudeClient") as claude_cls:
        instance = claude_cls.return_value
        instance.validate_api_key.return_value = True
        instance.chat.return_value = (
            'Bright Line is lowest on the package.\n'
            '<proposed_change>\n'
            '{"type": "select_bid", "description": "Carry Bright Line", "target": "Complete Electrical", '
            '"current_value": null, "new_value": "Bright Line Electric", "details": {}}\n'
            '</proposed_change>'
        )
        yield instance


def test_seed_sample_and_ask(settings, claude, capsys):
    with patch.object(run_chat, "load_settings", return_value=settings):
        exit_code = run_chat.main(["--seed-sample", "Which package is cheapest?"])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "Bright Line is lowest" in out
    assert "[select_bid] Carry Bright Line" in out
    assert "Current: (none)" in out

    system_prompt = claude.chat.call_args.args[0]
    assert "Riverside Medical Office Building" in system_prompt


def test_requires_project(settings, claude, capsys):
    with patch.object(run_chat, "load_settings", return_value=settings):
        exit_code = run_chat.main(["Who is lowest?"])

    assert exit_code == 1
    assert "--project-id" in capsys.readouterr().out
    claude.chat.assert_not_called()


def test_configuration_error(capsys):
    with patch.object(run_chat, "load_settings",
                      side_effect=ConfigurationError("Missing required environment variables: DATABASE_URL")):
        exit_code = run_chat.main(["--seed-sample", "hi"])

    assert exit_code == 1
    assert "DATABASE_URL" in capsys.readouterr().out


def test_seed_sample_twice(settings, claude):
    with patch.object(run_chat, "load_settings", return_value=settings):
        assert run_chat.main(["--seed-sample", "Which package is cheapest?"]) == 0
        assert run_chat.main(["--seed-sample", "Which package is cheapest?"]) == 0

    assert claude.chat.call_count == 2


def test_seed_failure_is_reported(settings, claude, capsys):
    with patch.object(run_chat, "load_settings", return_value=settings), \
            patch.object(DatabaseClient, "load_data_from_json",
                         side_effect=RuntimeError("Failed to load data: disk full")), \
            patch.object(DatabaseClient, "close", autospec=True) as close:
        exit_code = run_chat.main(["--seed-sample", "hi"])

    assert exit_code == 1
    assert "Failed to load data: disk full" in capsys.readouterr().out
    close.assert_called_once()
    claude.chat.assert_not_called()


def test_structured_values_are_printed_as_json(settings, claude, capsys):
    claude.chat.return_value = (
        '<proposed_change>\n'
        '{"type": "assign_items", "description": "Move fire alarm", "target": "Complete Electrical", '
        '"current_value": ["26-001"], "new_value": {"package": "Fire Alarm"}, "details": {}}\n'
        '</proposed_change>'
    )

    with patch.object(run_chat, "load_settings", return_value=settings):
        assert run_chat.main(["--seed-sample", "Split fire alarm out"]) == 0

    out = capsys.readouterr().out
    assert 'Current: ["26-001"]' in out
    assert 'New:     {"package": "Fire Alarm"}' in out
