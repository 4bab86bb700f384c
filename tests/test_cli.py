"""Tests for the command-line interface."""
import json
import logging

import pytest

from agentdesk.__main__ import main


@pytest.fixture
def config_file(tmp_path, env_vars):
    path = tmp_path / "config.yaml"
    path.write_text(
        f"database:\n  path: {tmp_path / 'cli.db'}\n"
        "logging:\n  level: WARNING\n"
    )
    yield str(path)
    logging.getLogger("agentdesk").handlers.clear()


def test_template_to_stdout(config_file, capsys):
    assert main(["--config", config_file, "template"]) == 0
    assert capsys.readouterr().out.startswith("first_name,last_name")


def test_import_then_list_contacts(config_file, tmp_path, capsys):
    csv_file = tmp_path / "contacts.csv"
    csv_file.write_text("first_name,birthday\nJohn,3/15/1985\nJane,\n")

    assert main(["--config", config_file, "import-contacts", str(csv_file), "--agent", "agent-1"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert result["imported"] == 2

    assert main(["--config", config_file, "contacts", "--agent", "agent-1"]) == 0
    listing = json.loads(capsys.readouterr().out)
    assert listing["total"] == 2


def test_failed_import_exit_code(config_file, tmp_path, capsys):
    csv_file = tmp_path / "empty.csv"
    csv_file.write_text("first_name\n")
    assert main(["--config", config_file, "import-contacts", str(csv_file), "--agent", "agent-1"]) == 1


def test_upcoming_outputs_json(config_file, tmp_path, capsys):
    csv_file = tmp_path / "contacts.csv"
    csv_file.write_text("first_name,anniversary\nJane,1/1/2000\n")
    main(["--config", config_file, "import-contacts", str(csv_file), "--agent", "agent-1"])
    capsys.readouterr()

    assert main(["--config", config_file, "upcoming", "--agent", "agent-1", "--days", "366"]) == 0
    events = json.loads(capsys.readouterr().out)
    assert events[0]["eventType"] == "Wedding Anniversary"
