"""Tests for configuration loading."""
from agentdesk.utils.config import get_db_path, get_mls_credentials, load_config


def test_defaults_without_files(tmp_path, monkeypatch):
    for name in ("AGENTDESK_DB_PATH", "AGENTDESK_LOG_LEVEL", "MLS_PROVIDER"):
        monkeypatch.delenv(name, raising=False)

    config = load_config(tmp_path / "missing.yaml", tmp_path / "missing.env")

    assert get_db_path(config) == "./data/agentdesk.db"
    assert config["logging"]["level"] == "INFO"
    assert config["mls"]["provider"] == "bridge"


def test_yaml_env_expansion_and_overrides(tmp_path, monkeypatch):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "database:\n"
        "  path: ${TEST_AGENTDESK_DB}\n"
        "mls:\n"
        "  provider: simplyrets\n"
    )
    env_file = tmp_path / ".env"
    env_file.write_text("TEST_AGENTDESK_DB=/tmp/from-env.db\n")
    monkeypatch.delenv("TEST_AGENTDESK_DB", raising=False)
    monkeypatch.delenv("AGENTDESK_DB_PATH", raising=False)
    monkeypatch.setenv("MLS_PROVIDER", "Bridge")

    config = load_config(config_file, env_file)

    assert config["database"]["path"] == "/tmp/from-env.db"
    assert config["mls"]["provider"] == "bridge"


def test_credentials(monkeypatch):
    monkeypatch.setenv("BRIDGE_ACCESS_TOKEN", "tok")
    monkeypatch.setenv("BRIDGE_DATASET_KEY", "test")
    monkeypatch.setenv("SIMPLYRETS_API_USERNAME", "u")
    monkeypatch.setenv("SIMPLYRETS_API_PASSWORD", "p")

    assert get_mls_credentials("Bridge") == ("tok", "test")
    assert get_mls_credentials("simplyrets") == ("u", "p")
    assert get_mls_credentials("other") == (None, None)
