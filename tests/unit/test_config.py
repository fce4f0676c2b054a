"""Unit tests for config.py"""

import pytest

from blogpub.config import load_config


def test_load_config_uses_env_db_url(monkeypatch):
    """BLOGPUB_DB_URL env var is picked up by load_config."""
    monkeypatch.setenv("BLOGPUB_DB_URL", "sqlite:///env.db")
    settings = load_config()
    assert settings.db_url == "sqlite:///env.db"


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """BLOGPUB_DB_URL takes precedence over config.yaml db_url."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("db_url: 'sqlite:///project.db'\n")
    monkeypatch.setenv("BLOGPUB_DB_URL", "sqlite:///override.db")
    settings = load_config()
    assert settings.db_url == "sqlite:///override.db"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("BLOGPUB_DB_URL", "sqlite:///env.db")
    settings = load_config(overrides={"db_url": "sqlite:///cli.db", "page_size": None})
    assert settings.db_url == "sqlite:///cli.db"
    assert settings.page_size == 20


def test_load_config_defaults(tmp_path, monkeypatch):
    """Settings defaults apply when no config.yaml, env var, or override exists."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("BLOGPUB_DB_URL", raising=False)
    monkeypatch.delenv("BLOGPUB_PROBE_FAIL_OPEN", raising=False)
    settings = load_config()
    assert settings.db_url == "sqlite:///blogpub.db"
    assert settings.autosave_delay == 15.0
    assert settings.probe_fail_open is False


def test_load_config_invalid_yaml(tmp_path, monkeypatch):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_reads_yaml(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("autosave_delay: 5\ncdn_domain: cdn.example.com\n")
    settings = load_config()
    assert settings.autosave_delay == 5.0
    assert settings.cdn_domain == "cdn.example.com"


# --- generalized env var pattern ---

def test_load_config_env_autosave_delay(monkeypatch):
    """BLOGPUB_AUTOSAVE_DELAY is coerced to float."""
    monkeypatch.setenv("BLOGPUB_AUTOSAVE_DELAY", "2.5")
    assert load_config().autosave_delay == 2.5


def test_load_config_env_probe_fail_open(monkeypatch):
    """BLOGPUB_PROBE_FAIL_OPEN is coerced to bool."""
    monkeypatch.setenv("BLOGPUB_PROBE_FAIL_OPEN", "true")
    assert load_config().probe_fail_open is True


def test_load_config_env_slug_conflict_retries(monkeypatch):
    monkeypatch.setenv("BLOGPUB_SLUG_CONFLICT_RETRIES", "0")
    assert load_config().slug_conflict_retries == 0


def test_load_config_rejects_bad_values(monkeypatch):
    """Out-of-range values fail Settings validation (a ValueError subclass)."""
    monkeypatch.setenv("BLOGPUB_AUTOSAVE_DELAY", "0")
    with pytest.raises(ValueError):
        load_config()


def test_load_config_rejects_unknown_log_format(monkeypatch):
    monkeypatch.setenv("BLOGPUB_LOG_FORMAT", "xml")
    with pytest.raises(ValueError):
        load_config()


def test_load_config_ignores_empty_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BLOGPUB_CDN_DOMAIN", "")
    monkeypatch.setenv("BLOGPUB_PAGE_SIZE", "5")
    settings = load_config()
    assert settings.cdn_domain == ""
    assert settings.page_size == 5
