from __future__ import annotations

from cloudnav import config


def test_server_url_precedence(monkeypatch):
    monkeypatch.delenv("CLOUDNAV_SERVER_URL", raising=False)
    assert config.get_server_url({}) == config.DEFAULT_SERVER_URL
    assert config.get_server_url({"server_url": "https://nav.example/"}) == "https://nav.example"

    monkeypatch.setenv("CLOUDNAV_SERVER_URL", "https://env.example")
    assert config.get_server_url({"server_url": "https://nav.example"}) == "https://env.example"


def test_ai_key_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    assert config.get_ai_settings({})["api_key"] == "env-key"
    assert config.get_ai_settings({"ai": {"api_key": "file-key"}})["api_key"] == "file-key"
    assert config.get_ai_settings({})["model"] == config.DEFAULT_AI_MODEL


def test_invalid_timeout_uses_default():
    assert config.get_http_timeout({"http_timeout": "soon"}) == config.HTTP_TIMEOUT
    assert config.get_http_timeout({"http_timeout": 3}) == 3.0


def test_load_config_creates_default(tmp_path, monkeypatch):
    path = tmp_path / "cloudnav" / "config.json"
    monkeypatch.setattr(config, "CONFIG_PATH", str(path))

    loaded = config.load_config()

    assert path.exists()
    assert loaded["server_url"] == config.DEFAULT_SERVER_URL
