# tests/test_config.py
from importlib import reload

import pytest

import gateway.core.config as cfg_mod


@pytest.fixture(autouse=True)
def _restore_config():
    # env is restored by monkeypatch first, then the module is re-read
    yield
    reload(cfg_mod)


def test_defaults_present(monkeypatch):
    # Defaults apply when the environment is silent.
    for name in ("DEFAULT_PROVIDER", "GEMINI_MODEL", "LMSTUDIO_TIMEOUT", "MAX_IMAGE_MB", "PORT"):
        monkeypatch.delenv(name, raising=False)
    reload(cfg_mod)
    assert cfg_mod.DEFAULT_PROVIDER == "gemini"
    assert cfg_mod.GEMINI_MODEL == "gemini-1.5-flash"
    assert cfg_mod.LMSTUDIO_TIMEOUT > 0
    assert cfg_mod.MAX_IMAGE_MB == 15
    assert cfg_mod.PORT == 5000


def test_blank_values_count_as_unset(monkeypatch):
    # Blank strings fall back to defaults / None instead of leaking "" into adapters.
    monkeypatch.setenv("DEFAULT_PROVIDER", "   ")
    monkeypatch.setenv("LMSTUDIO_MODEL", "")
    monkeypatch.setenv("LMSTUDIO_API_KEY", " ")
    reload(cfg_mod)
    assert cfg_mod.DEFAULT_PROVIDER == "gemini"
    assert cfg_mod.LMSTUDIO_MODEL is None
    assert cfg_mod.LMSTUDIO_API_KEY is None


def test_google_api_key_fallback(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
    reload(cfg_mod)
    assert cfg_mod.GEMINI_API_KEY == "g-key"


def test_load_settings_snapshot(monkeypatch):
    # load_settings() copies the module values into the struct handed to adapters.
    monkeypatch.setenv("DEFAULT_PROVIDER", "LMStudio")
    monkeypatch.setenv("LMSTUDIO_BASE_URL", "http://127.0.0.1:1234/")
    monkeypatch.setenv("LMSTUDIO_MODEL", "qwen2.5-7b-instruct")
    reload(cfg_mod)
    s = cfg_mod.load_settings()
    assert s.default_provider == "lmstudio"
    assert s.lmstudio_base_url == "http://127.0.0.1:1234"
    assert s.lmstudio_model == "qwen2.5-7b-instruct"
