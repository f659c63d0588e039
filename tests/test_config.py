import json

from docchat.core.config import Settings

COMPLETION_VARS = ("OPENAI_API_KEY", "OPENAI_ENDPOINT", "OPENAI_DEPLOYMENT_NAME", "OPENAI_API_VERSION")


def _clear_env(monkeypatch):
    for name in COMPLETION_VARS + ("CONVERSATION_LOG_URL", "CONVERSATION_LOG_KEY",
                                   "CONVERSATION_LOG_USER_ID", "CONVERSATION_LOG_USER_EMAIL"):
        monkeypatch.delenv(name, raising=False)


def test_env_var_wins_over_settings_file(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    path = tmp_path / "appsettings.json"
    path.write_text(json.dumps({"OpenAI": {"ApiKey": "from-file", "Endpoint": "https://file"}}))
    monkeypatch.setenv("OPENAI_API_KEY", "from-env")
    s = Settings(settings_file=str(path))
    assert s.OPENAI_API_KEY == "from-env"
    assert s.OPENAI_ENDPOINT == "https://file"


def test_defaults_and_missing_file(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    s = Settings(settings_file=str(tmp_path / "nope.json"))
    assert s.CONVERSATION_LOG_USER_ID == "anonymous-user"
    assert s.CONVERSATION_LOG_USER_EMAIL == "anonymous@anonymous.com"
    assert set(s.missing_completion_settings()) == set(COMPLETION_VARS)


def test_malformed_settings_file_is_ignored(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    path = tmp_path / "appsettings.json"
    path.write_text("{not json")
    s = Settings(settings_file=str(path))
    assert s.OPENAI_API_KEY == ""


def test_system_prompt_uses_assistant_name(tmp_path, monkeypatch):
    monkeypatch.setenv("ASSISTANT_NAME", "Helper")
    s = Settings(settings_file=str(tmp_path / "none.json"))
    assert s.SYSTEM_PROMPT.startswith("You are Helper,")
