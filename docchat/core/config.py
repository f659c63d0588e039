# docchat/core/config.py
import os
from pathlib import Path
from typing import Any, Optional
from dotenv import load_dotenv

from docchat.utils import load_json

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH)


def _load_settings_file(path: str) -> dict:
    try:
        data = load_json(path)
    except (FileNotFoundError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


class Settings:
    """
    Values are resolved env var -> settings file section -> default.
    The settings file is optional and uses nested sections, e.g.
    {"OpenAI": {"ApiKey": "..."}, "ConversationLog": {"Url": "..."}}.
    """

    def __init__(self, settings_file: Optional[str] = None):
        self.SETTINGS_FILE: str = settings_file or os.getenv("APPSETTINGS_PATH", str(BASE_DIR / "appsettings.json"))
        self._file = _load_settings_file(self.SETTINGS_FILE)

        # Completion service (Azure OpenAI style deployment)
        self.OPENAI_API_KEY: str = self._lookup("OPENAI_API_KEY", "OpenAI", "ApiKey")
        self.OPENAI_ENDPOINT: str = self._lookup("OPENAI_ENDPOINT", "OpenAI", "Endpoint")
        self.OPENAI_DEPLOYMENT_NAME: str = self._lookup("OPENAI_DEPLOYMENT_NAME", "OpenAI", "DeploymentName")
        self.OPENAI_API_VERSION: str = self._lookup("OPENAI_API_VERSION", "OpenAI", "ApiVersion")
        timeout = os.getenv("COMPLETION_TIMEOUT", "").strip()
        self.COMPLETION_TIMEOUT: Optional[float] = float(timeout) if timeout else None

        # Conversation log sink
        self.CONVERSATION_LOG_URL: str = self._lookup("CONVERSATION_LOG_URL", "ConversationLog", "Url")
        self.CONVERSATION_LOG_KEY: str = self._lookup("CONVERSATION_LOG_KEY", "ConversationLog", "Key")
        self.CONVERSATION_LOG_USER_ID: str = self._lookup(
            "CONVERSATION_LOG_USER_ID", "ConversationLog", "UserId", "anonymous-user")
        self.CONVERSATION_LOG_USER_EMAIL: str = self._lookup(
            "CONVERSATION_LOG_USER_EMAIL", "ConversationLog", "UserEmail", "anonymous@anonymous.com")

        # Chunking / context sizes
        self.CHUNK_SIZE: int = int(os.getenv("CHUNK_SIZE", 2000))
        self.CHAT_CONTEXT_CHUNKS: int = int(os.getenv("CHAT_CONTEXT_CHUNKS", 3))
        self.DIRECT_CONTEXT_CHUNKS: int = int(os.getenv("DIRECT_CONTEXT_CHUNKS", 5))
        self.SUMMARY_CHUNKS: int = int(os.getenv("SUMMARY_CHUNKS", 3))

        # Document sessions
        self.SESSION_IDLE_MINUTES: int = int(os.getenv("SESSION_IDLE_MINUTES", 20))
        self.SESSION_COOKIE: str = os.getenv("SESSION_COOKIE", "docchat_session").strip()

        self.ASSISTANT_NAME: str = os.getenv("ASSISTANT_NAME", "DocChat").strip()
        self.APP_ENV: str = os.getenv("APP_ENV", "Not Set").strip()
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()

        # CORS (comma separated)
        self.ALLOW_ORIGINS = [o.strip() for o in os.getenv("ALLOW_ORIGINS", "*").split(",") if o.strip()]

    def _lookup(self, env_name: str, section: str, key: str, default: str = "") -> str:
        value = os.getenv(env_name, "").strip()
        if value:
            return value
        section_data = self._file.get(section)
        if isinstance(section_data, dict):
            file_value: Any = section_data.get(key)
            if file_value not in (None, ""):
                return str(file_value).strip()
        return default

    @property
    def SYSTEM_PROMPT(self) -> str:
        return (
            f"You are {self.ASSISTANT_NAME}, a helpful AI assistant. You are knowledgeable, "
            "friendly, and able to assist with a wide range of topics."
        )

    def missing_completion_settings(self) -> list:
        required = {
            "OPENAI_API_KEY": self.OPENAI_API_KEY,
            "OPENAI_ENDPOINT": self.OPENAI_ENDPOINT,
            "OPENAI_DEPLOYMENT_NAME": self.OPENAI_DEPLOYMENT_NAME,
            "OPENAI_API_VERSION": self.OPENAI_API_VERSION,
        }
        return [name for name, value in required.items() if not value]


# instantiate
settings = Settings()
