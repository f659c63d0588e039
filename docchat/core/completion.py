# docchat/core/completion.py
"""
Chat-completions client for an Azure OpenAI style deployment.

complete(system_prompt, user_prompt) returns the assistant text or raises
CompletionServiceError. Missing configuration raises ConfigurationError
before any request is made.
"""
import logging
from typing import Optional

import requests

from docchat.core.config import Settings, settings as default_settings
from docchat.core.errors import CompletionServiceError, ConfigurationError

logger = logging.getLogger(__name__)

# Generation options
MAX_TOKENS = 800
TEMPERATURE = 0.7
TOP_P = 0.95


class CompletionClient:
    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or default_settings
        self.http = session or requests

    def ensure_configured(self):
        missing = self.settings.missing_completion_settings()
        if missing:
            logger.error("Completion configuration incomplete. Missing: %s", ", ".join(missing))
            raise ConfigurationError(missing)

    @property
    def url(self) -> str:
        endpoint = self.settings.OPENAI_ENDPOINT.rstrip("/")
        return f"{endpoint}/openai/deployments/{self.settings.OPENAI_DEPLOYMENT_NAME}/chat/completions"

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.ensure_configured()
        key = self.settings.OPENAI_API_KEY
        headers = {
            "api-key": key,
            "Content-Type": "application/json",
        }
        body = {
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": MAX_TOKENS,
            "temperature": TEMPERATURE,
            "top_p": TOP_P,
            "frequency_penalty": 0,
            "presence_penalty": 0,
        }

        logger.info("Calling completion endpoint: %s", self.url)
        logger.debug("Deployment: %s | API key length: %d-chars",
                     self.settings.OPENAI_DEPLOYMENT_NAME, len(key))
        try:
            resp = self.http.post(
                self.url,
                params={"api-version": self.settings.OPENAI_API_VERSION},
                headers=headers,
                json=body,
                timeout=self.settings.COMPLETION_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.exception("HTTP exception when calling completion endpoint")
            raise CompletionServiceError(f"HTTP exception: {e}") from e

        if resp.status_code != 200:
            raw = resp.text or "<no-body>"
            preview = raw if len(raw) < 2000 else raw[:2000] + "...(truncated)"
            logger.error("Non-200 status from completion endpoint: %s | %s", resp.status_code, preview)
            raise CompletionServiceError(f"Completion error {resp.status_code}: {preview}")

        try:
            payload = resp.json()
        except ValueError as e:
            logger.error("Completion response was not JSON")
            raise CompletionServiceError(f"Invalid JSON: {e}") from e

        return extract_message_text(payload)


def extract_message_text(payload: dict) -> str:
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise CompletionServiceError(f"Unexpected completion payload: {e!r}") from e
    if content is None:
        raise CompletionServiceError("Completion returned no content")
    if isinstance(content, list):
        # content-part arrays: keep the text parts
        content = "".join(p.get("text", "") for p in content if isinstance(p, dict))
    return str(content).strip()
