# docchat/core/conversation_log.py
"""
Fire-and-forget conversation logging to an external HTTP sink.
save_conversation never raises; every failure is logged and dropped.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

import requests

from docchat.core.config import Settings, settings as default_settings
from docchat.utils import redact

logger = logging.getLogger(__name__)


class ConversationLogger:
    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or default_settings
        self.http = session or requests

    @property
    def configured(self) -> bool:
        return bool(self.settings.CONVERSATION_LOG_URL and self.settings.CONVERSATION_LOG_KEY)

    def request_url(self) -> str:
        url = self.settings.CONVERSATION_LOG_URL
        key = self.settings.CONVERSATION_LOG_KEY
        if key and "code=" not in url:
            url = url + ("&" if "?" in url else "?") + "code=" + key
        return url

    def build_payload(self, user_message: str, ai_response: str, source: str = "web") -> dict:
        return {
            "conversationId": str(uuid.uuid4()),
            "userId": self.settings.CONVERSATION_LOG_USER_ID,
            "userEmail": self.settings.CONVERSATION_LOG_USER_EMAIL,
            "chatType": source,
            "messages": [
                {"role": "user", "content": user_message},
                {"role": "assistant", "content": ai_response},
            ],
            "totalTokens": 0,
            "metadata": {
                "source": source,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        }

    def save_conversation(self, user_message: str, ai_response: str, source: str = "web") -> bool:
        """Returns True when the sink accepted the turn."""
        try:
            if not self.settings.CONVERSATION_LOG_URL:
                logger.warning("Conversation log URL not configured. Skipping conversation save.")
                return False
            if not self.settings.CONVERSATION_LOG_KEY:
                logger.warning("Conversation log key not configured. Skipping conversation save.")
                return False

            url = self.request_url()
            logger.info("Sending conversation to log sink at: %s",
                        redact(url, self.settings.CONVERSATION_LOG_KEY))
            resp = self.http.post(url, json=self.build_payload(user_message, ai_response, source))
            if not resp.ok:
                logger.warning("Failed to save conversation. Status code: %s, Error: %s",
                               resp.status_code, resp.text)
                return False
            logger.info("Conversation saved successfully.")
            return True
        except Exception as e:
            # never fail the user-facing request
            logger.error("Error saving conversation: %s", e, exc_info=True)
            return False
