# utils.py
import json
import uuid
from pathlib import Path


def load_json(path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def new_session_id() -> str:
    return uuid.uuid4().hex


def redact(text: str, secret: str, marker: str = "[REDACTED]") -> str:
    """
    Replace every occurrence of secret in text (no-op for an empty secret).
    """
    if not secret:
        return text
    return text.replace(secret, marker)


def file_extension(file_name: str) -> str:
    return Path(file_name or "").suffix.lower()
