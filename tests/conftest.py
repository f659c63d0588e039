import io
from datetime import timedelta

import pytest
from docx import Document
from fastapi.testclient import TestClient
from openpyxl import Workbook

from docchat.api import routes
from docchat.core.config import Settings
from docchat.core.errors import CompletionServiceError, ConfigurationError
from docchat.core.pipeline import ChatPipeline
from docchat.core.session_store import DocumentSessionStore
from docchat.main import app


class FakeCompletion:
    """Stands in for CompletionClient; records every prompt it receives."""

    def __init__(self, reply="model reply"):
        self.reply = reply
        self.fail = False
        self.configured = True
        self.calls = []

    def ensure_configured(self):
        if not self.configured:
            raise ConfigurationError(["OPENAI_API_KEY"])

    def complete(self, system_prompt, user_prompt):
        self.ensure_configured()
        self.calls.append((system_prompt, user_prompt))
        if self.fail:
            raise CompletionServiceError("service unavailable")
        return self.reply


class FakeConversationLogger:
    def __init__(self, settings):
        self.settings = settings
        self.saved = []

    def save_conversation(self, user_message, ai_response, source="web"):
        self.saved.append((user_message, ai_response, source))
        return True


@pytest.fixture
def settings(tmp_path):
    s = Settings(settings_file=str(tmp_path / "appsettings.json"))
    s.CHUNK_SIZE = 2000
    s.CHAT_CONTEXT_CHUNKS = 3
    s.DIRECT_CONTEXT_CHUNKS = 5
    s.SUMMARY_CHUNKS = 3
    s.CONVERSATION_LOG_URL = ""
    s.CONVERSATION_LOG_KEY = ""
    return s


@pytest.fixture
def completion():
    return FakeCompletion()


@pytest.fixture
def sessions():
    return DocumentSessionStore(timedelta(minutes=20))


@pytest.fixture
def pipeline(settings, completion, sessions):
    return ChatPipeline(settings, completion, sessions)


@pytest.fixture
def conv_log(settings):
    return FakeConversationLogger(settings)


@pytest.fixture
def client(pipeline, conv_log):
    app.dependency_overrides[routes.get_pipeline] = lambda: pipeline
    app.dependency_overrides[routes.get_conversation_logger] = lambda: conv_log
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_docx(paragraphs):
    doc = Document()
    for p in paragraphs:
        doc.add_paragraph(p)
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


def make_xlsx(rows, sheet_title="Sheet1"):
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def docx_bytes():
    return make_docx(["First paragraph about apples.", "Second paragraph about pears."])
