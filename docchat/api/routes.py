# docchat/api/routes.py
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, Request, Response, UploadFile

from docchat.api.models import (
    ChatHistoryRequest, ChatRequest, ChatResponse, ClearResponse, ConfigCheckResponse, UploadResponse,
)
from docchat.core.completion import CompletionClient
from docchat.core.config import settings
from docchat.core.conversation_log import ConversationLogger
from docchat.core.errors import ConfigurationError, UploadError
from docchat.core.pipeline import ChatPipeline
from docchat.core.session_store import DocumentSessionStore
from docchat.utils import new_session_id

logger = logging.getLogger(__name__)

router = APIRouter()

# Initialize shared resources (singleton style)
document_sessions = DocumentSessionStore(timedelta(minutes=settings.SESSION_IDLE_MINUTES))
pipeline = ChatPipeline(settings, CompletionClient(settings), document_sessions)
conversation_logger = ConversationLogger(settings)

NO_SUMMARY_NOTICE = "The document was stored, but a summary could not be generated. You can still ask questions about it."


def get_pipeline() -> ChatPipeline:
    return pipeline


def get_conversation_logger() -> ConversationLogger:
    return conversation_logger


# ---------- helpers ----------
def _session_id(request: Request, response: Response, pipe: ChatPipeline) -> str:
    cookie = pipe.settings.SESSION_COOKIE
    session_id = request.cookies.get(cookie)
    if not session_id:
        session_id = new_session_id()
        response.set_cookie(cookie, session_id, httponly=True, samesite="lax")
    return session_id


def _read_upload(file: Optional[UploadFile]) -> bytes:
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    data = file.file.read()
    if not data:
        raise HTTPException(status_code=400, detail="No file uploaded")
    return data


def _attachment(content: str, media_type: str, file_name: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


# ---------- Endpoints ----------
@router.post("/chat", response_model=ChatResponse)
def chat(req: ChatRequest, request: Request, background_tasks: BackgroundTasks,
         pipe: ChatPipeline = Depends(get_pipeline),
         conv_log: ConversationLogger = Depends(get_conversation_logger)):
    if not req.message or not req.message.strip():
        raise HTTPException(status_code=400, detail="message required")

    record = pipe.current_document(request.cookies.get(pipe.settings.SESSION_COOKIE))
    try:
        answer = pipe.answer(req.message, record)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if record is None:
        # runs after the response is sent; outcome never reaches the caller
        background_tasks.add_task(conv_log.save_conversation, req.message, answer)
    return ChatResponse(response=answer)


@router.post("/chat/with-document", response_model=UploadResponse)
def chat_with_document(request: Request, response: Response,
                       file: Optional[UploadFile] = File(None),
                       pipe: ChatPipeline = Depends(get_pipeline)):
    data = _read_upload(file)
    session_id = _session_id(request, response, pipe)
    try:
        record = pipe.store_document(session_id, file.filename, data)
    except (ConfigurationError, UploadError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Error processing document %s", file.filename)
        raise HTTPException(status_code=500, detail="Error processing document")

    return UploadResponse(
        response=record.summary or NO_SUMMARY_NOTICE,
        documentStored=True,
        chunkCount=len(record.chunks),
    )


@router.post("/chat/with-file", response_model=ChatResponse)
def chat_with_file(file: Optional[UploadFile] = File(None),
                   message: Optional[str] = Form(None),
                   pipe: ChatPipeline = Depends(get_pipeline)):
    data = _read_upload(file)
    if not message or not message.strip():
        raise HTTPException(status_code=400, detail="No message provided")

    logger.info("Received chat with file request. File: %s", file.filename)
    try:
        answer = pipe.ask_with_file(file.filename, data, message)
    except (ConfigurationError, UploadError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Error processing document with message. File: %s", file.filename)
        raise HTTPException(status_code=500, detail="Error processing document with message")
    return ChatResponse(response=answer)


@router.post("/chat/clear-document", response_model=ClearResponse)
def clear_document(request: Request, pipe: ChatPipeline = Depends(get_pipeline)):
    pipe.clear_document(request.cookies.get(pipe.settings.SESSION_COOKIE))
    return ClearResponse()


@router.post("/chat/download-history")
async def download_history(request: Request, pipe: ChatPipeline = Depends(get_pipeline)):
    """
    Accepts a JSON body {"messages": [...]} or a form field "messages"
    holding the same JSON. Form payloads that cannot be read still produce
    a plain-text transcript file.
    """
    title = f"{pipe.settings.ASSISTANT_NAME} Chat Transcript"
    now = datetime.now(timezone.utc)
    base_name = f"{pipe.settings.ASSISTANT_NAME.lower()}-chat-{now.strftime('%Y-%m-%d')}"
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        raw = str(form.get("messages") or "")
        try:
            parsed = json.loads(raw)
            if isinstance(parsed, list):
                parsed = {"messages": parsed}
            history = ChatHistoryRequest.model_validate(parsed)
        except ValueError:
            logger.warning("Could not read messages from form payload")
            text = f"{title}\r\nError processing messages. Using raw data.\r\n\r\n{raw}"
            return _attachment(text, "text/plain", base_name + ".txt")
        if not history.messages:
            logger.warning("No messages found in download request")
            return _attachment(f"{title}\r\nNo messages found.\r\n", "text/plain", base_name + ".txt")
    else:
        try:
            history = ChatHistoryRequest.model_validate(await request.json())
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid chat history payload")

    chat_data = {
        "metadata": {"title": title, "generated": now.isoformat(), "version": "1.0"},
        "messages": [m.model_dump() for m in history.messages],
    }
    return _attachment(json.dumps(chat_data, indent=2, ensure_ascii=False), "application/json", base_name + ".json")


@router.get("/chat/test-function")
def send_test_conversation(conv_log: ConversationLogger = Depends(get_conversation_logger)):
    if not conv_log.settings.CONVERSATION_LOG_URL:
        raise HTTPException(status_code=400, detail="Conversation log URL not configured")
    if not conv_log.settings.CONVERSATION_LOG_KEY:
        raise HTTPException(status_code=400, detail="Conversation log key not configured")
    delivered = conv_log.save_conversation("This is a test message", "This is a test response", source="test")
    return {"message": "Test conversation sent to conversation log", "delivered": delivered}


@router.get("/configcheck", response_model=ConfigCheckResponse)
def config_check(pipe: ChatPipeline = Depends(get_pipeline)):
    s = pipe.settings
    return ConfigCheckResponse(
        OPENAI_API_KEY_Set=bool(s.OPENAI_API_KEY),
        OPENAI_ENDPOINT_Set=bool(s.OPENAI_ENDPOINT),
        OPENAI_DEPLOYMENT_NAME_Set=bool(s.OPENAI_DEPLOYMENT_NAME),
        OPENAI_API_VERSION_Set=bool(s.OPENAI_API_VERSION),
        CONVERSATION_LOG_URL_Set=bool(s.CONVERSATION_LOG_URL),
        CONVERSATION_LOG_KEY_Set=bool(s.CONVERSATION_LOG_KEY),
        Environment=s.APP_ENV,
    )
