# models.py
from pydantic import BaseModel, Field
from typing import List


class ChatRequest(BaseModel):
    message: str = ""


class ChatResponse(BaseModel):
    response: str


class UploadResponse(BaseModel):
    response: str
    documentStored: bool = True
    chunkCount: int


class ClearResponse(BaseModel):
    success: bool = True
    message: str = "Document context cleared"


class ChatHistoryMessage(BaseModel):
    role: str = ""
    content: str = ""
    timestamp: str = ""


class ChatHistoryRequest(BaseModel):
    messages: List[ChatHistoryMessage] = Field(default_factory=list)


class ConfigCheckResponse(BaseModel):
    OPENAI_API_KEY_Set: bool
    OPENAI_ENDPOINT_Set: bool
    OPENAI_DEPLOYMENT_NAME_Set: bool
    OPENAI_API_VERSION_Set: bool
    CONVERSATION_LOG_URL_Set: bool
    CONVERSATION_LOG_KEY_Set: bool
    Environment: str
