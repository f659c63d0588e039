# docchat/core/pipeline.py
"""
Document chat pipeline: upload -> extract -> chunk -> summarize -> store,
plus the per-turn answer flow.

Key methods:
- answer(message, record): build the (optionally document-aware) prompt and
  ask the completion service; service failures become an apology text.
- store_document(session_id, file_name, data): create the session's
  DocumentRecord. A failed summary leaves the summary empty.
- ask_with_file(file_name, data, message): one-shot query, nothing stored.
- clear_document(session_id)
"""
import logging
from datetime import datetime
from typing import List, Optional

from docchat.core.chunker import chunk_document
from docchat.core.completion import CompletionClient
from docchat.core.config import Settings
from docchat.core.context import build_direct_prompt, build_prompt, build_summary_prompt
from docchat.core.errors import CompletionServiceError, EmptyDocumentError, UnsupportedFileTypeError
from docchat.core.extraction import extract_text, is_supported
from docchat.core.session_store import DocumentRecord, DocumentSessionStore
from docchat.utils import file_extension

logger = logging.getLogger(__name__)

APOLOGY_PREFIX = "I'm sorry, but I encountered an error: "


class ChatPipeline:
    def __init__(self, settings: Settings, completion: CompletionClient, sessions: DocumentSessionStore):
        self.settings = settings
        self.completion = completion
        self.sessions = sessions

    def _complete(self, prompt: str) -> str:
        return self.completion.complete(self.settings.SYSTEM_PROMPT, prompt)

    def _safe_complete(self, prompt: str) -> str:
        try:
            return self._complete(prompt)
        except CompletionServiceError as e:
            logger.error("Error calling completion service: %s", e)
            return f"{APOLOGY_PREFIX}{e}"

    # --- chat turn ---
    def answer(self, message: str, record: Optional[DocumentRecord] = None) -> str:
        self.completion.ensure_configured()
        prompt = build_prompt(record, message, self.settings.CHAT_CONTEXT_CHUNKS)
        if record is not None and record.chunks:
            logger.info("Added document context from '%s' (%d chunks available)",
                        record.file_name, len(record.chunks))
        return self._safe_complete(prompt)

    # --- document processing ---
    def _chunks_for_upload(self, file_name: str, data: bytes) -> List[str]:
        extension = file_extension(file_name)
        if not is_supported(extension):
            raise UnsupportedFileTypeError(extension)

        text = extract_text(data, extension)
        if not text or not text.strip():
            raise EmptyDocumentError("Could not extract text from the document")

        chunks = chunk_document(text, self.settings.CHUNK_SIZE)
        if not chunks:
            raise EmptyDocumentError("Could not process the document content")
        return chunks

    def summarize(self, file_name: str, chunks: List[str]) -> str:
        prompt = build_summary_prompt(file_name, chunks, self.settings.SUMMARY_CHUNKS)
        try:
            return self._complete(prompt)
        except CompletionServiceError as e:
            logger.warning("Summary generation failed for '%s': %s", file_name, e)
            return ""

    def store_document(self, session_id: str, file_name: str, data: bytes) -> DocumentRecord:
        self.completion.ensure_configured()
        chunks = self._chunks_for_upload(file_name, data)
        record = DocumentRecord(
            file_name=file_name,
            chunks=chunks,
            summary=self.summarize(file_name, chunks),
            upload_time=datetime.now(),
        )
        self.sessions.put(session_id, record)
        logger.info("Document '%s' stored in session with %d chunks (summary: %s)",
                    file_name, len(chunks), "yes" if record.summary else "no")
        return record

    def ask_with_file(self, file_name: str, data: bytes, message: str) -> str:
        self.completion.ensure_configured()
        chunks = self._chunks_for_upload(file_name, data)
        logger.info("Document chunked into %d chunks for direct query", len(chunks))
        prompt = build_direct_prompt(file_name, chunks, message, self.settings.DIRECT_CONTEXT_CHUNKS)
        return self._safe_complete(prompt)

    def current_document(self, session_id: Optional[str]) -> Optional[DocumentRecord]:
        return self.sessions.get(session_id)

    def clear_document(self, session_id: Optional[str]) -> bool:
        cleared = self.sessions.clear(session_id)
        logger.info("Document context cleared from session (had document: %s)", cleared)
        return cleared
