# docchat/core/context.py
"""
Prompt assembly for document-aware chat.

Context selection is positional: the first N chunks of the document are
used, with no relevance ranking. Anything past them is not seen by the model.
"""
from typing import List, Optional, Sequence

from docchat.core.session_store import DocumentRecord

CHUNK_SEPARATOR = "\n\n---\n\n"


def select_chunks(chunks: Sequence[str], max_chunks_to_include: int) -> List[str]:
    return list(chunks[:max(max_chunks_to_include, 0)])


def join_chunks(chunks: Sequence[str], max_chunks_to_include: int) -> str:
    return CHUNK_SEPARATOR.join(select_chunks(chunks, max_chunks_to_include))


def build_prompt(record: Optional[DocumentRecord], user_message: str, max_chunks_to_include: int = 3) -> str:
    if record is None or not record.chunks:
        return user_message

    summary_section = ""
    if record.summary:
        summary_section = f"Document summary: {record.summary}\n\n"

    chunks_text = join_chunks(record.chunks, max_chunks_to_include)
    return (
        f"Based on the document named '{record.file_name}', here are the relevant sections:\n\n"
        f"{summary_section}{chunks_text}\n\n"
        f"The user asks: {user_message}"
    )


def build_direct_prompt(file_name: str, chunks: Sequence[str], user_message: str,
                        max_chunks_to_include: int = 5) -> str:
    """One-shot upload-and-ask prompt; nothing here is persisted."""
    document_content = join_chunks(chunks, max_chunks_to_include)
    return (
        f"The following is content from a document named '{file_name}':\n\n"
        f"{document_content}\n\n"
        f"Based on this document, please answer the following question: {user_message}"
    )


def build_summary_prompt(file_name: str, chunks: Sequence[str], max_chunks: int = 3) -> str:
    summary_text = "\n\n".join(select_chunks(chunks, max_chunks))
    return (
        f"The following is content from a document named '{file_name}'. "
        f"Please analyze it and provide a concise summary: \n\n{summary_text}"
    )
