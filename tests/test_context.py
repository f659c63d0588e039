from docchat.core.context import (
    CHUNK_SEPARATOR, build_direct_prompt, build_prompt, build_summary_prompt, join_chunks,
)
from docchat.core.session_store import DocumentRecord


def _record(n=5, summary="A short summary."):
    return DocumentRecord(file_name="report.pdf", chunks=[f"chunk-{i}" for i in range(n)], summary=summary)


def test_no_document_returns_message_unchanged():
    assert build_prompt(None, "What is up?", 3) == "What is up?"


def test_record_without_chunks_returns_message_unchanged():
    record = DocumentRecord(file_name="x.pdf", chunks=[])
    assert build_prompt(record, "hello", 3) == "hello"


def test_first_three_of_five_chunks_with_summary():
    prompt = build_prompt(_record(), "Who wrote it?", 3)
    expected_chunks = CHUNK_SEPARATOR.join(["chunk-0", "chunk-1", "chunk-2"])
    assert expected_chunks in prompt
    assert "chunk-3" not in prompt and "chunk-4" not in prompt
    assert "Document summary: A short summary.\n\n" in prompt
    assert "'report.pdf'" in prompt
    assert prompt.endswith("The user asks: Who wrote it?")
    assert prompt.index("Document summary") < prompt.index("chunk-0")


def test_empty_summary_omits_summary_section():
    prompt = build_prompt(_record(summary=""), "q", 3)
    assert "Document summary" not in prompt
    assert "chunk-0" in prompt


def test_fewer_chunks_than_limit_uses_all():
    assert join_chunks(["a", "b"], 5) == "a" + CHUNK_SEPARATOR + "b"


def test_direct_prompt_uses_larger_ceiling():
    chunks = [f"part-{i}" for i in range(8)]
    prompt = build_direct_prompt("data.xlsx", chunks, "Total?", 5)
    assert "part-4" in prompt and "part-5" not in prompt
    assert prompt.startswith("The following is content from a document named 'data.xlsx':")
    assert prompt.endswith("please answer the following question: Total?")


def test_summary_prompt_takes_first_chunks():
    prompt = build_summary_prompt("notes.docx", ["one", "two", "three", "four"], 3)
    assert "one\n\ntwo\n\nthree" in prompt
    assert "four" not in prompt
    assert "'notes.docx'" in prompt
