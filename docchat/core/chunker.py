# chunker.py
"""
Size-bounded document chunker.

Text is packed into chunks of at most max_chunk_size characters, preferring
paragraph boundaries, then sentence boundaries, then word boundaries. Words
are never split, so a single word longer than the limit becomes its own
oversized chunk. Nothing is dropped except whitespace-only paragraphs.
"""
import logging
import re
from typing import List

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHUNK_SIZE = 4000

# one or more blank (whitespace-only) lines
_PARAGRAPH_BREAK = re.compile(r"\r?\n\s*\n")
# sentence-ending punctuation followed by whitespace; punctuation stays left
_SENTENCE_BREAK = re.compile(r"(?<=[.?!])\s+")


def split_paragraphs(text: str) -> List[str]:
    return [p for p in _PARAGRAPH_BREAK.split(text) if p and not p.isspace()]


def split_sentences(paragraph: str) -> List[str]:
    return [s for s in _SENTENCE_BREAK.split(paragraph) if s and not s.isspace()]


class _ChunkBuffer:
    def __init__(self, max_chunk_size: int):
        self.max_chunk_size = max_chunk_size
        self.parts: List[str] = []
        self.length = 0
        self.chunks: List[str] = []

    def fits(self, extra: int) -> bool:
        return self.length == 0 or self.length + extra <= self.max_chunk_size

    def append(self, piece: str, separator: str):
        self.parts.append(piece)
        self.parts.append(separator)
        self.length += len(piece) + len(separator)

    def add(self, piece: str, separator: str, extra: int = 0):
        # flush first when piece (plus extra) would push a non-empty buffer over
        if not self.fits(len(piece) + extra):
            self.flush()
        self.append(piece, separator)

    def flush(self):
        if self.length == 0:
            return
        chunk = "".join(self.parts).strip()
        if chunk:
            self.chunks.append(chunk)
        self.parts = []
        self.length = 0


def chunk_document(text: str, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> List[str]:
    """
    Split text into ordered chunks no longer than max_chunk_size.

    - "" -> []
    - text that already fits -> [text] (returned as-is, not trimmed)
    - otherwise paragraphs are packed together; an oversized paragraph falls
      back to sentences and an oversized sentence falls back to words.
    """
    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be positive")
    if not text:
        return []
    if len(text) <= max_chunk_size:
        return [text]

    buf = _ChunkBuffer(max_chunk_size)
    for paragraph in split_paragraphs(text):
        if not buf.fits(len(paragraph)):
            buf.flush()

        if len(paragraph) <= max_chunk_size:
            buf.append(paragraph, "\n\n")
            continue

        for sentence in split_sentences(paragraph):
            if len(sentence) <= max_chunk_size:
                buf.add(sentence, " ")
                continue
            if not buf.fits(len(sentence)):
                buf.flush()
            for word in sentence.split():
                buf.add(word, " ", extra=1)

    buf.flush()
    logger.info("Document chunked into %d chunks", len(buf.chunks))
    return buf.chunks
