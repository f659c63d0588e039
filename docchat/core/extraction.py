# docchat/core/extraction.py
"""
Best-effort text extraction for uploaded documents.
extract_text never raises: unknown types and parse failures yield "".
"""
import io
import logging

from docx import Document as DocxDocument
from docx.table import Table
from openpyxl import load_workbook
from pypdf import PdfReader

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".xlsx")


def is_supported(extension: str) -> bool:
    return (extension or "").lower() in SUPPORTED_EXTENSIONS


def extract_text_pdf(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    text_parts = []
    for page in reader.pages:
        page_text = page.extract_text()
        if page_text:
            text_parts.append(page_text)
    return "\n".join(text_parts)


def _table_text(table: Table) -> str:
    rows = []
    for row in table.rows:
        cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
        if cells:
            rows.append("\t".join(cells))
    return "\n".join(rows)


def extract_text_docx(data: bytes) -> str:
    """Paragraphs and tables in body order, one blank-line block each."""
    doc = DocxDocument(io.BytesIO(data))
    parts = []
    for block in doc.iter_inner_content():
        text = _table_text(block) if isinstance(block, Table) else block.text
        if text.strip():
            parts.append(text)
    return "\n\n".join(parts)


def extract_text_xlsx(data: bytes) -> str:
    wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    sheets = []
    try:
        for ws in wb.worksheets:
            rows = []
            for row in ws.iter_rows(values_only=True):
                line = " ".join(str(c) for c in row if c is not None and str(c) != "")
                if line:
                    rows.append(line)
            if rows:
                sheets.append("\n".join(rows))
    finally:
        wb.close()
    return "\n\n".join(sheets)


_EXTRACTORS = {
    ".pdf": extract_text_pdf,
    ".docx": extract_text_docx,
    ".xlsx": extract_text_xlsx,
}


def extract_text(data: bytes, extension: str) -> str:
    extractor = _EXTRACTORS.get((extension or "").lower())
    if extractor is None:
        logger.warning("Unsupported file format: %s", extension)
        return ""
    if not data:
        return ""
    try:
        return extractor(data) or ""
    except Exception:
        logger.exception("Error extracting text from %s document", extension)
        return ""
