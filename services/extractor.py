import asyncio
import logging
import os
import shutil
import uuid
from contextlib import asynccontextmanager
from zipfile import BadZipFile

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from fastapi import UploadFile
from PyPDF2 import PdfReader
from PyPDF2.errors import DependencyError, PyPdfError

from utils.errors import ExtractionError, UnsupportedTypeError

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 20

PDF = "pdf"
WORD = "word"
TEXT = "text"

_MIME_KINDS = {
    "application/pdf": PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": WORD,
    "text/plain": TEXT,
}
_EXTENSION_KINDS = {
    ".pdf": PDF,
    ".docx": WORD,
    ".txt": TEXT,
}
# browsers send these when they cannot tell what the file is
_GENERIC_MIME_TYPES = {"", "application/octet-stream"}


def detect_kind(mime_type: str | None, filename: str | None = None) -> str:
    mime = (mime_type or "").split(";")[0].strip().lower()
    if mime in _MIME_KINDS:
        return _MIME_KINDS[mime]
    if mime in _GENERIC_MIME_TYPES and filename:
        ext = os.path.splitext(filename)[1].lower()
        if ext in _EXTENSION_KINDS:
            return _EXTENSION_KINDS[ext]
    raise UnsupportedTypeError(message="Unsupported file type", details=f"Unsupported file type: {mime_type or 'unknown'}")


def extract_pdf(filepath: str) -> str:
    try:
        reader = PdfReader(filepath)
        text = ""
        for page in reader.pages:
            text += (page.extract_text() or "") + "\n"
    except (PyPdfError, DependencyError, ValueError, KeyError, TypeError, AttributeError, OSError) as e:
        raise ExtractionError(details=f"PDF extraction failed: {e}")

    if not text.strip():
        raise ExtractionError(details="Unable to extract text from PDF (it may be scanned or image-based).")
    return text


def extract_docx(filepath: str) -> str:
    try:
        document = Document(filepath)
    except (PackageNotFoundError, BadZipFile, KeyError, ValueError) as e:
        raise ExtractionError(details=f"Word document extraction failed: {e}")

    text = "\n".join(p.text for p in document.paragraphs)
    if not text.strip():
        raise ExtractionError(details="No readable text found in Word document.")
    return text


def extract_plain_text(filepath: str) -> str:
    with open(filepath, "r", encoding="utf-8", errors="replace") as f:
        text = f.read()
    if not text.strip():
        raise ExtractionError(details="Text file is empty.")
    return text


_EXTRACTORS = {
    PDF: extract_pdf,
    WORD: extract_docx,
    TEXT: extract_plain_text,
}


def extract_text_from_file(filepath: str, mime_type: str | None, filename: str | None = None) -> str:
    kind = detect_kind(mime_type, filename)
    return _EXTRACTORS[kind](filepath)


def _write_upload(file: UploadFile, filepath: str):
    with open(filepath, "wb") as buffer:
        shutil.copyfileobj(file.file, buffer)


@asynccontextmanager
async def saved_upload(file: UploadFile, upload_dir: str):
    """Write an upload to a temporary path and remove it when the block exits."""
    os.makedirs(upload_dir, exist_ok=True)
    filepath = os.path.join(upload_dir, uuid.uuid4().hex)
    try:
        await asyncio.to_thread(_write_upload, file, filepath)
        yield filepath
    finally:
        if os.path.exists(filepath):
            os.remove(filepath)


async def extract_upload(file: UploadFile, upload_dir: str) -> str:
    """
    Extract the text of an uploaded file, enforcing the minimum length the quiz
    generator needs. The temporary copy is always removed.
    """
    async with saved_upload(file, upload_dir) as filepath:
        try:
            text = await asyncio.to_thread(extract_text_from_file, filepath, file.content_type, file.filename)
        except ExtractionError as e:
            logger.warning(f"Extraction failed for '{file.filename}' ({file.content_type}): {e.details}")
            raise

    if len(text.strip()) < MIN_TEXT_LENGTH:
        raise ExtractionError(details="Extracted text is too short or unreadable.")
    return text
