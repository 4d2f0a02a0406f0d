import io
import os

import pytest
from docx import Document
from PyPDF2 import PdfWriter
from PyPDF2.errors import DependencyError, PageSizeNotDefinedError
from starlette.datastructures import Headers, UploadFile

import services.extractor as extractor
from services.extractor import (
    PDF,
    TEXT,
    WORD,
    detect_kind,
    extract_text_from_file,
    extract_upload,
)
from utils.errors import ExtractionError, UnsupportedTypeError

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
NOTES = "Photosynthesis converts light energy into chemical energy in plants."


def make_text_pdf(text):
    """A one-page PDF showing `text` in Helvetica."""
    stream = f"BT /F1 18 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = b"%PDF-1.4\n"
    offsets = []
    for i, obj in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % i + obj + b"\nendobj\n"
    xref = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for off in offsets:
        out += b"%010d 00000 n \n" % off
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref)
    return out


def make_docx(path, *paragraphs):
    document = Document()
    for p in paragraphs:
        document.add_paragraph(p)
    document.save(path)


def make_upload(content: bytes, filename: str, content_type: str):
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.mark.parametrize("mime,filename,kind", [
    ("application/pdf", "notes.pdf", PDF),
    (DOCX_MIME, "notes.docx", WORD),
    ("text/plain", "notes.txt", TEXT),
    ("text/plain; charset=utf-8", "notes", TEXT),
    ("application/octet-stream", "notes.docx", WORD),
    ("", "notes.txt", TEXT),
])
def test_detect_kind(mime, filename, kind):
    assert detect_kind(mime, filename) == kind


@pytest.mark.parametrize("mime,filename", [
    ("image/png", "scan.png"),
    ("text/csv", "sheet.csv"),
    ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", "sheet.xlsx"),
    ("image/png", "notes.txt"),
    (None, None),
])
def test_detect_kind_unsupported(mime, filename):
    with pytest.raises(UnsupportedTypeError) as err:
        detect_kind(mime, filename)
    assert err.value.status_code == 400


def test_extract_plain_text(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text(NOTES, encoding="utf-8")
    assert extract_text_from_file(str(path), "text/plain") == NOTES


def test_extract_empty_text_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("   \n", encoding="utf-8")
    with pytest.raises(ExtractionError) as err:
        extract_text_from_file(str(path), "text/plain")
    assert err.value.details == "Text file is empty."


def test_extract_docx(tmp_path):
    path = tmp_path / "notes.docx"
    make_docx(path, "Chapter one", NOTES)
    text = extract_text_from_file(str(path), DOCX_MIME)
    assert "Chapter one" in text
    assert NOTES in text


def test_extract_empty_docx(tmp_path):
    path = tmp_path / "empty.docx"
    make_docx(path)
    with pytest.raises(ExtractionError) as err:
        extract_text_from_file(str(path), DOCX_MIME)
    assert "No readable text" in err.value.details


def test_extract_corrupt_docx(tmp_path):
    path = tmp_path / "broken.docx"
    path.write_bytes(b"definitely not a zip file")
    with pytest.raises(ExtractionError):
        extract_text_from_file(str(path), DOCX_MIME)


def test_extract_pdf(tmp_path):
    path = tmp_path / "notes.pdf"
    path.write_bytes(make_text_pdf("Photosynthesis converts light"))
    assert "Photosynthesis converts light" in extract_text_from_file(str(path), "application/pdf")


def test_extract_pdf_without_text(tmp_path):
    path = tmp_path / "scan.pdf"
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    with open(path, "wb") as f:
        writer.write(f)

    with pytest.raises(ExtractionError) as err:
        extract_text_from_file(str(path), "application/pdf")
    assert "scanned or image-based" in err.value.details


async def test_extract_upload_removes_temp_file(tmp_path):
    upload_dir = tmp_path / "uploads"
    text = await extract_upload(make_upload(NOTES.encode(), "notes.txt", "text/plain"), str(upload_dir))
    assert text == NOTES
    assert os.listdir(upload_dir) == []


async def test_extract_upload_unsupported_type_leaves_nothing(tmp_path):
    upload_dir = tmp_path / "uploads"
    with pytest.raises(UnsupportedTypeError):
        await extract_upload(make_upload(b"\x89PNG....", "scan.png", "image/png"), str(upload_dir))
    assert os.listdir(upload_dir) == []


async def test_extract_upload_rejects_short_text(tmp_path):
    upload_dir = tmp_path / "uploads"
    with pytest.raises(ExtractionError) as err:
        await extract_upload(make_upload(b"too short", "notes.txt", "text/plain"), str(upload_dir))
    assert err.value.details == "Extracted text is too short or unreadable."
    assert os.listdir(upload_dir) == []


@pytest.mark.parametrize("error", [
    DependencyError("PyCryptodome is required for AES algorithm"),
    PageSizeNotDefinedError(),
])
def test_extract_pdf_library_errors_become_extraction_errors(tmp_path, monkeypatch, error):
    def broken_reader(path):
        raise error

    monkeypatch.setattr(extractor, "PdfReader", broken_reader)
    path = tmp_path / "locked.pdf"
    path.write_bytes(make_text_pdf("Locked content"))

    with pytest.raises(ExtractionError) as err:
        extract_text_from_file(str(path), "application/pdf")
    assert err.value.details.startswith("PDF extraction failed")


def test_extract_truncated_pdf(tmp_path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(make_text_pdf("Broken content")[:60])
    with pytest.raises(ExtractionError):
        extract_text_from_file(str(path), "application/pdf")
