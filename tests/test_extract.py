import docx
import fitz
import pytest

from parsers.extract import (
    DOCX_MIME, PDF_MIME, EmptyDocumentError, InvalidDocumentError, UnsupportedFormatError, extract_text,
    validate_file_size, validate_file_type,
)
from parsers.pdf import pdf_to_text


def write_docx(path, paragraphs, table=None):
    document = docx.Document()
    for p in paragraphs:
        document.add_paragraph(p)
    if table:
        t = document.add_table(rows=len(table), cols=len(table[0]))
        for i, row in enumerate(table):
            for j, value in enumerate(row):
                t.cell(i, j).text = value
    document.save(str(path))


def write_pdf(path, text):
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), text)
    doc.save(str(path))
    doc.close()


def test_validate_file_type():
    assert validate_file_type(PDF_MIME)
    assert validate_file_type(DOCX_MIME)
    assert not validate_file_type("text/plain")
    assert not validate_file_type("application/msword")


def test_validate_file_size():
    assert validate_file_size(10 * 1024 * 1024)
    assert not validate_file_size(10 * 1024 * 1024 + 1)
    assert validate_file_size(3 * 1024 * 1024, max_size_mb=3)


def test_docx_paragraphs_and_tables(tmp_path):
    path = tmp_path / "cv.docx"
    write_docx(path, ["Jane Doe", "Experience"], table=[["Python", "5 years"]])
    text = extract_text(str(path), DOCX_MIME)
    assert "Jane Doe" in text
    assert "Experience" in text
    assert "Python 5 years" in text


def test_pdf_text(tmp_path):
    path = tmp_path / "cv.pdf"
    write_pdf(path, "Senior Python Engineer")
    assert "Senior Python Engineer" in extract_text(str(path), PDF_MIME)


def test_pdf_from_file_object(tmp_path):
    path = tmp_path / "jd.pdf"
    write_pdf(path, "Kubernetes required")
    with open(path, "rb") as f:
        assert "Kubernetes required" in pdf_to_text(f)


def test_unsupported_extension(tmp_path):
    path = tmp_path / "cv.txt"
    path.write_text("plain text")
    with pytest.raises(UnsupportedFormatError, match=r"\.txt"):
        extract_text(str(path), DOCX_MIME)


def test_disallowed_mime_type(tmp_path):
    path = tmp_path / "cv.docx"
    write_docx(path, ["Jane Doe"])
    with pytest.raises(UnsupportedFormatError, match="application/msword"):
        extract_text(str(path), "application/msword")


def test_empty_document(tmp_path):
    path = tmp_path / "empty.docx"
    write_docx(path, [""])
    with pytest.raises(EmptyDocumentError):
        extract_text(str(path), DOCX_MIME)


@pytest.mark.parametrize("content", [b"not a zip", b""])
def test_unreadable_docx(tmp_path, content):
    path = tmp_path / "cv.docx"
    path.write_bytes(content)
    with pytest.raises(InvalidDocumentError):
        extract_text(str(path), DOCX_MIME)
