import logging
import zipfile
from pathlib import Path

import docx
from docx.opc.exceptions import PackageNotFoundError

from .pdf import pdf_to_text

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
ALLOWED_MIME_TYPES = {PDF_MIME, DOCX_MIME}


class UnsupportedFormatError(ValueError):
    pass


class EmptyDocumentError(ValueError):
    pass


class InvalidDocumentError(ValueError):
    pass


def validate_file_type(mime_type: str) -> bool:
    return mime_type in ALLOWED_MIME_TYPES


def validate_file_size(size: int, max_size_mb: int = 10) -> bool:
    return 0 <= size <= max_size_mb * 1024 * 1024


def read_docx(file_path: str) -> str:
    """Extract text from DOCX paragraphs and tables."""
    try:
        doc = docx.Document(file_path)
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError) as e:
        logger.warning(f"Unreadable DOCX {Path(file_path).name}: {e}")
        raise InvalidDocumentError("File is not a readable DOCX document") from e
    lines = [para.text for para in doc.paragraphs]

    for table in doc.tables:
        for row in table.rows:
            lines.append(" ".join(cell.text for cell in row.cells))

    return "\n".join(lines).strip()


def extract_text(file_path: str, mime_type: str) -> str:
    """
    Extract plain text from an uploaded resume.

    Dispatches on the file extension (.pdf or .docx); size is expected to
    be validated by the caller.

    Raises:
        UnsupportedFormatError: disallowed MIME type or unknown extension
        InvalidDocumentError: the file cannot be opened as its declared format
        EmptyDocumentError: the document contains no extractable text
    """
    path = Path(file_path)
    extension = path.suffix.lower()
    logger.info(f"Extracting {extension or '<none>'} ({mime_type}) from {path.name}")

    if not validate_file_type(mime_type):
        raise UnsupportedFormatError(f"Unsupported file type: {mime_type}")

    if extension == ".pdf":
        text = pdf_to_text(str(path))
    elif extension == ".docx":
        text = read_docx(str(path))
    else:
        raise UnsupportedFormatError(f"Unsupported file type: {extension or '<none>'}")

    if not text.strip():
        raise EmptyDocumentError(f"No text could be extracted from {path.name}")
    return text
