import io
import logging

import fitz  # PyMuPDF
from PyPDF2 import PdfReader

logger = logging.getLogger(__name__)


def pdf_to_text(source) -> str:
    """
    Extract text from a PDF.
    Works with both file paths (str) and in-memory file-like objects (Streamlit uploads).
    PyMuPDF is tried first, PyPDF2 second; returns "" if neither yields text.
    """
    if isinstance(source, str):
        data = None
    else:
        data = source.read()

    text = ""
    # ---------- Attempt 1: PyMuPDF ----------
    try:
        doc = fitz.open(source) if data is None else fitz.open(stream=data, filetype="pdf")
        text = "\n".join(page.get_text("text") or "" for page in doc)
        doc.close()
        if text.strip():
            logger.info(f"Extracted {len(text)} characters via PyMuPDF")
            return text.strip()
    except Exception as e:
        logger.warning(f"PyMuPDF extraction failed: {e}")

    # ---------- Attempt 2: PyPDF2 ----------
    try:
        reader = PdfReader(source if data is None else io.BytesIO(data))
        text = "\n".join(page.extract_text() or "" for page in reader.pages)
        if text.strip():
            logger.info(f"Extracted {len(text)} characters via PyPDF2 fallback")
            return text.strip()
    except Exception as e:
        logger.error(f"PyPDF2 extraction failed: {e}")

    logger.warning("No text extracted from PDF")
    return ""
