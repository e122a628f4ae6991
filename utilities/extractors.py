import io
import zipfile
import logging
from pathlib import Path

import docx
import pypdf
from pypdf.errors import PdfReadError

from utilities.constants import SUPPORTED_UPLOAD_EXTENSIONS
from utilities.errors import FileExtractionError, UnsupportedFileType

logger = logging.getLogger(__name__)


def _detect_kind(filename: str, content_type: str = None) -> str:
    suffix = Path(filename or '').suffix.lower()
    ct = (content_type or '').lower()
    if suffix in SUPPORTED_UPLOAD_EXTENSIONS:
        return suffix
    if ct == 'application/pdf':
        return '.pdf'
    if 'wordprocessingml' in ct:
        return '.docx'
    if ct.startswith('text/plain'):
        return '.txt'
    raise UnsupportedFileType(f"Unsupported file type: {suffix or ct or 'unknown'}")


def _pdf_text(data: bytes) -> str:
    reader = pypdf.PdfReader(io.BytesIO(data))
    pages = [page.extract_text() or '' for page in reader.pages]
    return "\n\n".join(pages)


def _docx_text(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    return "\n".join(p.text for p in document.paragraphs)


def extract_text(stream, filename: str, content_type: str = None) -> str:
    """Extract plain text from an uploaded résumé or job description.

    Supports plain text (UTF-8), PDF (via pypdf) and Word .docx (via
    python-docx). The file type is taken from the extension, falling back
    to the declared content type.

    Args:
        stream: A binary file-like object (e.g. werkzeug FileStorage.stream).
        filename: Original file name, used to detect the type.
        content_type: Optional MIME type sent by the client.

    Returns:
        The extracted text, stripped of surrounding whitespace.

    Raises:
        UnsupportedFileType: the type is not one of txt/pdf/docx.
        FileExtractionError: the file could not be read or yielded no text.
    """
    kind = _detect_kind(filename, content_type)
    data = stream.read()
    try:
        if kind == '.pdf':
            text = _pdf_text(data)
        elif kind == '.docx':
            text = _docx_text(data)
        else:
            text = data.decode('utf-8')
    except (PdfReadError, zipfile.BadZipFile, UnicodeDecodeError, ValueError, KeyError) as e:
        logger.warning("Could not extract text from %s: %s", filename, e)
        raise FileExtractionError(f"Could not read {filename}: {e}") from e

    text = text.strip()
    if not text:
        raise FileExtractionError(f"No text could be extracted from {filename}")
    logger.info("Extracted %d characters from %s", len(text), filename)
    return text
