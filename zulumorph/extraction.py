"""
Text extraction from uploaded documents.

Supported extensions: .txt, .csv (verbatim), .pdf (pypdf), .doc/.docx
(python-docx) and .json (re-serialised with 2-space indentation).
"""

import io
import json
import logging
from pathlib import PurePath

from docx import Document
from pypdf import PdfReader

from .errors import ExtractionError

logger = logging.getLogger(__name__)


def _decode(data: bytes) -> str:
    return data.decode("utf-8")


def _extract_pdf(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def _extract_word(data: bytes) -> str:
    # python-docx only reads the OOXML container; legacy binary .doc files
    # fail here and surface as an ExtractionError.
    document = Document(io.BytesIO(data))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def _extract_json(data: bytes) -> str:
    return json.dumps(json.loads(_decode(data)), indent=2, ensure_ascii=False)


EXTRACTORS = {
    ".txt": _decode,
    ".pdf": _extract_pdf,
    ".doc": _extract_word,
    ".docx": _extract_word,
    ".json": _extract_json,
    ".csv": _decode,
}


def supported_extensions():
    return sorted(EXTRACTORS)


def extract_text(data: bytes, filename: str) -> str:
    """
    Extract UTF-8 plain text from a file's bytes.

    Args:
        data: Raw file contents.
        filename: Original filename; only its extension is used.

    Returns:
        The extracted text.

    Raises:
        ExtractionError: The extension is unsupported or the document could
            not be read. The message names the file.
    """
    extension = PurePath(filename).suffix.lower()

    try:
        extractor = EXTRACTORS.get(extension)
        if extractor is None:
            raise ExtractionError(f"Unsupported file type: {extension}", filename)
        text = extractor(data)
    except Exception as e:
        logger.debug(f"Extraction failed for {filename}", exc_info=True)
        raise ExtractionError(f"Failed to extract text from {filename}: {e}", filename) from e

    logger.debug(f"Extracted {len(text)} characters from {filename}")
    return text
