"""
Multimodal content extraction for uploaded files.

Architectural role:
- Convert one uploaded file into text (or a base64 image payload) that the
  prompt builder can place into a completion request.
- Dispatch on the declared media type, never on the filename extension.
- Provide adapter-level preprocessing only (no endpoint registration).

Processing lifecycle:
1. Normalize the declared media type (lowercase, parameters stripped).
2. Classify it into a closed `MediaKind`; unknown types raise
   `UnsupportedTypeError` before any decoder runs.
3. Run the decoder registered for that kind.
4. Reject empty PDF/Word output with `ExtractionEmptyError`.

Error handling strategy:
- Decoder exceptions are wrapped in `ExtractionFailedError` with the original
  error chained as `__cause__`.
- Nothing is retried; the caller fails the whole request on the first error.

Side effects:
- None beyond reading the transient file for spreadsheets. Decoders do no
  network I/O and never write to disk.

Determinism considerations:
- Text output may vary across pdfplumber/python-docx/pandas versions.
"""

import base64
import io
import logging
from enum import Enum
from typing import Callable, Dict, Optional

import docx
import pandas as pd
import pdfplumber

from askdoc.core.content_types import ExtractedContent, UploadedFile
from askdoc.core.errors import (
    DocumentQAError,
    ExtractionEmptyError,
    ExtractionFailedError,
    UnsupportedTypeError,
)


logger = logging.getLogger(__name__)


# ============================================================
# MEDIA TYPES
# ============================================================

class MediaKind(Enum):
    """Closed set of supported upload formats."""

    TEXT = "text"
    PDF = "pdf"
    WORD = "word"
    SPREADSHEET = "spreadsheet"
    IMAGE = "image"


TEXT_MEDIA_TYPE = "text/plain"
PDF_MEDIA_TYPE = "application/pdf"
WORD_MEDIA_TYPES = {
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
}
SPREADSHEET_MEDIA_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-excel",
}
IMAGE_MEDIA_PREFIX = "image/"


def normalize_media_type(media_type: Optional[str]) -> str:
    """Lowercase a MIME string and drop parameters such as `; charset=utf-8`."""
    if not media_type:
        return ""
    return media_type.split(";", 1)[0].strip().lower()


def classify_media_type(media_type: Optional[str]) -> MediaKind:
    """
    Map a declared media type to its `MediaKind`.

    Checked in fixed order, first match wins: plain text, PDF, Word,
    spreadsheet, any `image/*`.

    Raises:
        UnsupportedTypeError: for every other media type, including empty.
    """
    normalized = normalize_media_type(media_type)

    if normalized == TEXT_MEDIA_TYPE:
        return MediaKind.TEXT

    if normalized == PDF_MEDIA_TYPE:
        return MediaKind.PDF

    if normalized in WORD_MEDIA_TYPES:
        return MediaKind.WORD

    if normalized in SPREADSHEET_MEDIA_TYPES:
        return MediaKind.SPREADSHEET

    if normalized.startswith(IMAGE_MEDIA_PREFIX):
        return MediaKind.IMAGE

    raise UnsupportedTypeError(media_type or "")


# ============================================================
# PUBLIC ENTRYPOINT
# ============================================================

def extract(
    media_type: str,
    data: bytes,
    filename: Optional[str] = None,
    path: Optional[str] = None,
) -> ExtractedContent:
    """
    Extract prompt content from raw file bytes.

    Args:
        media_type: Declared MIME type of the upload.
        data: Raw file content.
        filename: Original filename (logging and error context only).
        path: On-disk copy of `data`; spreadsheets are loaded from it.

    Returns:
        `ExtractedContent` tagged TEXT for documents and IMAGE for images.

    Raises:
        UnsupportedTypeError: media type is not supported.
        ExtractionEmptyError: PDF or Word document yielded no text.
        ExtractionFailedError: the underlying decoder raised.
    """
    kind = classify_media_type(media_type)
    decoder = _DECODERS[kind]

    logger.debug("Extracting %s as %s", filename, kind.name)

    try:
        return decoder(data, filename, path)
    except DocumentQAError:
        raise
    except Exception as err:
        raise ExtractionFailedError(filename, err) from err


def extract_file(uploaded: UploadedFile) -> ExtractedContent:
    """Read a stored upload from disk and extract it."""
    classify_media_type(uploaded.media_type)
    try:
        data = uploaded.read_bytes()
    except OSError as err:
        raise ExtractionFailedError(uploaded.filename, err) from err
    return extract(uploaded.media_type, data, uploaded.filename, uploaded.path)


# ============================================================
# TEXT
# ============================================================

def _extract_txt(data: bytes, filename: Optional[str], path: Optional[str]) -> ExtractedContent:
    """Decode UTF-8 text verbatim; invalid byte sequences become U+FFFD."""
    return ExtractedContent.text(data.decode("utf-8", errors="replace"), filename)


# ============================================================
# PDF
# ============================================================

def _extract_pdf(data: bytes, filename: Optional[str], path: Optional[str]) -> ExtractedContent:
    """Extract text from each PDF page and concatenate with newlines."""
    text = []

    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            text.append(page.extract_text() or "")

    content = "\n".join(text)
    if not content.strip():
        raise ExtractionEmptyError("PDF", filename)

    return ExtractedContent.text(content, filename)


# ============================================================
# WORD
# ============================================================

def _extract_docx(data: bytes, filename: Optional[str], path: Optional[str]) -> ExtractedContent:
    """Extract paragraph and table-cell text from a Word document."""
    doc = docx.Document(io.BytesIO(data))

    lines = [p.text for p in doc.paragraphs]
    for table in doc.tables:
        for row in table.rows:
            lines.append("\t".join(cell.text for cell in row.cells))

    content = "\n".join(lines)
    if not content.strip():
        raise ExtractionEmptyError("Word document", filename)

    return ExtractedContent.text(content, filename)


# ============================================================
# SPREADSHEET
# ============================================================

def _extract_spreadsheet(data: bytes, filename: Optional[str], path: Optional[str]) -> ExtractedContent:
    """Load the first sheet and serialize it as CSV rows."""
    source = path if path else io.BytesIO(data)
    df = pd.read_excel(source, sheet_name=0, header=None, dtype=str)
    csv_text = df.to_csv(index=False, header=False, lineterminator="\n")
    return ExtractedContent.text(csv_text.rstrip("\n"), filename)


# ============================================================
# IMAGE
# ============================================================

def _extract_image(data: bytes, filename: Optional[str], path: Optional[str]) -> ExtractedContent:
    """Base64-encode raw image bytes."""
    return ExtractedContent.image(base64.b64encode(data).decode("ascii"), filename)


# ============================================================
# DISPATCH TABLE
# ============================================================

Decoder = Callable[[bytes, Optional[str], Optional[str]], ExtractedContent]

_DECODERS: Dict[MediaKind, Decoder] = {
    MediaKind.TEXT: _extract_txt,
    MediaKind.PDF: _extract_pdf,
    MediaKind.WORD: _extract_docx,
    MediaKind.SPREADSHEET: _extract_spreadsheet,
    MediaKind.IMAGE: _extract_image,
}

_missing = set(MediaKind) - set(_DECODERS)
if _missing:
    raise RuntimeError(f"No decoder registered for: {sorted(k.name for k in _missing)}")
