# cvpress/parser.py
"""
CV input reader.

Turns whatever the candidate supplies into plain text for the generation step
or the exporter CLI:
    * file path string (.pdf via pdfplumber, .docx/.doc via python-docx, other -> UTF-8 text)
    * raw bytes (PDF sniffed from the %PDF header, DOCX attempted, UTF-8 decode as last resort)
    * file-like object with .read() (optionally .name, e.g. an uploaded file)
"""
from typing import Union, Any
import io
import logging
import os
import zipfile

import pdfplumber
import docx
from docx.opc.exceptions import PackageNotFoundError

logger = logging.getLogger(__name__)

Source = Union[str, bytes, bytearray, Any]


def _pdf_text(fp) -> str:
    text_parts = []
    with pdfplumber.open(fp) as pdf:
        for page in pdf.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
    return "\n".join(text_parts)


def _docx_text(fp) -> str:
    doc = docx.Document(fp)
    paragraphs = [p.text for p in doc.paragraphs if p.text and p.text.strip()]
    return "\n".join(paragraphs)


def _read_bytes(data: bytes, filename: str = "") -> str:
    filename = filename.lower()
    if filename.endswith(".pdf") or data[:4].startswith(b"%PDF"):
        return _pdf_text(io.BytesIO(data))
    if filename.endswith((".docx", ".doc")) or zipfile.is_zipfile(io.BytesIO(data)):
        try:
            return _docx_text(io.BytesIO(data))
        except (KeyError, ValueError, zipfile.BadZipFile, PackageNotFoundError) as e:
            logger.warning("DOCX parse failed (%s), decoding as text", e)
    return data.decode("utf-8", errors="ignore")


def read_cv_text(source: Source) -> str:
    """
    Return the plain text of a CV source. Raises ValueError for unsupported sources
    and FileNotFoundError for missing paths.
    """
    if isinstance(source, str):
        if not os.path.exists(source):
            raise FileNotFoundError(source)
        ext = os.path.splitext(source)[1].lower()
        if ext == ".pdf":
            return _pdf_text(source)
        if ext in (".docx", ".doc"):
            return _docx_text(source)
        with open(source, "r", encoding="utf-8", errors="ignore") as f:
            return f.read()

    if isinstance(source, (bytes, bytearray)):
        return _read_bytes(bytes(source))

    if hasattr(source, "read"):
        raw = source.read()
        if isinstance(raw, str):
            return raw  # already text
        if not raw:
            return ""
        return _read_bytes(bytes(raw), getattr(source, "name", "") or "")

    raise ValueError("Unsupported CV source. Provide a file path, bytes, or file-like object.")
