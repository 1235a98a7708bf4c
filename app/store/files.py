from __future__ import annotations

import uuid
from pathlib import Path
from typing import Protocol

from docx import Document
from pypdf import PdfReader

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".txt")


class FileStore(Protocol):
    def write(self, filename: str, content: bytes) -> str: ...

    def read(self, path: str) -> bytes: ...

    def delete(self, path: str) -> bool: ...

    def extract_text(self, path: str) -> str: ...


def _parse_txt(file_path: Path) -> str:
    return file_path.read_text(encoding="utf-8", errors="replace")


def _parse_pdf(file_path: Path) -> str:
    reader = PdfReader(str(file_path))
    text_parts: list[str] = []
    for page in reader.pages:
        page_text = (page.extract_text() or "").strip()
        if page_text:
            text_parts.append(page_text)
    return "\n".join(text_parts)


def _parse_docx(file_path: Path) -> str:
    document = Document(str(file_path))
    paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    return "\n".join(paragraphs)


class LocalFileStore:
    """Blob store rooted at a directory; locators are paths relative to the root."""

    def __init__(self, root: str):
        self._root = Path(root).resolve()

    def _resolve(self, path: str) -> Path:
        resolved = (self._root / path.lstrip("/")).resolve()
        if resolved != self._root and self._root not in resolved.parents:
            raise ValueError(f"Path escapes file store root: '{path}'")
        return resolved

    def write(self, filename: str, content: bytes) -> str:
        extension = Path(filename).suffix.lower()
        if extension not in SUPPORTED_EXTENSIONS:
            raise ValueError(
                f"Unsupported file type '{extension}'. Supported types: {', '.join(SUPPORTED_EXTENSIONS)}"
            )
        locator = f"resumes/{uuid.uuid4().hex}{extension}"
        target = self._resolve(locator)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        return locator

    def read(self, path: str) -> bytes:
        target = self._resolve(path)
        if not target.exists():
            raise FileNotFoundError(f"Stored file not found: '{path}'")
        return target.read_bytes()

    def delete(self, path: str) -> bool:
        target = self._resolve(path)
        if not target.is_file():
            return False
        target.unlink()
        return True

    def extract_text(self, path: str) -> str:
        target = self._resolve(path)
        if not target.exists():
            raise FileNotFoundError(f"Stored file not found: '{path}'")

        extension = target.suffix.lower()
        if extension == ".txt":
            return _parse_txt(target)
        if extension == ".pdf":
            return _parse_pdf(target)
        if extension == ".docx":
            return _parse_docx(target)
        raise NotImplementedError(
            f"Unsupported file type '{extension}'. Supported types: {', '.join(SUPPORTED_EXTENSIONS)}"
        )
