from __future__ import annotations

import os
import random
import time
from pathlib import Path
from typing import BinaryIO, Optional
from uuid import uuid4

from slugify import slugify

from . import config


class UploadRejected(ValueError):
    pass


def upload_dir() -> Path:
    path = config.UPLOAD_DIR
    path.mkdir(parents=True, exist_ok=True)
    return path


def portfolio_output_dir() -> Path:
    path = upload_dir() / "portfolios"
    path.mkdir(parents=True, exist_ok=True)
    return path


def artist_media_dir() -> Path:
    path = upload_dir() / "artists"
    path.mkdir(parents=True, exist_ok=True)
    return path


def public_url(path: Path) -> str:
    return "/uploads/" + path.relative_to(config.UPLOAD_DIR).as_posix()


def document_filename(portfolio_id: int, extension: str, policy: Optional[str] = None) -> str:
    policy = policy or config.FILENAME_POLICY
    if policy == "overwrite":
        return f"portfolio-{portfolio_id}.{extension}"
    token = uuid4().hex[:6]
    return f"portfolio-{portfolio_id}-{int(time.time() * 1000)}-{token}.{extension}"


def document_path(portfolio_id: int, extension: str) -> Path:
    return portfolio_output_dir() / document_filename(portfolio_id, extension)


def media_filename(original_name: str, field_name: str = "files") -> str:
    original = Path(original_name or "")
    stem = slugify(original.stem) or "upload"
    suffix = original.suffix.lower()
    if suffix and not suffix[1:].isalnum():
        suffix = ""
    return f"{field_name}-{int(time.time() * 1000)}-{random.randint(0, 10**9)}-{stem}{suffix}"


def check_upload(content_type: Optional[str], size: int) -> None:
    if content_type not in config.ALLOWED_UPLOAD_TYPES:
        raise UploadRejected("Invalid file type. Only images, videos, and PDFs are allowed.")
    if size > config.MAX_UPLOAD_BYTES:
        raise UploadRejected("File too large (max 10MB)")


def store_media(original_name: str, content_type: Optional[str], data: bytes) -> Path:
    check_upload(content_type, len(data))
    path = artist_media_dir() / media_filename(original_name)
    path.write_bytes(data)
    return path


class FileSink:
    """
    Binary output that becomes visible at ``path`` only once it is durable.

    Bytes go to ``<path>.part``; ``close()`` flushes, fsyncs and renames the
    file into place. Any failure removes the partial file and re-raises.
    """

    def __init__(self, path: Path):
        self.path = path
        self.partial_path = path.with_name(path.name + ".part")
        self.size = 0
        self._handle: Optional[BinaryIO] = self.partial_path.open("wb")

    def write(self, data: bytes) -> int:
        if self._handle is None:
            raise ValueError("write to closed sink")
        written = self._handle.write(data)
        self.size += len(data)
        return written

    def flush(self) -> None:
        if self._handle is not None:
            self._handle.flush()

    def close(self) -> int:
        if self._handle is None:
            return self.size
        handle, self._handle = self._handle, None
        try:
            handle.flush()
            os.fsync(handle.fileno())
            handle.close()
            self.partial_path.replace(self.path)
        except OSError:
            handle.close()
            self.discard()
            raise
        self.size = self.path.stat().st_size
        return self.size

    def discard(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
        self.partial_path.unlink(missing_ok=True)

    def __enter__(self) -> "FileSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        if exc_type is None:
            self.close()
        else:
            self.discard()
