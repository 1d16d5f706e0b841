# industrin/services/uploads.py
import logging
import os
import re
import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import UploadFile

from industrin.core.errors import ValidationFailed

log = logging.getLogger("industrin.uploads")

UPLOAD_DIR = os.environ.get("UPLOAD_DIR", "./uploads")

MAX_FILES = 5
MAX_FILE_BYTES = 10 * 1024 * 1024
CHUNK_BYTES = 1024 * 1024

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(name: Optional[str]) -> str:
    base = os.path.basename((name or "").replace("\\", "/")).strip()
    base = _UNSAFE.sub("_", base).strip("._")
    return base[:120] or "attachment"


def _remove_quietly(paths: List[str]) -> None:
    for p in paths:
        try:
            os.remove(p)
        except FileNotFoundError:
            pass


async def _write(file: UploadFile, path: str) -> int:
    size_bytes = 0
    try:
        with open(path, "wb") as out:
            while True:
                chunk = await file.read(CHUNK_BYTES)
                if not chunk:
                    break
                size_bytes += len(chunk)
                if size_bytes > MAX_FILE_BYTES:
                    raise ValidationFailed(
                        f"File exceeds {MAX_FILE_BYTES // (1024 * 1024)} MB limit",
                        details={"filename": file.filename},
                    )
                out.write(chunk)
    finally:
        await file.close()
    return size_bytes


async def save_attachments(files: Optional[List[UploadFile]]) -> List[dict]:
    """
    Store quote attachments under UPLOAD_DIR and return their metadata.
    All-or-nothing: if one file is rejected the ones already written are removed.
    """
    files = [f for f in (files or []) if f is not None and f.filename]
    if not files:
        return []
    if len(files) > MAX_FILES:
        raise ValidationFailed(f"At most {MAX_FILES} files can be attached")

    os.makedirs(UPLOAD_DIR, exist_ok=True)
    ts = datetime.utcnow().strftime("%Y%m%d-%H%M%S")

    written: List[str] = []
    saved: List[dict] = []
    try:
        for f in files:
            original = safe_filename(f.filename)
            stored_name = f"{ts}_{uuid.uuid4().hex[:8]}_{original}"
            path = os.path.join(UPLOAD_DIR, stored_name)
            written.append(path)
            size_bytes = await _write(f, path)
            saved.append(
                {
                    "filename": original,
                    "stored_name": stored_name,
                    "content_type": f.content_type or "application/octet-stream",
                    "size_bytes": size_bytes,
                }
            )
    except Exception:
        _remove_quietly(written)
        raise

    log.info("stored %d quote attachment(s) in %s", len(saved), UPLOAD_DIR)
    return saved


def discard_attachments(stored: List[dict]) -> None:
    """Remove files returned by save_attachments (used when the request is not persisted)."""
    _remove_quietly([os.path.join(UPLOAD_DIR, s["stored_name"]) for s in stored])
    if stored:
        log.warning("discarded %d quote attachment(s) from %s", len(stored), UPLOAD_DIR)
