# 업로드 파일 검증 + 임시 폴더 저장/삭제.
# 저장된 파일은 stored_upload() 블록을 빠져나갈 때 성공/실패와 관계없이 항상 삭제된다.
import logging
import re
import time
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings
from app.core.errors import MSG_NO_FILE, CleanupError, ProcessingError, ValidationError

log = logging.getLogger("uploads")

ALLOWED_TYPES = re.compile(r"jpeg|jpg|png|gif|bmp")

MSG_NOT_IMAGE = "Only image files are allowed!"
MSG_TOO_LARGE = "File too large!"


@dataclass
class UploadedImage:
    filename: str
    content_type: str
    data: bytes
    path: Optional[Path] = None

    @property
    def size(self) -> int:
        return len(self.data)


def is_allowed(filename: str, content_type: str) -> bool:
    """확장자와 content-type 둘 다 허용 이미지 타입이어야 통과"""
    ext = Path(filename).suffix.lower()
    return bool(ALLOWED_TYPES.search(ext)) and bool(ALLOWED_TYPES.search(content_type or ""))


async def read_upload(file: Optional[UploadFile], settings: Settings) -> UploadedImage:
    """
    multipart 필드를 검증하고 메모리로 읽는다. 디스크에는 아직 아무것도 쓰지 않음.
    검증 실패 시 ValidationError (400).
    """
    if file is None or not file.filename:
        raise ValidationError(MSG_NO_FILE)

    if not is_allowed(file.filename, file.content_type):
        raise ValidationError(MSG_NOT_IMAGE)

    # 한도 + 1 바이트까지만 읽어서 초과 여부를 판단
    data = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError(MSG_TOO_LARGE)

    return UploadedImage(filename=file.filename, content_type=file.content_type, data=data)


def unique_name(filename: str) -> str:
    # 경로 성분 제거 후 시간(ms) 기반 prefix로 충돌 회피
    base = Path(filename.replace("\\", "/")).name or "upload"
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{base}"


def _remove(path: Path):
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        err = CleanupError(f"failed to delete {path}", details=str(e))
        log.error("Error deleting file: %s (%s)", err.message, err.details)


@asynccontextmanager
async def stored_upload(upload: UploadedImage, directory) -> AsyncIterator[Path]:
    """UploadedImage를 임시 폴더에 저장하고 경로를 넘겨준다. 블록 종료 시 삭제."""
    path = Path(directory) / unique_name(upload.filename)
    try:
        await run_in_threadpool(path.write_bytes, upload.data)
    except OSError as e:
        await run_in_threadpool(_remove, path)
        raise ProcessingError(f"failed to store upload: {e}") from e

    upload.path = path
    log.debug("stored %s (%d bytes)", path, upload.size)
    try:
        yield path
    finally:
        await run_in_threadpool(_remove, path)
        upload.path = None
