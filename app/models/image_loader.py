# app/models/image_loader.py
# 저장된 업로드 파일 → 픽셀 버퍼 → (H, W, 3) uint8 텐서
import io
import logging
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError
from starlette.concurrency import run_in_threadpool

from app.core.errors import ProcessingError

log = logging.getLogger("image_loader")


class ImageTensor:
    """
    요청 하나가 소유하는 RGB 텐서. with 블록을 벗어나면 release()로 참조를 끊어
    추론 성공/실패와 관계없이 메모리가 회수되도록 한다.
    """
    def __init__(self, array: np.ndarray):
        self._array: Optional[np.ndarray] = array
        self.height, self.width = array.shape[:2]

    @property
    def array(self) -> np.ndarray:
        if self._array is None:
            raise ProcessingError("image tensor already released")
        return self._array

    @property
    def released(self) -> bool:
        return self._array is None

    def release(self):
        self._array = None

    def __enter__(self) -> "ImageTensor":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False


def decode_image(data: bytes) -> ImageTensor:
    """
    입력: 이미지 파일 바이트 (jpeg/png/gif/bmp)
    출력: ImageTensor, shape (height, width, 3), RGB 순서. 알파 채널은 버림.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            rgb = img.convert("RGB")  # GIF는 첫 프레임
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise ProcessingError(f"could not decode image: {e}") from e

    width, height = rgb.size
    if width == 0 or height == 0:
        raise ProcessingError("could not decode image: empty image")

    # 행 우선(row-major) RGB 바이트 → (H, W, 3)
    pixels = np.frombuffer(rgb.tobytes(), dtype=np.uint8)
    return ImageTensor(pixels.reshape(height, width, 3))


async def load_image_tensor(path: Path) -> ImageTensor:
    data = await run_in_threadpool(Path(path).read_bytes)
    tensor = await run_in_threadpool(decode_image, data)
    log.debug("decoded %s -> %dx%d", path, tensor.width, tensor.height)
    return tensor
