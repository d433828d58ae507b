"""
Pytest configuration and shared fixtures.
"""

import io
import os
import sys
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient
from PIL import Image

# Add project root to path for imports (main.py + app/)
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.core.config import Settings  # noqa: E402
from app.models.detector import Detection, Detector  # noqa: E402


class FakeDetector(Detector):
    """In-memory detector; returns canned detections or raises."""

    def __init__(self, detections: Optional[List[Detection]] = None,
                 error: Optional[Exception] = None,
                 load_error: Optional[Exception] = None):
        self.detections = detections or []
        self.error = error
        self.load_error = load_error
        self.loaded = False
        self.calls = []

    @property
    def is_loaded(self) -> bool:
        return self.loaded

    def load(self) -> None:
        if self.load_error is not None:
            raise self.load_error
        self.loaded = True

    def detect(self, tensor):
        self.calls.append(tensor.shape)
        if self.error is not None:
            raise self.error
        return list(self.detections)


def make_image_bytes(fmt: str = "PNG", size=(8, 6), mode: str = "RGB", color=(120, 60, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new(mode, size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_dir):
    return Settings(UPLOAD_DIR=str(upload_dir), PORT=3000, LOG_LEVEL="DEBUG")


@pytest.fixture
def person_detections():
    return [
        Detection(label="person", score=0.8734, bbox=(10, 10, 50, 100)),
        Detection(label="person", score=0.31, bbox=(70, 10, 40, 90)),
        Detection(label="dog", score=0.66, bbox=(0, 0, 20, 20)),
    ]


@pytest.fixture
def detector(person_detections):
    return FakeDetector(detections=person_detections)


@pytest.fixture
def app(settings, detector):
    from main import create_app
    return create_app(settings=settings, detector=detector)


@pytest.fixture
def client(app):
    # with 블록에 들어가야 lifespan(업로드 폴더 생성, 모델 로드)이 실행됨
    with TestClient(app) as c:
        yield c


@pytest.fixture
def png_bytes():
    return make_image_bytes("PNG")
