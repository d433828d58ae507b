# 라우터에서 Depends()로 주입받는 공유 객체 (app.state에 보관)
from fastapi import Request

from app.core.config import Settings
from app.core.errors import ModelNotReadyError
from app.models.detector import Detector


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_detector(request: Request) -> Detector:
    detector: Detector = request.app.state.detector
    if not detector.is_loaded:
        raise ModelNotReadyError()
    return detector
