# 업로드 이미지 → 검증 → 임시 저장 → 디코딩/텐서 → YOLO 추론 → 응답
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from starlette.concurrency import run_in_threadpool
import logging

from app.core.config import Settings
from app.core.deps import get_detector, get_settings
from app.core.errors import DetectionServiceError, ProcessingError
from app.core.uploads import read_upload, stored_upload
from app.models.detector import Detector
from app.models.image_loader import load_image_tensor
from app.schemas.detection import DetectionResult, ErrorBody

router = APIRouter(tags=["detect"])
log = logging.getLogger("detect")


@router.post(
    "/detect-human",
    response_model=DetectionResult,
    responses={400: {"model": ErrorBody}, 500: {"model": ErrorBody}, 503: {"model": ErrorBody}},
)
async def detect_human(image: Optional[UploadFile] = File(None),
                       detector: Detector = Depends(get_detector),
                       settings: Settings = Depends(get_settings)):
    """
    multipart 필드 `image` 하나를 받아 사람이 있는지 판단한다.
    임시 파일과 텐서는 어떤 경로로 끝나든 블록을 나가면서 정리된다.
    """
    upload = await read_upload(image, settings)

    async with stored_upload(upload, settings.UPLOAD_DIR) as path:
        try:
            with await load_image_tensor(path) as tensor:
                detections = await run_in_threadpool(detector.detect, tensor.array)
        except DetectionServiceError:
            raise
        except Exception as e:
            log.exception("Error processing %s", upload.filename)
            raise ProcessingError(str(e)) from e

    result = DetectionResult.from_detections(detections, settings.HUMAN_CONF_THRES)
    log.info("%s: %s (persons=%d, objects=%d)", upload.filename, result.result,
             result.details.human_count, len(result.details.detected_objects))
    return result
