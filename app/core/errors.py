# 요청 처리 중 발생하는 에러 종류와, 이를 HTTP 응답으로 바꾸는 핸들러.
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = logging.getLogger("errors")

MSG_NO_FILE = "Please upload an image file!"

# multipart 업로드 필드 이름
UPLOAD_FIELD = "image"


class DetectionServiceError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_body(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(DetectionServiceError):
    """업로드 파일이 없거나 허용되지 않는 파일 (클라이언트 잘못)"""
    status_code = 400


class ProcessingError(DetectionServiceError):
    """디코딩/추론 실패 (서버 잘못). 응답에는 원인 메시지를 details로 붙인다."""
    status_code = 500

    def __init__(self, details: str):
        super().__init__("Error processing image!", details=details)


class ModelNotReadyError(DetectionServiceError):
    status_code = 503

    def __init__(self, message: str = "Model is not loaded yet"):
        super().__init__(message)


class CleanupError(DetectionServiceError):
    """임시 파일 삭제 실패. 로그만 남기고 호출자에게는 절대 전달하지 않음."""


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(DetectionServiceError)
    async def _service_error(request: Request, exc: DetectionServiceError):
        if exc.status_code >= 500:
            log.error("%s %s -> %s: %s", request.method, request.url.path,
                      exc.status_code, exc.details or exc.message)
        else:
            log.warning("%s %s -> %s: %s", request.method, request.url.path,
                        exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError):
        # image 필드에 파일이 아닌 값(문자열 등)이 오면 파일 없음과 동일하게 400
        if any(tuple(e.get("loc", ()))[:2] == ("body", UPLOAD_FIELD) for e in exc.errors()):
            return await _service_error(request, ValidationError(MSG_NO_FILE))
        return await request_validation_exception_handler(request, exc)
