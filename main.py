from dotenv import load_dotenv
load_dotenv() # fastapi가 .env를 읽을 수 있도록 추가

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings
from app.core.errors import register_exception_handlers
from app.core.logging import setup_logging
from app.models.detector import Detector, YoloDetector
from app.routers import detect, health, index

log = logging.getLogger("startup")


def build_detector(settings: Settings) -> Detector:
    return YoloDetector(weights=settings.PERSON_MODEL,
                        min_score=settings.DETECT_MIN_SCORE,
                        max_detections=settings.DETECT_MAX_DET,
                        imgsz=settings.DETECT_IMGSZ,
                        warmup=settings.MODEL_WARMUP)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    # 업로드 폴더 생성 → 모델 로딩이 끝나야 uvicorn이 요청을 받기 시작함
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    log.info("Uploads directory ready (%s)", settings.UPLOAD_DIR)

    try:
        await run_in_threadpool(app.state.detector.load)
    except Exception:
        log.exception("Error loading model")
        raise

    base = f"http://localhost:{settings.PORT}"
    log.info("Server running on: %s", base)
    log.info("Human detection: POST %s/detect-human", base)
    log.info("Health check: GET %s/health", base)
    yield


def create_app(settings: Optional[Settings] = None,
               detector: Optional[Detector] = None) -> FastAPI:
    settings = settings or Settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Human Detection API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.detector = detector or build_detector(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        allow_credentials=False,
        max_age=86400,
    )
    register_exception_handlers(app)

    app.include_router(index.router)
    app.include_router(health.router)
    app.include_router(detect.router)

    if settings.STATIC_DIR and Path(settings.STATIC_DIR).is_dir():
        app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=app.state.settings.HOST, port=app.state.settings.PORT)
