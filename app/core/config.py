# 환경변수(.env 포함)에서 서버 설정값을 읽어오는 모듈.
# 포트, 업로드 폴더, 모델 가중치, 감지 임계값 같은 값을 여기서 관리.
import os
from typing import List
from pydantic import BaseModel, ConfigDict, Field


def _env(name: str, default: str):
    # Settings()를 만들 때마다 환경변수를 다시 읽도록 default_factory로 사용
    return lambda: os.getenv(name, default)


class Settings(BaseModel):
    # default_factory 값(문자열)도 타입 변환되도록
    model_config = ConfigDict(validate_default=True)

    HOST: str = Field(default_factory=_env("HOST", "0.0.0.0"))
    PORT: int = Field(default_factory=_env("PORT", "3000"))
    UPLOAD_DIR: str = Field(default_factory=_env("UPLOAD_DIR", "uploads"))
    MAX_UPLOAD_BYTES: int = Field(default_factory=_env("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

    PERSON_MODEL: str = Field(default_factory=_env("PERSON_MODEL", "yolov8n.pt"))
    DETECT_MIN_SCORE: float = Field(default_factory=_env("DETECT_MIN_SCORE", "0.5"))
    DETECT_MAX_DET: int = Field(default_factory=_env("DETECT_MAX_DET", "20"))
    DETECT_IMGSZ: int = Field(default_factory=_env("DETECT_IMGSZ", "640"))
    MODEL_WARMUP: bool = Field(default_factory=_env("MODEL_WARMUP", "true"))
    HUMAN_CONF_THRES: float = Field(default_factory=_env("HUMAN_CONF_THRES", "0.5"))

    LOG_LEVEL: str = Field(default_factory=_env("LOG_LEVEL", "INFO"))
    CORS_ORIGINS: str = Field(default_factory=_env("CORS_ORIGINS", "*"))
    STATIC_DIR: str = Field(default_factory=_env("STATIC_DIR", ""))

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
