# 배포된 서버가 정상인지, 모델 로딩이 끝났는지 모니터링에 사용
from fastapi import APIRouter, Depends, Request

from app.core.config import Settings
from app.core.deps import get_settings
from app.schemas.detection import HealthStatus

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthStatus)
async def health(request: Request, settings: Settings = Depends(get_settings)):
    return HealthStatus(model_loaded=request.app.state.detector.is_loaded, port=settings.PORT)
