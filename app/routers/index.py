# 루트 경로: API 사용법 안내 (고정 문서)
from fastapi import APIRouter

router = APIRouter(tags=["index"])

WELCOME = {
    "message": "Welcome to Human Detection API!",
    "usage": {
        "endpoint": "POST /detect-human",
        "parameter": "image (multipart/form-data)",
        "example_response": {
            "result": "detected or not_detected",
            "human_detected": True,
            "details": {
                "human_count": 1,
                "detected_objects": [],
            },
        },
    },
}


@router.get("/")
async def index():
    return WELCOME
