# 응답 JSON 포맷 정의 + 감지 결과 → 응답 변환
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.detector import Detection

PERSON = "person"


def format_confidence(score: float) -> str:
    # 0.8734 -> "87.34%"
    return f"{score * 100:.2f}%"


class DetectedObject(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    label: str = Field(alias="class")
    confidence: str


class DetectionDetails(BaseModel):
    human_count: int = Field(ge=0)
    detected_objects: List[DetectedObject]


class DetectionResult(BaseModel):
    result: str  # "detected" | "not_detected"
    human_detected: bool
    details: DetectionDetails

    @classmethod
    def from_detections(cls, detections: Iterable[Detection], threshold: float = 0.5) -> "DetectionResult":
        detections = list(detections)
        persons = [d for d in detections if d.label == PERSON]

        # NOTE: 감지 여부는 threshold 초과만, 인원 수는 점수와 무관하게 person 전체를 센다.
        human_detected = any(d.score > threshold for d in persons)
        human_count = len(persons)

        return cls(
            result="detected" if human_detected else "not_detected",
            human_detected=human_detected,
            details=DetectionDetails(
                human_count=human_count,
                detected_objects=[
                    DetectedObject(label=d.label, confidence=format_confidence(d.score))
                    for d in detections
                ],
            ),
        )


class HealthStatus(BaseModel):
    status: str = "OK"
    model_loaded: bool
    port: int


class ErrorBody(BaseModel):
    error: str
    details: Optional[str] = None
