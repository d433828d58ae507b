# app/models/detector.py
from __future__ import annotations
import logging
import threading
from dataclasses import dataclass
from typing import List, Optional, Tuple

import cv2
import numpy as np
from ultralytics import YOLO

from app.core.errors import ModelNotReadyError

log = logging.getLogger("detector")


# ---- 결과 구조체 ----
@dataclass(frozen=True)
class Detection:
    label: str
    score: float
    # (x, y, w, h) 픽셀 좌표. 응답에는 쓰지 않음
    bbox: Optional[Tuple[float, float, float, float]] = None


class Detector:
    """
    사전학습 모델 래퍼 인터페이스. 프로세스 시작 시 load()를 한 번 호출하고,
    이후에는 읽기 전용으로 여러 요청이 동시에 detect()를 호출한다.
    """

    @property
    def is_loaded(self) -> bool:
        raise NotImplementedError

    def load(self) -> None:
        raise NotImplementedError

    def detect(self, tensor: np.ndarray) -> List[Detection]:
        raise NotImplementedError


class YoloDetector(Detector):
    """ultralytics YOLO(COCO) 기반 감지기. 기본값은 최소 점수 0.5, 최대 20박스."""

    def __init__(self,
                 weights: str = "yolov8n.pt",
                 min_score: float = 0.5,
                 max_detections: int = 20,
                 imgsz: int = 640,
                 warmup: bool = True):
        self.weights = weights
        self.min_score = min_score
        self.max_detections = max_detections
        self.imgsz = imgsz
        self.warmup = warmup
        self.model = None
        self._load_lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self.model is not None

    def load(self) -> None:
        with self._load_lock:
            if self.model is not None:
                return
            log.info("Loading YOLO model (%s)...", self.weights)
            model = YOLO(self.weights)
            if self.warmup:
                # 첫 요청에서 초기화 지연이 생기지 않도록 검은 화면으로 1회 추론
                black = np.zeros((self.imgsz, self.imgsz, 3), dtype=np.uint8)
                model.predict(black, imgsz=self.imgsz, verbose=False)
            self.model = model
            log.info("Model loaded successfully!")

    def detect(self, tensor: np.ndarray) -> List[Detection]:
        """
        입력: (H, W, 3) RGB uint8
        출력: Detection 리스트 (label = COCO 클래스 이름, score ∈ [0, 1])
        """
        if self.model is None:
            raise ModelNotReadyError()

        # ultralytics는 numpy 입력을 BGR로 취급
        frame = cv2.cvtColor(tensor, cv2.COLOR_RGB2BGR)
        r = self.model.predict(frame,
                               conf=self.min_score,
                               max_det=self.max_detections,
                               imgsz=self.imgsz,
                               verbose=False)[0]

        detections: List[Detection] = []
        if r is None or r.boxes is None:
            return detections

        names = r.names or self.model.names
        for box in r.boxes:
            cls_id = int(box.cls[0])
            score = float(box.conf[0])
            x1, y1, x2, y2 = [float(v) for v in box.xyxy[0].tolist()]
            detections.append(Detection(
                label=names.get(cls_id, str(cls_id)) if isinstance(names, dict) else names[cls_id],
                score=score,
                bbox=(x1, y1, x2 - x1, y2 - y1),
            ))
        return detections
