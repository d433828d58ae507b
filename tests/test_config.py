"""
Tests for environment-driven Settings.
"""

from app.core.config import Settings
from main import build_detector


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("PORT", "UPLOAD_DIR", "MAX_UPLOAD_BYTES", "HUMAN_CONF_THRES", "CORS_ORIGINS"):
            monkeypatch.delenv(name, raising=False)
        s = Settings()

        assert s.PORT == 3000
        assert s.UPLOAD_DIR == "uploads"
        assert s.MAX_UPLOAD_BYTES == 10 * 1024 * 1024
        assert s.HUMAN_CONF_THRES == 0.5
        assert s.cors_origins == ["*"]

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("MODEL_WARMUP", "false")
        monkeypatch.setenv("CORS_ORIGINS", "http://a.com, http://b.com")
        s = Settings()

        assert s.PORT == 8080
        assert s.MODEL_WARMUP is False
        assert s.cors_origins == ["http://a.com", "http://b.com"]

    def test_kwargs_win(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        assert Settings(PORT=9000).PORT == 9000


def test_build_detector_uses_settings():
    s = Settings(PERSON_MODEL="yolov8s.pt", DETECT_MIN_SCORE=0.3, DETECT_MAX_DET=5, MODEL_WARMUP=False)
    det = build_detector(s)

    assert det.weights == "yolov8s.pt"
    assert det.min_score == 0.3
    assert det.max_detections == 5
    assert det.warmup is False
    assert det.is_loaded is False
