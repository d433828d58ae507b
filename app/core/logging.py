# 서버 전체의 로깅 포맷/레벨을 설정하는 모듈.
# (INFO, DEBUG, ERROR 로그를 같은 포맷으로 stdout에 출력)

import logging, sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO"):
    lvl = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # ultralytics는 추론마다 INFO 로그를 남기므로 한 단계 올림
    logging.getLogger("ultralytics").setLevel(max(lvl, logging.WARNING))
