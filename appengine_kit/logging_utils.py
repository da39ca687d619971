import logging
import sys


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# gcloud 출력 전체를 DEBUG 로 덤프하는 로거. -vv 부터만 보인다.
PROCESS_OUTPUT_LOGGER = "appengine_kit.process"


def setup_logging(verbosity: int = 0) -> None:
    """
    -v  : 패키지 로그를 DEBUG 로 (명령/설정 확인용)
    -vv : 캡처한 gcloud stdout/stderr 덤프까지 출력
    """
    level = logging.INFO
    if verbosity >= 1:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
    logging.getLogger(PROCESS_OUTPUT_LOGGER).setLevel(
        logging.DEBUG if verbosity >= 2 else logging.INFO
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
