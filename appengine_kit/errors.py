"""
errors
------

App Engine 버전 관리 중 발생하는 예외 계층.

- 설정 검증 실패는 ValueError 로 즉시 올린다. (여기 정의하지 않음)
- Cloud SDK 위치/버전 문제는 종류별로 구분되는 AppEngineError 하위 예외.
- process handler/IO 실패는 Versions 에서 AppEngineError 로 감싸서 올린다.
"""

from __future__ import annotations


class AppEngineError(RuntimeError):
    """모든 App Engine 작업 실패의 공통 예외."""


class CloudSdkNotFoundError(AppEngineError):
    """gcloud 바이너리를 찾을 수 없음 (설치 필요)."""


class CloudSdkOutOfDateError(AppEngineError):
    """설치된 Cloud SDK 버전이 요구 버전보다 낮음 (업데이트 필요)."""

    def __init__(self, installed: str, required: str) -> None:
        super().__init__(
            f"Cloud SDK 버전이 너무 낮습니다: 설치됨={installed}, 필요={required} 이상 "
            "(`gcloud components update` 로 업데이트하세요)"
        )
        self.installed = installed
        self.required = required


class CloudSdkVersionFileError(AppEngineError):
    """Cloud SDK VERSION 파일을 읽거나 해석할 수 없음."""


class ProcessHandlerError(RuntimeError):
    """process handler 가 프로세스 결과를 실패로 판단했을 때 발생."""

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode
