"""
versions
--------

`gcloud app versions start|stop|delete|list` 래핑.

각 작업은 설정을 검증하고 인자 목록을 만든 뒤 GcloudRunner 에 실행을 맡긴다.
인자 순서: app versions <op> <버전들> --service --project (--hide-no-traffic)
"""

from __future__ import annotations

from typing import List, Optional

from . import gcloud_args
from .config import VersionsListConfiguration, VersionsSelectionConfiguration
from .errors import AppEngineError, ProcessHandlerError
from .gcloud_runner import GcloudRunner
from .logging_utils import get_logger


logger = get_logger(__name__)


SELECTION_OPERATIONS = ("start", "stop", "delete")


def _check_selection(configuration: Optional[VersionsSelectionConfiguration]) -> None:
    if configuration is None:
        raise ValueError("버전 선택 설정(configuration)이 필요합니다.")
    if configuration.versions is None:
        raise ValueError("versions 가 설정되지 않았습니다.")
    if len(configuration.versions) == 0:
        raise ValueError("versions 에 하나 이상의 버전이 필요합니다.")


def selection_args(operation: str, configuration: VersionsSelectionConfiguration) -> List[str]:
    """
    start/stop/delete 공통 인자 목록을 만든다.
    """
    if operation not in SELECTION_OPERATIONS:
        raise ValueError(
            f"알 수 없는 작업입니다: {operation!r} ({' | '.join(SELECTION_OPERATIONS)} 중 하나)"
        )
    _check_selection(configuration)

    args = ["app", "versions", operation]
    args.extend(configuration.versions)
    args.extend(gcloud_args.flag("service", configuration.service))
    args.extend(gcloud_args.flag("project", configuration.project_id))
    return args


def list_args(configuration: VersionsListConfiguration) -> List[str]:
    if configuration is None:
        raise ValueError("버전 목록 설정(configuration)이 필요합니다.")

    args = ["app", "versions", "list"]
    args.extend(gcloud_args.flag("service", configuration.service))
    args.extend(gcloud_args.flag("project", configuration.project_id))
    args.extend(gcloud_args.flag("hide-no-traffic", configuration.hide_no_traffic))
    return args


class Versions:
    """
    App Engine 버전 관리 작업 모음.

    Cloud SDK 관련 예외(CloudSdkNotFoundError 등)는 그대로 올라가고,
    프로세스/handler 실패는 AppEngineError 로 감싸서 올린다.
    """

    def __init__(self, runner: GcloudRunner) -> None:
        self.runner = runner

    def _execute(self, arguments: List[str]) -> None:
        try:
            self.runner.run(arguments, None)
        except (ProcessHandlerError, OSError) as e:
            raise AppEngineError(f"gcloud {' '.join(arguments[:3])} 실패: {e}") from e

    def start(self, configuration: VersionsSelectionConfiguration) -> None:
        """지정한 버전(들)의 서빙을 시작한다."""
        args = selection_args("start", configuration)
        logger.info("버전 시작: %s", ", ".join(configuration.versions))
        self._execute(args)

    def stop(self, configuration: VersionsSelectionConfiguration) -> None:
        """지정한 버전(들)의 서빙을 중지한다."""
        args = selection_args("stop", configuration)
        logger.info("버전 중지: %s", ", ".join(configuration.versions))
        self._execute(args)

    def delete(self, configuration: VersionsSelectionConfiguration) -> None:
        """지정한 버전(들)을 삭제한다."""
        args = selection_args("delete", configuration)
        logger.info("버전 삭제: %s", ", ".join(configuration.versions))
        self._execute(args)

    def list(self, configuration: VersionsListConfiguration) -> None:
        """
        서비스의 버전 목록을 출력한다. service 가 없으면 모든 서비스의 모든 버전.
        """
        args = list_args(configuration)
        self._execute(args)
