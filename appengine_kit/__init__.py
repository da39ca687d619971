"""
appengine_kit
-------------

gcloud CLI 를 subprocess 로 호출하여 App Engine 버전(start/stop/delete/list)을
관리하는 패키지.
설정 객체를 gcloud 인자 목록으로 변환하고, 전역 옵션/환경변수를 붙여 프로세스를 실행한 뒤
결과 처리는 주입된 process handler 에 맡긴다.
"""

from .cloud_sdk import CloudSdk
from .config import GcloudRunOptions, VersionsListConfiguration, VersionsSelectionConfiguration
from .errors import (
    AppEngineError,
    CloudSdkNotFoundError,
    CloudSdkOutOfDateError,
    CloudSdkVersionFileError,
    ProcessHandlerError,
)
from .gcloud_runner import GcloudRunner, GcloudRunnerFactory
from .versions import Versions

__all__ = [
    "AppEngineError",
    "CloudSdk",
    "CloudSdkNotFoundError",
    "CloudSdkOutOfDateError",
    "CloudSdkVersionFileError",
    "GcloudRunOptions",
    "GcloudRunner",
    "GcloudRunnerFactory",
    "ProcessHandlerError",
    "Versions",
    "VersionsListConfiguration",
    "VersionsSelectionConfiguration",
]
