"""
gcloud_runner
-------------

gcloud 프로세스 실행 책임을 가지는 모듈.

인자 목록 뒤에 전역 플래그(--format, --verbosity, --credential-file-override,
--flags-file)를 고정 순서로 붙이고, CLOUDSDK_* 환경변수를 덮어쓴 뒤
프로세스를 띄워 handler 에 넘긴다. 출력 해석은 하지 않는다.
"""

from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from . import gcloud_args
from .cloud_sdk import CloudSdk
from .config import GcloudRunOptions
from .logging_utils import get_logger
from .process import ProcessHandler, ProcessSpawner


logger = get_logger(__name__)


def _is_windows() -> bool:
    return platform.system() == "Windows"


class GcloudRunner:
    def __init__(
        self,
        sdk: CloudSdk,
        options: GcloudRunOptions,
        spawner: ProcessSpawner,
        handler: ProcessHandler,
    ) -> None:
        self.sdk = sdk
        self.options = options
        self.spawner = spawner
        self.handler = handler

    def build_command(self, arguments: Sequence[str]) -> List[str]:
        """
        Cloud SDK 를 검증하고, gcloud 절대 경로 + 인자 + 전역 플래그 목록을 만든다.
        """
        self.sdk.validate()
        gcloud = self.sdk.get_gcloud_path()
        assert gcloud is not None

        opts = self.options
        command = [str(gcloud.absolute())]
        command.extend(arguments)
        command.extend(gcloud_args.flag("format", opts.output_format))
        command.extend(gcloud_args.flag("verbosity", opts.verbosity))
        command.extend(gcloud_args.flag("credential-file-override", opts.credential_file))
        command.extend(gcloud_args.flags_each("flags-file", opts.flags_files))
        return command

    def get_gcloud_command_environment(self) -> Dict[str, str]:
        opts = self.options
        environment: Dict[str, str] = {}
        if opts.credential_file is not None:
            environment["CLOUDSDK_APP_USE_GSUTIL"] = "0"
        if opts.metrics_environment is not None:
            environment["CLOUDSDK_METRICS_ENVIRONMENT"] = opts.metrics_environment
        if opts.metrics_environment_version is not None:
            environment["CLOUDSDK_METRICS_ENVIRONMENT_VERSION"] = opts.metrics_environment_version
        if opts.show_structured_logs is not None:
            environment["CLOUDSDK_CORE_SHOW_STRUCTURED_LOGS"] = opts.show_structured_logs
        # Windows 에서는 파일 업로드 병렬 프로세스가 자격증명을 넘겨받지 못한다.
        if _is_windows():
            environment["CLOUDSDK_APP_NUM_FILE_UPLOAD_PROCESSES"] = "1"

        environment["CLOUDSDK_CORE_DISABLE_PROMPTS"] = "1"
        return environment

    def run(self, arguments: Sequence[str], working_directory: Optional[Path] = None) -> None:
        """
        gcloud 프로세스를 실행하고 handler 에 넘긴다.

        working_directory 가 None 이면 현재 프로세스의 작업 디렉토리를 그대로 쓴다.
        handler 예외와 프로세스 생성 실패(OSError)는 그대로 올린다.
        """
        command = self.build_command(arguments)
        logger.info("명령 실행: %s", " ".join(command))

        env = dict(os.environ)
        env.update(self.get_gcloud_command_environment())

        process = self.spawner.spawn(command, cwd=working_directory, env=env)
        self.handler.handle_process(process)


class GcloudRunnerFactory:
    """spawner 를 고정해 두고 호출별 전역 옵션으로 GcloudRunner 를 만든다."""

    def __init__(self, spawner: Optional[ProcessSpawner] = None) -> None:
        self.spawner = spawner if spawner is not None else ProcessSpawner()

    def new_runner(
        self,
        sdk: CloudSdk,
        options: Optional[GcloudRunOptions] = None,
        *,
        handler: ProcessHandler,
    ) -> GcloudRunner:
        return GcloudRunner(
            sdk,
            options if options is not None else GcloudRunOptions(),
            self.spawner,
            handler,
        )
