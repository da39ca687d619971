"""
cloud_sdk
---------

Cloud SDK(gcloud) 설치 위치와 버전을 확인하는 모듈.

sdk_root 가 주어지면 `<root>/bin/gcloud` 와 `<root>/VERSION` 을 사용하고,
없으면 PATH 에서 gcloud 를 찾는다. (이 경우 버전 확인은 건너뜀)
"""

from __future__ import annotations

import platform
import re
import shutil
from pathlib import Path
from typing import Optional, Tuple

from .errors import CloudSdkNotFoundError, CloudSdkOutOfDateError, CloudSdkVersionFileError
from .logging_utils import get_logger


logger = get_logger(__name__)


MINIMUM_VERSION = "171.0.0"

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:[-.][0-9A-Za-z.-]+)?$")


def parse_version(raw: str) -> Tuple[int, int, int]:
    m = _VERSION_RE.match(raw.strip())
    if not m:
        raise ValueError(f"버전 형식이 올바르지 않습니다: {raw!r}")
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


def _is_windows() -> bool:
    return platform.system() == "Windows"


class CloudSdk:
    def __init__(self, sdk_root: Optional[Path] = None, *, minimum_version: str = MINIMUM_VERSION) -> None:
        self.sdk_root = Path(sdk_root) if sdk_root is not None else None
        self.minimum_version = minimum_version

    def get_gcloud_path(self) -> Optional[Path]:
        """
        gcloud 실행 파일 경로. 찾을 수 없으면 None.
        """
        if self.sdk_root is not None:
            name = "gcloud.cmd" if _is_windows() else "gcloud"
            return self.sdk_root / "bin" / name

        found = shutil.which("gcloud")
        return Path(found) if found else None

    def get_version(self) -> str:
        if self.sdk_root is None:
            raise CloudSdkVersionFileError("sdk_root 가 없어 VERSION 파일 위치를 알 수 없습니다.")

        version_file = self.sdk_root / "VERSION"
        try:
            raw = version_file.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise CloudSdkVersionFileError(
                f"Cloud SDK VERSION 파일을 읽을 수 없습니다: {version_file}"
            ) from e

        try:
            parse_version(raw)
        except ValueError as e:
            raise CloudSdkVersionFileError(
                f"Cloud SDK VERSION 파일 내용을 해석할 수 없습니다: {version_file} ({raw!r})"
            ) from e
        return raw

    def validate(self) -> None:
        """
        gcloud 가 존재하고, sdk_root 가 주어졌다면 최소 버전 이상인지 확인한다.

        Raises:
            CloudSdkNotFoundError: gcloud 를 찾을 수 없음
            CloudSdkOutOfDateError: 버전이 MINIMUM_VERSION 보다 낮음
            CloudSdkVersionFileError: VERSION 파일 읽기/해석 실패
        """
        gcloud = self.get_gcloud_path()
        if gcloud is None or not gcloud.is_file():
            where = str(gcloud) if gcloud is not None else "PATH"
            raise CloudSdkNotFoundError(
                f"gcloud 명령을 찾을 수 없습니다 ({where}). gcloud CLI 가 설치되어 있는지 확인하세요."
            )

        if self.sdk_root is None:
            logger.debug("PATH 의 gcloud 를 사용하므로 버전 확인을 건너뜁니다: %s", gcloud)
            return

        installed = self.get_version()
        if parse_version(installed) < parse_version(self.minimum_version):
            raise CloudSdkOutOfDateError(installed, self.minimum_version)

        logger.debug("Cloud SDK 확인 완료: %s (version=%s)", gcloud, installed)
