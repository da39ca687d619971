from __future__ import annotations

import os
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from dotenv import load_dotenv


ENV_FILES_DEFAULT_ORDER = [".env", ".env.gcloud"]

VERBOSITY_LEVELS = ("debug", "info", "warning", "error", "critical", "none")


def load_env_files(base_dir: str = ".",
                   files: Optional[List[str]] = None) -> None:
    """
    주어진 디렉토리에서 .env 계열 파일을 순서대로 로드한다.
    후순위 파일이 같은 키를 덮어쓴다.
    """
    order = files or ENV_FILES_DEFAULT_ORDER
    for name in order:
        path = os.path.join(base_dir, name)
        if os.path.exists(path):
            load_dotenv(path, override=True)


def _get_str(name: str) -> Optional[str]:
    # 빈 문자열은 설정되지 않은 것으로 본다.
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return raw.strip()


def _split_paths(raw: str) -> List[str]:
    parts = re.split(rf"[,{re.escape(os.pathsep)}]", raw)
    return [p.strip() for p in parts if p.strip()]


@dataclass(frozen=True)
class VersionsSelectionConfiguration:
    """start / stop / delete 대상 버전 선택."""

    versions: Sequence[str]
    service: Optional[str] = None
    project_id: Optional[str] = None

    def __post_init__(self) -> None:
        # None 은 Versions 쪽 검증에서 보고한다.
        if self.versions is None:
            return
        if isinstance(self.versions, str):
            raise ValueError(
                f"versions 는 버전 목록이어야 합니다 (문자열 하나가 아님): {self.versions!r}"
            )
        object.__setattr__(self, "versions", tuple(self.versions))


@dataclass(frozen=True)
class VersionsListConfiguration:
    service: Optional[str] = None
    project_id: Optional[str] = None
    hide_no_traffic: Optional[bool] = None


@dataclass(frozen=True)
class GcloudRunOptions:
    """
    모든 gcloud 호출에 공통으로 붙는 전역 옵션.

    각 필드는 독립적으로 선택 사항이며, None 이면 커맨드/환경변수에서 생략된다.
    """

    metrics_environment: Optional[str] = None
    metrics_environment_version: Optional[str] = None
    credential_file: Optional[Path] = None
    flags_files: Optional[Tuple[Path, ...]] = None
    output_format: Optional[str] = None
    show_structured_logs: Optional[str] = None
    verbosity: Optional[str] = None

    def __post_init__(self) -> None:
        if self.credential_file is not None and not isinstance(self.credential_file, Path):
            object.__setattr__(self, "credential_file", Path(self.credential_file))
        if self.flags_files is not None:
            object.__setattr__(self, "flags_files", tuple(Path(p) for p in self.flags_files))
        if self.verbosity is not None and self.verbosity not in VERBOSITY_LEVELS:
            raise ValueError(
                f"알 수 없는 verbosity 값입니다: {self.verbosity!r} "
                f"({' | '.join(VERBOSITY_LEVELS)} 중 하나)"
            )

    @classmethod
    def from_env(cls) -> "GcloudRunOptions":
        flags_raw = _get_str("GCLOUD_FLAGS_FILES")
        credential_raw = _get_str("GCLOUD_CREDENTIAL_FILE")
        verbosity = _get_str("GCLOUD_VERBOSITY")

        return cls(
            metrics_environment=_get_str("GCLOUD_METRICS_ENVIRONMENT"),
            metrics_environment_version=_get_str("GCLOUD_METRICS_ENVIRONMENT_VERSION"),
            credential_file=Path(credential_raw) if credential_raw else None,
            flags_files=tuple(Path(p) for p in _split_paths(flags_raw)) if flags_raw else None,
            output_format=_get_str("GCLOUD_OUTPUT_FORMAT"),
            show_structured_logs=_get_str("GCLOUD_SHOW_STRUCTURED_LOGS"),
            verbosity=verbosity.lower() if verbosity else None,
        )

    def with_overrides(self, **overrides) -> "GcloudRunOptions":  # noqa: ANN003
        """
        None 이 아닌 값만 덮어쓴 복사본을 돌려준다. (CLI 플래그 > env)
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise TypeError(f"알 수 없는 옵션입니다: {', '.join(unknown)}")
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


@dataclass(frozen=True)
class CloudSdkConfig:
    sdk_root: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "CloudSdkConfig":
        raw = _get_str("CLOUDSDK_ROOT") or _get_str("GCLOUD_SDK_ROOT")
        return cls(sdk_root=Path(raw) if raw else None)
