"""
pytest 설정:

로컬 환경에 다른 버전의 appengine_kit 패키지가 설치되어 있으면
site-packages 쪽이 먼저 import 되어 테스트가 깨질 수 있다.

테스트는 항상 현재 레포의 소스를 대상으로 해야 하므로, repo root 를 sys.path 최상단에 고정한다.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


@pytest.fixture
def sdk_root(tmp_path: Path) -> Path:
    """bin/gcloud 와 VERSION 파일만 있는 가짜 Cloud SDK 디렉토리."""
    root = tmp_path / "google-cloud-sdk"
    (root / "bin").mkdir(parents=True)
    (root / "bin" / "gcloud").write_text("#!/bin/sh\n")
    (root / "bin" / "gcloud.cmd").write_text("@echo off\n")
    (root / "VERSION").write_text("450.0.0\n")
    return root
