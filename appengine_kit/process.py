"""
process
-------

OS 프로세스 생성(spawner)과 결과 처리(handler).

GcloudRunner 는 spawner 로 프로세스를 띄우고, 살아있는 프로세스를 handler 에 넘긴다.
stdout/stderr 소비, 종료 코드 판단, timeout 은 전부 handler 의 책임이다.
"""

from __future__ import annotations

import queue
import subprocess
import sys
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from textwrap import shorten
from typing import Callable, List, Mapping, Optional, Protocol, Sequence, Tuple

from .errors import ProcessHandlerError
from .logging_utils import get_logger


logger = get_logger(__name__)


LineListener = Callable[[str], None]


@dataclass(frozen=True)
class RunResult:
    returncode: int
    stdout: str
    stderr: str


class ProcessSpawner:
    """subprocess.Popen 래퍼. 테스트에서는 가짜 spawner 로 교체한다."""

    def spawn(
        self,
        command: Sequence[str],
        *,
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> subprocess.Popen:
        return subprocess.Popen(  # noqa: S603
            list(command),
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            bufsize=1,
        )


class ProcessHandler(Protocol):
    def handle_process(self, process: subprocess.Popen) -> None: ...


def _command_text(process: subprocess.Popen) -> str:
    args = process.args
    if isinstance(args, (list, tuple)):
        return " ".join(str(a) for a in args)
    return str(args)


def _failure(process: subprocess.Popen, returncode: int, stdout: str, stderr: str) -> ProcessHandlerError:
    stdout = (stdout or "").strip()
    stderr = (stderr or "").strip()
    detail = ""
    if stderr:
        detail = "\nstderr:\n" + shorten(stderr, width=2000)
    elif stdout:
        detail = "\nstdout:\n" + shorten(stdout, width=2000)
    return ProcessHandlerError(
        f"명령 실행 실패: {_command_text(process)} (exit={returncode}){detail}",
        returncode=returncode,
    )


def _timed_out(process: subprocess.Popen, timeout: Optional[float]) -> ProcessHandlerError:
    return ProcessHandlerError(
        f"명령 실행이 {timeout}초 안에 끝나지 않았습니다: {_command_text(process)}"
    )


class CapturingProcessHandler:
    """
    stdout/stderr 를 모두 캡처한 뒤 종료 코드로 성공/실패를 판단한다.

    성공 시 결과는 `result` 에 남는다.
    """

    def __init__(self, *, timeout: Optional[float] = 900.0) -> None:
        self.timeout = timeout
        self.result: Optional[RunResult] = None

    def handle_process(self, process: subprocess.Popen) -> None:
        self.result = None
        try:
            stdout, stderr = process.communicate(timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            process.kill()
            process.communicate()
            raise _timed_out(process, self.timeout) from e

        stdout = stdout or ""
        stderr = stderr or ""
        if stdout:
            logger.debug("명령 stdout: %s", shorten(stdout.strip(), width=2000))
        if stderr:
            logger.debug("명령 stderr: %s", shorten(stderr.strip(), width=2000))

        if process.returncode != 0:
            raise _failure(process, process.returncode, stdout, stderr)

        self.result = RunResult(returncode=process.returncode, stdout=stdout, stderr=stderr)


def _echo_stdout(line: str) -> None:
    sys.stdout.write(line)
    sys.stdout.flush()


def _echo_stderr(line: str) -> None:
    sys.stderr.write(line)
    sys.stderr.flush()


class StreamingProcessHandler:
    """
    stdout/stderr 를 줄 단위로 실시간 전달한다.

    리스너를 주지 않으면 각각 터미널의 stdout/stderr 로 그대로 흘린다.
    gcloud 는 진행 로그를 stderr 로 내보내는 경우가 많아 두 스트림을 모두 읽는다.
    """

    def __init__(
        self,
        *,
        stdout_listeners: Optional[List[LineListener]] = None,
        stderr_listeners: Optional[List[LineListener]] = None,
        timeout: Optional[float] = 900.0,
    ) -> None:
        self.stdout_listeners = stdout_listeners if stdout_listeners is not None else [_echo_stdout]
        self.stderr_listeners = stderr_listeners if stderr_listeners is not None else [_echo_stderr]
        self.timeout = timeout

    def handle_process(self, process: subprocess.Popen) -> None:
        q: queue.Queue[Tuple[str, Optional[str]]] = queue.Queue()

        def _reader(name: str, stream) -> None:  # noqa: ANN001
            try:
                for line in stream:
                    q.put((name, line))
            finally:
                q.put((name, None))

        readers = []
        for name, stream in (("stdout", process.stdout), ("stderr", process.stderr)):
            if stream is None:
                continue
            t = threading.Thread(target=_reader, args=(name, stream), daemon=True)
            t.start()
            readers.append(t)

        out_lines: List[str] = []
        err_lines: List[str] = []
        open_streams = len(readers)
        deadline = None if self.timeout is None else time.monotonic() + float(self.timeout)

        try:
            while open_streams > 0:
                if deadline is not None and time.monotonic() >= deadline:
                    process.kill()
                    process.wait()
                    raise _timed_out(process, self.timeout)

                try:
                    name, line = q.get(timeout=0.1)
                except queue.Empty:
                    continue

                if line is None:
                    open_streams -= 1
                    continue

                if name == "stdout":
                    out_lines.append(line)
                    listeners = self.stdout_listeners
                else:
                    err_lines.append(line)
                    listeners = self.stderr_listeners
                for listener in listeners:
                    listener(line)

            wait_timeout = None
            if deadline is not None:
                wait_timeout = max(deadline - time.monotonic(), 0.0)
            returncode = process.wait(timeout=wait_timeout)
        except subprocess.TimeoutExpired as e:
            process.kill()
            process.wait()
            raise _timed_out(process, self.timeout) from e
        finally:
            # kill 후에는 EOF 가 오므로 reader 가 끝난 다음 파이프를 닫는다.
            for t in readers:
                t.join(timeout=1.0)
            for stream in (process.stdout, process.stderr):
                if stream is not None:
                    stream.close()

        if returncode != 0:
            raise _failure(process, returncode, "".join(out_lines), "".join(err_lines))
