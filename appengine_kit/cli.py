import shlex
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from .cloud_sdk import CloudSdk
from .config import (
    VERBOSITY_LEVELS,
    CloudSdkConfig,
    GcloudRunOptions,
    VersionsListConfiguration,
    VersionsSelectionConfiguration,
    load_env_files,
)
from .gcloud_runner import GcloudRunner, GcloudRunnerFactory
from .logging_utils import get_logger, setup_logging
from .process import CapturingProcessHandler, StreamingProcessHandler
from .versions import Versions, list_args, selection_args


logger = get_logger(__name__)


@click.group()
@click.option(
    "-C",
    "--chdir",
    "chdir",
    type=click.Path(file_okay=False, dir_okay=True, exists=True),
    default=".",
    help=".env / .env.gcloud 를 읽을 디렉토리 (기본: 현재 디렉토리)",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="로그 레벨을 DEBUG로 올립니다. (-vv 는 gcloud 출력 덤프까지)",
)
@click.option(
    "--sdk-root",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Cloud SDK 설치 디렉토리. 없으면 CLOUDSDK_ROOT 또는 PATH 의 gcloud 를 사용합니다.",
)
@click.option("--format", "output_format", type=str, default=None, help="gcloud --format 값")
@click.option(
    "--verbosity",
    type=click.Choice(VERBOSITY_LEVELS),
    default=None,
    help="gcloud --verbosity 값",
)
@click.option(
    "--credential-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="gcloud --credential-file-override 로 넘길 자격증명 파일",
)
@click.option(
    "--flags-file",
    "flags_files",
    type=click.Path(dir_okay=False, path_type=Path),
    multiple=True,
    help="gcloud --flags-file (여러 번 지정 가능, 지정한 순서대로 전달)",
)
@click.option(
    "--stream/--capture",
    default=False,
    help="gcloud 출력을 실시간으로 흘릴지(--stream), 끝난 뒤 한 번에 출력할지(--capture)",
)
@click.option("--timeout", type=float, default=900.0, show_default=True, help="gcloud 실행 제한 시간(초)")
@click.option("--dry-run", is_flag=True, help="실행하지 않고 gcloud 명령만 출력합니다.")
@click.pass_context
def main(
    ctx: click.Context,
    chdir: str,
    verbose: int,
    sdk_root: Optional[Path],
    output_format: Optional[str],
    verbosity: Optional[str],
    credential_file: Optional[Path],
    flags_files: Tuple[Path, ...],
    stream: bool,
    timeout: float,
    dry_run: bool,
) -> None:
    """gcloud app versions (start/stop/delete/list) 실행용 CLI"""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["chdir"] = chdir
    ctx.obj["sdk_root"] = sdk_root
    ctx.obj["overrides"] = {
        "output_format": output_format,
        "verbosity": verbosity,
        "credential_file": credential_file,
        "flags_files": flags_files or None,
    }
    ctx.obj["stream"] = stream
    ctx.obj["timeout"] = timeout
    ctx.obj["dry_run"] = dry_run


def _build_runner(ctx: click.Context) -> Tuple[GcloudRunner, Optional[CapturingProcessHandler]]:
    """
    env 파일 + CLI 플래그로 전역 옵션을 만들고 runner 를 구성한다.
    capture 모드이면 결과를 꺼내 볼 수 있도록 handler 도 함께 돌려준다.
    """
    load_env_files(ctx.obj["chdir"])
    options = GcloudRunOptions.from_env().with_overrides(**ctx.obj["overrides"])
    sdk_root = ctx.obj["sdk_root"] or CloudSdkConfig.from_env().sdk_root
    logger.debug("gcloud 전역 옵션: %s (sdk_root=%s)", options, sdk_root)

    capture: Optional[CapturingProcessHandler] = None
    if ctx.obj["stream"]:
        handler = StreamingProcessHandler(timeout=ctx.obj["timeout"])
    else:
        capture = CapturingProcessHandler(timeout=ctx.obj["timeout"])
        handler = capture

    runner = GcloudRunnerFactory().new_runner(CloudSdk(sdk_root), options, handler=handler)
    return runner, capture


def _run_operation(ctx: click.Context, operation: str, configuration) -> None:  # noqa: ANN001
    try:
        runner, capture = _build_runner(ctx)
        if ctx.obj["dry_run"]:
            if operation == "list":
                args = list_args(configuration)
            else:
                args = selection_args(operation, configuration)
            click.echo(shlex.join(runner.build_command(args)))
            return

        getattr(Versions(runner), operation)(configuration)
    except Exception as e:  # noqa: BLE001
        logger.debug("작업 실패: %s", operation, exc_info=True)
        click.echo(f"[ERROR] {operation} 실패: {e}", err=True)
        sys.exit(1)

    if capture is not None and capture.result is not None and capture.result.stdout:
        click.echo(capture.result.stdout.rstrip("\n"))


def _selection_command(operation: str, help_text: str) -> click.Command:
    @click.argument("versions", nargs=-1, required=True)
    @click.option("--service", type=str, default=None, help="대상 서비스 (기본: default)")
    @click.option("--project", "project_id", type=str, default=None, help="GCP 프로젝트 ID")
    @click.pass_context
    def _command(ctx: click.Context, versions: Tuple[str, ...], service: Optional[str], project_id: Optional[str]) -> None:
        cfg = VersionsSelectionConfiguration(versions=list(versions), service=service, project_id=project_id)
        _run_operation(ctx, operation, cfg)

    return click.command(name=operation, help=help_text)(_command)


main.add_command(_selection_command("start", "지정한 버전(들)의 서빙을 시작합니다."))
main.add_command(_selection_command("stop", "지정한 버전(들)의 서빙을 중지합니다."))
main.add_command(_selection_command("delete", "지정한 버전(들)을 삭제합니다."))


@main.command(name="list")
@click.option("--service", type=str, default=None, help="이 서비스의 버전만 출력")
@click.option("--project", "project_id", type=str, default=None, help="GCP 프로젝트 ID")
@click.option(
    "--hide-no-traffic/--show-no-traffic",
    "hide_no_traffic",
    default=None,
    help="트래픽을 받지 않는 버전을 숨길지 여부 (지정하지 않으면 gcloud 기본값)",
)
@click.pass_context
def list_versions(ctx: click.Context, service: Optional[str], project_id: Optional[str], hide_no_traffic: Optional[bool]) -> None:
    """버전 목록을 출력합니다. --service 가 없으면 모든 서비스의 버전을 출력합니다."""
    cfg = VersionsListConfiguration(service=service, project_id=project_id, hide_no_traffic=hide_no_traffic)
    _run_operation(ctx, "list", cfg)
