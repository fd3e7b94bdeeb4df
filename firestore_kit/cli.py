import os
import sys
from dataclasses import replace
from typing import Optional

import click

from .config import load_env_files, SetupConfig
from .logging_utils import setup_logging, get_logger
from .orchestrator import check_all, plan_all, provision
from .paths import root_from_option


logger = get_logger(__name__)


SEED_PROMPT = "🌱 Seed test data to Firestore? (y/n) "


@click.group(invoke_without_command=True)
@click.option(
    "-C",
    "--chdir",
    "chdir",
    type=click.Path(file_okay=False, dir_okay=True, exists=True),
    default=None,
    help="프로젝트 루트 (기본: PROJECT_ROOT 환경변수, 없으면 현재 디렉토리). "
    "cwd 와 무관하게 루트를 고정하려면 scripts/setup_firestore.py 런처를 사용하세요.",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="로그 레벨을 DEBUG로 올립니다.",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="경고 이상의 로그만 출력합니다.",
)
@click.pass_context
def main(ctx: click.Context, chdir: Optional[str], verbose: int, quiet: bool) -> None:
    """Firestore 규칙/인덱스 배포 및 테스트 데이터 시드 CLI (서브커맨드 없이 실행하면 run)"""
    setup_logging(verbose, quiet=quiet)
    ctx.ensure_object(dict)
    ctx.obj["root"] = root_from_option(chdir, os.getenv("PROJECT_ROOT"))
    ctx.obj["verbose"] = verbose

    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


def _load_config_from_ctx(ctx: click.Context) -> SetupConfig:
    root: str = ctx.obj["root"]
    load_env_files(root)
    cfg = SetupConfig.from_env()
    logger.debug("Config loaded: %s", cfg)
    return cfg


def _load_or_exit(ctx: click.Context) -> SetupConfig:
    try:
        return _load_config_from_ctx(ctx)
    except Exception as e:  # noqa: BLE001
        click.echo(f"[ERROR] 설정 로드 실패: {e}", err=True)
        sys.exit(1)


def _is_tty(stream) -> bool:  # noqa: ANN001
    try:
        return bool(getattr(stream, "isatty") and stream.isatty())
    except Exception:  # noqa: BLE001
        return False


def ask_seed() -> bool:
    """
    한 글자를 읽어 y/Y 일 때만 True. 그 외 입력과 EOF 는 모두 '아니오'.

    stdin 이 터미널이면 click.getchar 로 키 입력 하나를 받고,
    파이프/리다이렉트된 stdin 이면 거기서 한 글자를 읽는다. (`echo y | firestore-setup run`)
    제어 터미널이 없어 읽을 수 없는 경우도 '아니오'로 본다.
    """
    click.echo(SEED_PROMPT, nl=False)
    try:
        if _is_tty(sys.stdin):
            reply = click.getchar()
        else:
            reply = sys.stdin.read(1)
    except (EOFError, OSError) as e:
        logger.debug("시드 여부 입력을 읽지 못해 '아니오'로 처리합니다: %r", e)
        reply = ""
    click.echo("")
    return reply in ("y", "Y")


def _banner(cfg: SetupConfig) -> None:
    title = f"🔥 {cfg.app_name} Firebase Setup"
    click.echo(title)
    click.echo("=" * len(title))
    if cfg.firebase_project_id:
        click.echo(f"Project: {cfg.firebase_project_id}")
    click.echo("")


@main.command()
@click.option(
    "--seed/--no-seed",
    "seed",
    default=None,
    help="테스트 데이터 시드 여부를 미리 지정합니다. (기본: SEED_TEST_DATA, 없으면 실행 중에 물어봄)",
)
@click.pass_context
def run(ctx: click.Context, seed: Optional[bool] = None) -> None:
    """로그인 확인 → 규칙/인덱스 배포 → 의존성 설치 → (선택) 시드"""
    cfg = _load_or_exit(ctx)
    if seed is not None:
        cfg = replace(cfg, seed=seed)

    root: str = ctx.obj["root"]
    _banner(cfg)

    try:
        summary, failure = provision(cfg, root, confirm_seed=ask_seed, report=click.echo)
    except Exception as e:  # noqa: BLE001
        logger.exception("프로비저닝 중 오류 발생")
        click.echo(f"[ERROR] 프로비저닝 실패: {e}", err=True)
        sys.exit(1)

    click.echo("")
    click.echo(summary)

    # 첫 실패 단계의 종료 코드(외부 명령의 exit code 포함)를 그대로 돌려준다.
    if failure is not None:
        click.echo(f"❌ {failure}", err=True)
        sys.exit(failure.exit_code)


@main.command()
@click.pass_context
def plan(ctx: click.Context) -> None:
    """실행될 단계와 명령을 출력 (외부 명령은 호출하지 않음)"""
    cfg = _load_or_exit(ctx)
    click.echo(plan_all(cfg, ctx.obj["root"]))


@main.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """
    firebase 로그인 상태와 프로젝트 루트(firebase.json)를 점검한다.
    (배포나 설치는 하지 않는다)
    """
    cfg = _load_or_exit(ctx)

    try:
        report, failure = check_all(cfg, ctx.obj["root"])
    except Exception as e:  # noqa: BLE001
        logger.exception("사전 체크 중 오류 발생")
        click.echo(f"[ERROR] 체크 실패: {e}", err=True)
        sys.exit(1)

    click.echo(report)

    if failure is not None:
        sys.exit(failure.exit_code)
