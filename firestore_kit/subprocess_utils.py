from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from textwrap import shorten
from typing import Mapping, Sequence

from .errors import CommandFailedError, CommandNotFoundError
from .logging_utils import get_logger


logger = get_logger(__name__)


# timeout 으로 강제 종료된 명령에 부여하는 종료 코드 (coreutils timeout 과 동일)
TIMEOUT_EXIT_CODE = 124


@dataclass(frozen=True)
class RunResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def which(name: str) -> str | None:
    """PATH 에서 실행 파일을 찾는다. 없으면 None."""
    return shutil.which(name)


def _format_cmd(cmd: Sequence[str]) -> str:
    return " ".join(cmd)


def _failure_detail(stdout: str, stderr: str) -> str:
    stdout = (stdout or "").strip()
    stderr = (stderr or "").strip()
    if stderr:
        return "\nstderr:\n" + shorten(stderr, width=2000)
    if stdout:
        return "\nstdout:\n" + shorten(stdout, width=2000)
    return ""


def run_command(
    cmd: Sequence[str],
    *,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
    stream_output: bool = False,
    check: bool = True,
) -> RunResult:
    """
    subprocess 실행 공통 유틸.

    - stream_output=False: stdout/stderr 캡처, 실패 시 요약을 예외 메시지에 포함
    - stream_output=True : 자식 프로세스가 터미널의 stdout/stderr 를 그대로 상속한다.
      (firebase deploy / npm / node 의 진단 출력을 운영자가 직접 본다)

    check=True 이면 0 이 아닌 종료 코드에서 CommandFailedError 를 던진다.
    """
    args = list(cmd)
    logger.info("명령 실행: %s%s", _format_cmd(args), f" (cwd={cwd})" if cwd else "")

    try:
        if stream_output:
            proc = subprocess.run(  # noqa: S603
                args,
                cwd=cwd,
                env=dict(env) if env is not None else None,
                timeout=timeout,
            )
            result = RunResult(returncode=proc.returncode, stdout="", stderr="")
        else:
            proc = subprocess.run(  # noqa: S603
                args,
                cwd=cwd,
                env=dict(env) if env is not None else None,
                timeout=timeout,
                capture_output=True,
                text=True,
            )
            result = RunResult(
                returncode=proc.returncode,
                stdout=proc.stdout or "",
                stderr=proc.stderr or "",
            )
            if result.stdout:
                logger.debug("명령 stdout: %s", shorten(result.stdout.strip(), width=2000))
            if result.stderr:
                logger.debug("명령 stderr: %s", shorten(result.stderr.strip(), width=2000))
    except FileNotFoundError as e:
        raise CommandNotFoundError(
            f"필요한 명령을 찾을 수 없습니다: {args[0]} (설치되어 있고 PATH 에 있는지 확인하세요)",
            cmd=args,
        ) from e
    except subprocess.TimeoutExpired as e:
        raise CommandFailedError(
            f"명령 실행이 {timeout}초 안에 끝나지 않았습니다: {_format_cmd(args)}",
            cmd=args,
            returncode=TIMEOUT_EXIT_CODE,
        ) from e

    if check and not result.ok:
        detail = _failure_detail(result.stdout, result.stderr)
        raise CommandFailedError(
            f"명령 실행 실패: {_format_cmd(args)} (exit={result.returncode}){detail}",
            cmd=args,
            returncode=result.returncode,
        )

    return result
