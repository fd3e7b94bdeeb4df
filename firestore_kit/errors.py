"""
errors
------

프로비저닝 단계별 실패 종류.

모든 실패는 SetupError 를 상속하며, CLI 는 첫 번째 실패의 exit_code 로 종료한다.
"""

from __future__ import annotations


class SetupError(Exception):
    kind = "setup"
    exit_code = 1

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class AuthenticationError(SetupError):
    """firebase CLI 에 로그인되어 있지 않음."""

    kind = "auth"


class MissingMarkerError(SetupError):
    """프로젝트 루트에 기대한 파일/디렉토리가 없음 (잘못된 작업 위치)."""

    kind = "precondition"


class CommandFailedError(SetupError, RuntimeError):
    """외부 명령이 0 이 아닌 코드로 종료됨. exit_code 는 외부 명령의 종료 코드를 그대로 쓴다."""

    kind = "command"

    def __init__(self, message: str, *, cmd: list[str], returncode: int) -> None:
        # returncode 가 0 이하(시그널 종료 등)이면 프로세스 종료 코드로 쓸 수 없으므로 1 로 보정
        super().__init__(message, exit_code=returncode if returncode > 0 else 1)
        self.cmd = cmd
        self.returncode = returncode


class CommandNotFoundError(CommandFailedError):
    kind = "missing-tool"

    def __init__(self, message: str, *, cmd: list[str]) -> None:
        super().__init__(message, cmd=cmd, returncode=127)
