"""
firebase_cli
------------

firebase CLI 로그인 확인과 Firestore 규칙/인덱스 배포를 담당하는 모듈.
"""

from __future__ import annotations

from .config import SetupConfig
from .errors import AuthenticationError, CommandFailedError, CommandNotFoundError
from .logging_utils import get_logger
from .subprocess_utils import run_command


logger = get_logger(__name__)


def _project_args(cfg: SetupConfig) -> list[str]:
    # 프로젝트를 지정하지 않으면 firebase CLI 가 .firebaserc 의 기본 프로젝트를 쓴다.
    if cfg.firebase_project_id:
        return ["--project", cfg.firebase_project_id]
    return []


def check_authenticated(cfg: SetupConfig) -> None:
    """
    `firebase projects:list` 가 성공하면 로그인된 것으로 본다.
    실패하면 재시도 없이 AuthenticationError.
    firebase 명령 자체가 없으면 CommandNotFoundError (exit 127) 를 그대로 올린다.
    """
    cmd = [cfg.firebase_bin, "projects:list"]
    try:
        run_command(cmd, timeout=cfg.command_timeout)
    except CommandNotFoundError:
        # 로그인 안내 대신 도구 누락을 그대로 알린다.
        logger.error("firebase CLI 를 찾을 수 없습니다: %s (npm install -g firebase-tools)", cfg.firebase_bin)
        raise
    except CommandFailedError as e:
        logger.debug("firebase 로그인 확인 실패: %s", e)
        raise AuthenticationError(
            "Firebase 에 로그인되어 있지 않습니다. 먼저 실행하세요: firebase login"
        ) from e
    logger.info("firebase 인증 확인 완료")


def deploy_target(cfg: SetupConfig, root: str, target: str) -> None:
    """
    `firebase deploy --only <target>` 를 root 에서 실행한다.

    출력은 터미널로 그대로 흘러가며, 실패 시 firebase 의 종료 코드를 가진
    CommandFailedError 가 올라간다. 이미 배포된 다른 카테고리는 되돌리지 않는다.
    """
    cmd = [
        cfg.firebase_bin,
        "deploy",
        "--only",
        target,
        *_project_args(cfg),
    ]
    logger.info("Firestore 배포: target=%s project=%s", target, cfg.firebase_project_id or "(default)")
    run_command(cmd, cwd=root, timeout=cfg.command_timeout, stream_output=True)
