"""
seed
----

시드 스크립트의 의존성 설치와 실행.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

from .config import SetupConfig
from .errors import MissingMarkerError
from .gcp_auth import CREDENTIALS_ENV_VAR
from .logging_utils import get_logger
from .subprocess_utils import run_command


logger = get_logger(__name__)


def _require_dir(path: str) -> None:
    if not os.path.isdir(path):
        raise MissingMarkerError(f"시드 스크립트 디렉토리를 찾을 수 없습니다: {path}")


def install_dependencies(cfg: SetupConfig, scripts_dir: str) -> None:
    """scripts 디렉토리에서 `npm install --silent`."""
    _require_dir(scripts_dir)
    run_command(
        [cfg.npm_bin, "install", "--silent"],
        cwd=scripts_dir,
        timeout=cfg.command_timeout,
        stream_output=True,
    )


def build_seed_env(
    adc_path: Optional[str],
    base_env: Optional[Mapping[str, str]] = None,
) -> dict[str, str]:
    """
    시드 프로세스 전용 환경변수. 부모 프로세스의 os.environ 은 건드리지 않는다.
    """
    env = dict(os.environ if base_env is None else base_env)
    if adc_path:
        env[CREDENTIALS_ENV_VAR] = adc_path
    return env


def run_seed(cfg: SetupConfig, scripts_dir: str, env: Mapping[str, str]) -> None:
    _require_dir(scripts_dir)
    logger.info(
        "시드 실행: %s (%s=%s)",
        cfg.seed_script,
        CREDENTIALS_ENV_VAR,
        env.get(CREDENTIALS_ENV_VAR, "(unset)"),
    )
    run_command(
        [cfg.node_bin, cfg.seed_script],
        cwd=scripts_dir,
        env=env,
        timeout=cfg.command_timeout,
        stream_output=True,
    )
