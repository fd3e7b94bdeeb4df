"""
gcp_auth
--------

gcloud 의 Application Default Credentials(ADC) 경로를 찾아
시드 스크립트에 넘길 자격증명 정보를 준비한다.
"""

from __future__ import annotations

import os

from .config import SetupConfig
from .errors import CommandFailedError
from .logging_utils import get_logger
from .subprocess_utils import run_command, which


logger = get_logger(__name__)


CREDENTIALS_ENV_VAR = "GOOGLE_APPLICATION_CREDENTIALS"
ADC_FILENAME = "application_default_credentials.json"
SERVICE_ACCOUNT_FILENAME = "service-account.json"


def discover_adc_path(cfg: SetupConfig) -> str | None:
    """
    gcloud 가 설치되어 있으면 전역 설정 디렉토리를 조회해
    `<config dir>/application_default_credentials.json` 경로를 만든다.

    gcloud 가 없거나 조회에 실패하면 None. 파일 존재 여부는 확인하지 않는다.
    """
    if which(cfg.gcloud_bin) is None:
        logger.info("gcloud 를 찾을 수 없어 ADC 경로를 설정하지 않습니다.")
        return None

    cmd = [
        cfg.gcloud_bin,
        "info",
        "--format=value(config.paths.global_config_dir)",
    ]
    try:
        result = run_command(cmd, timeout=cfg.command_timeout)
    except CommandFailedError as e:
        logger.warning("gcloud 설정 디렉토리 조회 실패, ADC 경로를 건너뜁니다: %s", e)
        return None

    config_dir = result.stdout.strip()
    if not config_dir:
        logger.warning("gcloud 가 설정 디렉토리를 돌려주지 않았습니다.")
        return None

    path = os.path.join(config_dir, ADC_FILENAME)
    logger.debug("ADC 경로: %s", path)
    return path


def credential_source(scripts_dir: str) -> str:
    """
    시드 스크립트가 사용할 자격증명 종류.
    scripts 디렉토리에 service-account.json 이 있으면 스크립트가 그것을 우선 사용한다.
    """
    if os.path.isfile(os.path.join(scripts_dir, SERVICE_ACCOUNT_FILENAME)):
        return "service-account"
    return "application-default"
