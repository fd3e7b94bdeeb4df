"""
pytest 설정:

로컬 작업 환경에 설치된 다른 버전의 firestore_kit 패키지가 존재할 때,
`pytest` 실행 시 site-packages 쪽이 먼저 import 되어 테스트가 깨질 수 있다.

테스트는 항상 현재 레포의 소스를 대상으로 해야 하므로, repo root 를 sys.path 최상단에 고정한다.
"""

from __future__ import annotations

import os
import sys

import pytest


CONFIG_ENV_KEYS = [
    "APP_NAME",
    "FIREBASE_PROJECT_ID",
    "PROJECT_ROOT",
    "MARKER_FILE",
    "SEED_SCRIPTS_DIR",
    "SEED_SCRIPT",
    "DEPLOY_TARGETS",
    "FIREBASE_BIN",
    "NPM_BIN",
    "NODE_BIN",
    "GCLOUD_BIN",
    "INSTALL_SEED_DEPS",
    "SEED_TEST_DATA",
    "COMMAND_TIMEOUT_SECONDS",
    "GOOGLE_APPLICATION_CREDENTIALS",
]


def pytest_configure() -> None:
    repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


@pytest.fixture(autouse=True)
def _clean_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # 개발자 셸에 남아 있는 설정값이 테스트 결과를 바꾸지 않도록 한다.
    for key in CONFIG_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
