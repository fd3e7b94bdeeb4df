from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, List

from dotenv import load_dotenv


ENV_FILES_DEFAULT_ORDER = [".env", ".env.local"]

DEFAULT_DEPLOY_TARGETS = ["firestore:rules", "firestore:indexes"]

# firebase deploy --only 에 넘기는 카테고리 접두어
DEPLOY_TARGET_PREFIX = "firestore:"


def load_env_files(base_dir: str = ".",
                   files: Optional[List[str]] = None) -> None:
    """
    프로젝트 루트에서 .env 계열 파일을 순서대로 로드한다.
    후순위 파일이 같은 키를 덮어쓴다.
    """
    order = files or ENV_FILES_DEFAULT_ORDER
    for name in order:
        path = os.path.join(base_dir, name)
        if os.path.exists(path):
            load_dotenv(path, override=True)


def _get_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "y"}


def _get_optional_bool(name: str) -> Optional[bool]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return _get_bool(name)


def _get_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} 은(는) 숫자여야 합니다: {raw!r}") from e


def _get_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return list(default)
    return [p.strip() for p in raw.split(",") if p.strip()]


@dataclass
class SetupConfig:
    # 표시용
    app_name: str = "SafeBite"
    firebase_project_id: Optional[str] = None

    # 프로젝트 구조
    project_root: Optional[str] = None
    marker_file: str = "firebase.json"
    scripts_dir: str = "scripts"
    seed_script: str = "seed-firestore.js"

    deploy_targets: List[str] = field(default_factory=lambda: list(DEFAULT_DEPLOY_TARGETS))

    # 외부 도구
    firebase_bin: str = "firebase"
    npm_bin: str = "npm"
    node_bin: str = "node"
    gcloud_bin: str = "gcloud"

    # 토글
    install_dependencies: bool = True
    # None 이면 실행 중에 운영자에게 묻는다.
    seed: Optional[bool] = None

    command_timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> "SetupConfig":
        cfg = cls(
            app_name=os.getenv("APP_NAME", "SafeBite"),
            firebase_project_id=os.getenv("FIREBASE_PROJECT_ID") or None,
            project_root=os.getenv("PROJECT_ROOT") or None,
            marker_file=os.getenv("MARKER_FILE", "firebase.json"),
            scripts_dir=os.getenv("SEED_SCRIPTS_DIR", "scripts"),
            seed_script=os.getenv("SEED_SCRIPT", "seed-firestore.js"),
            deploy_targets=_get_list("DEPLOY_TARGETS", DEFAULT_DEPLOY_TARGETS),
            firebase_bin=os.getenv("FIREBASE_BIN", "firebase"),
            npm_bin=os.getenv("NPM_BIN", "npm"),
            node_bin=os.getenv("NODE_BIN", "node"),
            gcloud_bin=os.getenv("GCLOUD_BIN", "gcloud"),
            install_dependencies=_get_bool("INSTALL_SEED_DEPS", True),
            seed=_get_optional_bool("SEED_TEST_DATA"),
            command_timeout=_get_float("COMMAND_TIMEOUT_SECONDS"),
        )

        invalid = [t for t in cfg.deploy_targets if not t.startswith(DEPLOY_TARGET_PREFIX)]
        if invalid:
            raise ValueError(
                "DEPLOY_TARGETS 에는 firestore:* 카테고리만 허용됩니다: " + ", ".join(invalid)
            )
        if not cfg.deploy_targets:
            raise ValueError("DEPLOY_TARGETS 가 비어 있습니다.")

        return cfg
