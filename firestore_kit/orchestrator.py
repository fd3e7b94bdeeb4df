from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union

from .config import SetupConfig
from .errors import MissingMarkerError, SetupError
from .logging_utils import get_logger
from . import (
    firebase_cli,
    gcp_auth,
    seed,
)


logger = get_logger(__name__)


STATUS_OK = "OK"
STATUS_FAILED = "FAILED"
STATUS_SKIPPED = "SKIPPED"
STATUS_NOT_RUN = "NOT RUN"

# 운영자 메시지: (시작 줄, 완료 줄)
TARGET_MESSAGES = {
    "firestore:rules": ("📋 Deploying Firestore security rules...", "✓ Rules deployed"),
    "firestore:indexes": ("📇 Deploying Firestore indexes...", "✓ Indexes deployed"),
}

NEXT_STEPS: List[str] = [
    "Open Package.swift in Xcode on macOS",
    "Set Bundle ID to: com.mitch.safebite",
    "Add GoogleService-Info.plist to target",
    "Set GOOGLE_PLACES_API_KEY environment variable",
    "Run on simulator or device",
]


@dataclass
class SetupContext:
    """
    모든 단계가 공유하는 명시적 컨텍스트.
    단계들은 프로세스 cwd 를 바꾸지 않고, 여기 담긴 경로를 자식 프로세스의 cwd 로 넘긴다.
    """

    cfg: SetupConfig
    root: str
    confirm_seed: Callable[[], bool]
    report: Callable[[str], None] = field(default=lambda _msg: None)
    seed: Optional[bool] = None
    adc_path: Optional[str] = None

    @property
    def scripts_dir(self) -> str:
        return os.path.join(self.root, self.cfg.scripts_dir)

    @property
    def marker_path(self) -> str:
        return os.path.join(self.root, self.cfg.marker_file)


@dataclass(frozen=True)
class StageResult:
    name: str
    status: str
    detail: str = ""
    error: Optional[SetupError] = None


StageFn = Callable[[SetupContext], Union[None, str, StageResult]]
Stage = Tuple[str, StageFn]


def _target_messages(target: str) -> Tuple[str, str]:
    return TARGET_MESSAGES.get(target, (f"🚀 Deploying {target}...", f"✓ {target} deployed"))


# -----------------------------
# stages
# -----------------------------
def _stage_auth(ctx: SetupContext) -> str:
    firebase_cli.check_authenticated(ctx.cfg)
    ctx.report("✓ Firebase authenticated")
    return "firebase projects:list"


def _stage_marker(ctx: SetupContext) -> str:
    if not os.path.isfile(ctx.marker_path):
        raise MissingMarkerError(
            f"{ctx.cfg.marker_file} 을(를) 찾을 수 없습니다: {ctx.root} "
            f"({ctx.cfg.app_name} 프로젝트 루트가 맞는지 확인하세요)"
        )
    return ctx.marker_path


def _make_deploy_stage(target: str) -> StageFn:
    def _stage(ctx: SetupContext) -> str:
        started, done = _target_messages(target)
        ctx.report(started)
        firebase_cli.deploy_target(ctx.cfg, ctx.root, target)
        ctx.report(done)
        return target

    return _stage


def _stage_install(ctx: SetupContext) -> Union[str, StageResult]:
    if not ctx.cfg.install_dependencies:
        return StageResult("install", STATUS_SKIPPED, "INSTALL_SEED_DEPS=false")
    ctx.report("📦 Installing seed script dependencies...")
    seed.install_dependencies(ctx.cfg, ctx.scripts_dir)
    ctx.report("✓ Dependencies installed")
    return ctx.scripts_dir


def _stage_prompt(ctx: SetupContext) -> str:
    # 설정/플래그로 이미 정해져 있으면 묻지 않는다.
    if ctx.cfg.seed is not None:
        ctx.seed = ctx.cfg.seed
    else:
        ctx.seed = bool(ctx.confirm_seed())
    return "yes" if ctx.seed else "no"


def _stage_seed(ctx: SetupContext) -> Union[str, StageResult]:
    if not ctx.seed:
        return StageResult("seed", STATUS_SKIPPED, "operator declined")

    ctx.report("Seeding database...")
    ctx.adc_path = gcp_auth.discover_adc_path(ctx.cfg)
    logger.info(
        "시드 자격증명: %s", gcp_auth.credential_source(ctx.scripts_dir)
    )
    env = seed.build_seed_env(ctx.adc_path)
    seed.run_seed(ctx.cfg, ctx.scripts_dir, env)
    return ctx.cfg.seed_script


def build_stages(cfg: SetupConfig) -> List[Stage]:
    stages: List[Stage] = [
        ("auth", _stage_auth),
        ("marker", _stage_marker),
    ]
    for target in cfg.deploy_targets:
        stages.append((f"deploy:{target}", _make_deploy_stage(target)))
    stages += [
        ("install", _stage_install),
        ("prompt", _stage_prompt),
        ("seed", _stage_seed),
    ]
    return stages


def run_stages(stages: List[Stage], ctx: SetupContext) -> List[StageResult]:
    """
    단계를 순서대로 실행하고, 첫 실패 이후의 단계는 NOT RUN 으로 기록한다.
    이미 완료된 단계(배포 등)는 되돌리지 않는다.
    """
    results: List[StageResult] = []
    failed = False

    for name, fn in stages:
        if failed:
            results.append(StageResult(name, STATUS_NOT_RUN))
            continue

        logger.info("단계 실행: %s", name)
        try:
            outcome = fn(ctx)
        except SetupError as e:
            logger.error("단계 실패: %s (%s)", name, e)
            results.append(StageResult(name, STATUS_FAILED, str(e), error=e))
            failed = True
            continue

        if isinstance(outcome, StageResult):
            results.append(outcome)
        else:
            results.append(StageResult(name, STATUS_OK, outcome or ""))

    return results


def first_failure(results: List[StageResult]) -> Optional[SetupError]:
    for r in results:
        if r.status == STATUS_FAILED:
            return r.error
    return None


def _header(cfg: SetupConfig, root: str, title: str) -> List[str]:
    lines = [f"# {title}"]
    lines.append(f"- app: {cfg.app_name}")
    lines.append(f"- project: {cfg.firebase_project_id or '(firebase default)'}")
    lines.append(f"- root: {root}")
    lines.append("")
    return lines


def format_summary(cfg: SetupConfig, root: str, results: List[StageResult]) -> str:
    lines = _header(cfg, root, "Setup summary")

    lines.append("## Stages")
    for r in results:
        suffix = f" ({r.detail})" if r.detail and r.status != STATUS_FAILED else ""
        lines.append(f"- {r.name}: {r.status}{suffix}")

    failure = first_failure(results)
    lines.append("")
    if failure is not None:
        lines.append("## Failed")
        lines.append(f"- [{failure.kind}] {failure}")
        deployed = [
            r.name for r in results
            if r.name.startswith("deploy:") and r.status == STATUS_OK
        ]
        if deployed:
            lines.append("")
            lines.append("이미 배포된 항목은 되돌리지 않았습니다:")
            for name in deployed:
                lines.append(f"- {name}")
        return "\n".join(lines)

    lines.append("✅ Setup complete!")
    lines.append("")
    lines.append("Next steps:")
    for i, step in enumerate(NEXT_STEPS, start=1):
        lines.append(f"{i}. {step}")
    return "\n".join(lines)


def provision(
    cfg: SetupConfig,
    root: str,
    confirm_seed: Callable[[], bool],
    report: Optional[Callable[[str], None]] = None,
) -> tuple[str, Optional[SetupError]]:
    """
    전체 프로비저닝을 실행한다.

    Returns:
        summary: 사람이 읽기 좋은 텍스트 요약
        failure: 첫 번째 실패 (없으면 None). CLI 는 failure.exit_code 로 종료한다.
    """
    ctx = SetupContext(cfg=cfg, root=root, confirm_seed=confirm_seed)
    if report is not None:
        ctx.report = report

    results = run_stages(build_stages(cfg), ctx)
    return format_summary(cfg, root, results), first_failure(results)


def plan_all(cfg: SetupConfig, root: str) -> str:
    """
    실행될 단계와 명령을 순서대로 보여준다. 외부 명령은 호출하지 않는다.
    """
    project = ["--project", cfg.firebase_project_id] if cfg.firebase_project_id else []
    scripts_dir = os.path.join(root, cfg.scripts_dir)

    lines = _header(cfg, root, "Setup plan")
    lines.append("## Steps")
    lines.append(f"1. auth: {cfg.firebase_bin} projects:list")
    lines.append(f"2. marker: {os.path.join(root, cfg.marker_file)} 존재 확인")
    step = 3
    for target in cfg.deploy_targets:
        cmd = " ".join([cfg.firebase_bin, "deploy", "--only", target, *project])
        lines.append(f"{step}. deploy:{target}: {cmd}")
        step += 1
    if cfg.install_dependencies:
        lines.append(f"{step}. install: {cfg.npm_bin} install --silent (cwd={scripts_dir})")
    else:
        lines.append(f"{step}. install: SKIPPED (INSTALL_SEED_DEPS=false)")
    step += 1
    if cfg.seed is None:
        decision = "운영자에게 묻기 (y/n)"
    else:
        decision = "yes" if cfg.seed else "no"
    lines.append(f"{step}. prompt: {decision}")
    step += 1
    lines.append(
        f"{step}. seed: {cfg.node_bin} {cfg.seed_script} (cwd={scripts_dir}, "
        f"{gcp_auth.CREDENTIALS_ENV_VAR} 는 gcloud 가 있으면 설정)"
    )
    return "\n".join(lines)


def check_all(cfg: SetupConfig, root: str) -> tuple[str, Optional[SetupError]]:
    """
    배포 없이 로그인 상태와 프로젝트 루트만 점검한다.
    """
    ctx = SetupContext(cfg=cfg, root=root, confirm_seed=lambda: False)
    results = run_stages([("auth", _stage_auth), ("marker", _stage_marker)], ctx)

    lines = _header(cfg, root, "Setup pre-check")
    lines.append("## Checks")
    for r in results:
        detail = f" ({r.detail})" if r.detail else ""
        lines.append(f"- {r.name}: {r.status}{detail}")

    gcloud = gcp_auth.which(cfg.gcloud_bin)
    lines.append(f"- gcloud: {'found (' + gcloud + ')' if gcloud else 'not found (ADC 경로 미설정)'}")
    return "\n".join(lines), first_failure(results)
