import os

import pytest

from firestore_kit import gcp_auth
from firestore_kit.config import SetupConfig
from firestore_kit.errors import CommandFailedError
from firestore_kit.subprocess_utils import RunResult


def test_no_gcloud_means_no_adc_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(gcp_auth, "which", lambda name: None)  # noqa: ARG005

    def fail_run(*args, **kwargs):  # noqa: ANN002, ANN003
        raise AssertionError("gcloud 가 없으면 호출되면 안 된다")

    monkeypatch.setattr(gcp_auth, "run_command", fail_run)

    assert gcp_auth.discover_adc_path(SetupConfig()) is None


def test_adc_path_built_from_gcloud_config_dir(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []

    def fake_run(cmd, **kwargs):  # noqa: ANN001, ARG001
        calls.append(cmd)
        return RunResult(returncode=0, stdout="/home/dev/.config/gcloud\n", stderr="")

    monkeypatch.setattr(gcp_auth, "which", lambda name: "/usr/bin/gcloud")  # noqa: ARG005
    monkeypatch.setattr(gcp_auth, "run_command", fake_run)

    path = gcp_auth.discover_adc_path(SetupConfig())

    assert path == os.path.join("/home/dev/.config/gcloud", "application_default_credentials.json")
    assert calls == [["gcloud", "info", "--format=value(config.paths.global_config_dir)"]]


def test_gcloud_info_failure_is_not_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, **kwargs):  # noqa: ANN001, ARG001
        raise CommandFailedError("boom", cmd=list(cmd), returncode=1)

    monkeypatch.setattr(gcp_auth, "which", lambda name: "/usr/bin/gcloud")  # noqa: ARG005
    monkeypatch.setattr(gcp_auth, "run_command", fake_run)

    assert gcp_auth.discover_adc_path(SetupConfig()) is None


def test_credential_source_prefers_service_account(tmp_path) -> None:
    assert gcp_auth.credential_source(str(tmp_path)) == "application-default"

    (tmp_path / "service-account.json").write_text("{}", encoding="utf-8")

    assert gcp_auth.credential_source(str(tmp_path)) == "service-account"
