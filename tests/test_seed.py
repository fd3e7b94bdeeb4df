import os

import pytest

from firestore_kit import seed
from firestore_kit.config import SetupConfig
from firestore_kit.errors import MissingMarkerError


def test_build_seed_env_sets_credentials_without_touching_os_environ() -> None:
    env = seed.build_seed_env("/tmp/adc.json", base_env={"PATH": "/usr/bin"})

    assert env == {"PATH": "/usr/bin", "GOOGLE_APPLICATION_CREDENTIALS": "/tmp/adc.json"}
    assert "GOOGLE_APPLICATION_CREDENTIALS" not in os.environ


def test_build_seed_env_without_adc_leaves_var_unset() -> None:
    env = seed.build_seed_env(None, base_env={"PATH": "/usr/bin"})

    assert "GOOGLE_APPLICATION_CREDENTIALS" not in env


def test_install_dependencies_runs_npm_in_scripts_dir(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(seed, "run_command", lambda cmd, **kwargs: calls.append((cmd, kwargs["cwd"])))

    seed.install_dependencies(SetupConfig(), str(tmp_path))

    assert calls == [(["npm", "install", "--silent"], str(tmp_path))]


def test_run_seed_passes_env(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(seed, "run_command", lambda cmd, **kwargs: calls.append((cmd, kwargs)))

    seed.run_seed(SetupConfig(), str(tmp_path), {"GOOGLE_APPLICATION_CREDENTIALS": "/x.json"})

    cmd, kwargs = calls[0]
    assert cmd == ["node", "seed-firestore.js"]
    assert kwargs["cwd"] == str(tmp_path)
    assert kwargs["env"]["GOOGLE_APPLICATION_CREDENTIALS"] == "/x.json"


def test_missing_scripts_dir_raises(tmp_path) -> None:
    with pytest.raises(MissingMarkerError):
        seed.install_dependencies(SetupConfig(), str(tmp_path / "missing"))
