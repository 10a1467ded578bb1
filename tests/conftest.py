"""
Shared test fixtures and configuration.

Nothing here touches the real host: commands go to a MockRunner,
root is faked through ``os.geteuid``, and every path lives under
``tmp_path``.
"""

import os
import shutil
import textwrap
from pathlib import Path

import pytest

from fetchlog_deploy.adapters.mock import MockRunner
from fetchlog_deploy.core.models.config import DeployConfig
from tests.simulated_host import PYTHON_BIN, healthy_host


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the developer's FETCHLOG_* variables out of every test."""
    for key in list(os.environ):
        if key.startswith("FETCHLOG_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def install_dir(tmp_path: Path) -> Path:
    """A FetchLog checkout: entry artifact, manifest, assets, .git."""
    app = tmp_path / "opt" / "fetchlog"
    (app / "static").mkdir(parents=True)
    (app / "templates").mkdir()
    (app / ".git").mkdir()
    (app / "app.py").write_text("#!/usr/bin/env python3\nprint('fetchlog')\n")
    (app / "app.py").chmod(0o644)
    (app / "requirements.txt").write_text("fastapi\nuvicorn\n")
    (app / "static" / "app.js").write_text("// ui\n")
    (app / "templates" / "index.html").write_text("<html></html>\n")
    (app / ".git" / "config").write_text("[core]\n")
    return app


@pytest.fixture
def deploy_config(tmp_path: Path, install_dir: Path) -> DeployConfig:
    """Default config with all host paths redirected under tmp_path."""
    return DeployConfig(
        install_dir=install_dir,
        data_dir=tmp_path / "var" / "lib" / "fetchlog",
        unit_dir=tmp_path / "etc" / "systemd" / "system",
        start_settle_seconds=0,
    )


@pytest.fixture
def config_file(tmp_path: Path, deploy_config: DeployConfig) -> Path:
    """YAML file pointing the CLI at the same tmp_path layout."""
    path = tmp_path / "fetchlog-deploy.yml"
    path.write_text(textwrap.dedent(f"""\
        deploy:
          data_dir: {deploy_config.data_dir}
          unit_dir: {deploy_config.unit_dir}
          start_settle_seconds: 0
    """))
    return path


@pytest.fixture
def chown_calls(monkeypatch) -> list[tuple]:
    """Record shutil.chown calls instead of performing them."""
    calls: list[tuple] = []

    def fake_chown(path, user=None, group=None):
        calls.append((Path(path), user, group))

    monkeypatch.setattr(shutil, "chown", fake_chown)
    return calls


@pytest.fixture
def as_root(monkeypatch, chown_calls):
    """Pretend to be root with python3 on PATH."""
    real_which = shutil.which

    def fake_which(name, *args, **kwargs):
        if name == "python3":
            return PYTHON_BIN
        return real_which(name, *args, **kwargs)

    monkeypatch.setattr(os, "geteuid", lambda: 0)
    monkeypatch.setattr(shutil, "which", fake_which)


@pytest.fixture
def as_user(monkeypatch, chown_calls):
    """Pretend to be an unprivileged user."""
    monkeypatch.setattr(os, "geteuid", lambda: 1000)


@pytest.fixture
def runner() -> MockRunner:
    """A healthy host (see simulated_host)."""
    return healthy_host()
