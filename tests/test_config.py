"""
Tests for configuration loading — defaults, YAML, environment overrides.
"""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from fetchlog_deploy.core.config.loader import (
    ENV_OVERRIDES,
    env_overrides,
    load_config,
    read_config_file,
)
from fetchlog_deploy.core.errors import ConfigError, DeployError
from fetchlog_deploy.core.models.config import DeployConfig


class TestDefaults:
    def test_defaults(self, tmp_path: Path):
        config = load_config(environ={}, install_dir=tmp_path)
        assert config.udp_port == 5514
        assert config.web_port == 8080
        assert config.host == "0.0.0.0"
        assert config.service_user == "fetchlog"
        assert config.install_dir == tmp_path.resolve()
        assert config.data_dir == Path("/var/lib/fetchlog")

    def test_derived_paths(self, tmp_path: Path):
        config = load_config(environ={}, install_dir=tmp_path)
        assert config.db_path == Path("/var/lib/fetchlog/logs.db")
        assert config.unit_path == Path("/etc/systemd/system/fetchlog.service")
        assert config.entry_path == tmp_path.resolve() / "app.py"
        assert config.manifest_path == tmp_path.resolve() / "requirements.txt"
        assert config.venv_dir == Path("/opt/fetchlog-venv")

    def test_install_dir_defaults_to_cwd(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = load_config(environ={})
        assert config.install_dir == tmp_path.resolve()

    def test_relative_install_dir_is_resolved(self, tmp_path: Path, monkeypatch):
        (tmp_path / "app").mkdir()
        monkeypatch.chdir(tmp_path)
        config = load_config(environ={}, install_dir=Path("app"))
        assert config.install_dir == (tmp_path / "app").resolve()

    def test_frozen(self, tmp_path: Path):
        config = load_config(environ={}, install_dir=tmp_path)
        with pytest.raises(ValidationError):
            config.web_port = 9999


class TestEnvironmentOverrides:
    def test_all_four(self, tmp_path: Path):
        environ = {
            "FETCHLOG_UDP_PORT": "1514",
            "FETCHLOG_WEB_PORT": "9090",
            "FETCHLOG_HOST": "127.0.0.1",
            "FETCHLOG_USER": "logsvc",
        }
        config = load_config(environ=environ, install_dir=tmp_path)
        assert config.udp_port == 1514
        assert config.web_port == 9090
        assert config.host == "127.0.0.1"
        assert config.service_user == "logsvc"

    def test_empty_values_are_ignored(self, tmp_path: Path):
        config = load_config(environ={"FETCHLOG_WEB_PORT": ""}, install_dir=tmp_path)
        assert config.web_port == 8080

    def test_unrelated_vars_ignored(self):
        assert env_overrides({"PATH": "/bin", "FETCHLOG_HOST": "::"}) == {"host": "::"}

    def test_mapping_covers_documented_variables(self):
        assert set(ENV_OVERRIDES) == {
            "FETCHLOG_UDP_PORT",
            "FETCHLOG_WEB_PORT",
            "FETCHLOG_HOST",
            "FETCHLOG_USER",
        }

    def test_reads_os_environ_by_default(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("FETCHLOG_WEB_PORT", "8181")
        config = load_config(install_dir=tmp_path)
        assert config.web_port == 8181


class TestValidation:
    @pytest.mark.parametrize("value", ["abc", "0", "70000", "-1"])
    def test_bad_port(self, tmp_path: Path, value: str):
        with pytest.raises(ConfigError, match="web_port"):
            load_config(environ={"FETCHLOG_WEB_PORT": value}, install_dir=tmp_path)

    @pytest.mark.parametrize("value", ["Root User", "9lives", "a" * 40, "bad/name"])
    def test_bad_user(self, tmp_path: Path, value: str):
        with pytest.raises(ConfigError, match="service_user"):
            load_config(environ={"FETCHLOG_USER": value}, install_dir=tmp_path)

    def test_blank_host(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="host"):
            load_config(environ={"FETCHLOG_HOST": "   "}, install_dir=tmp_path)

    @pytest.mark.parametrize(
        "value",
        [
            "0.0.0.0\nExecStartPre=/bin/touch /tmp/owned",
            "10.0.0.1 10.0.0.2",
            "0.0.0.0\rListen=1",
            "0.0.0.0\x00",
        ],
    )
    def test_host_must_be_single_token(self, tmp_path: Path, value: str):
        with pytest.raises(ConfigError, match="host"):
            load_config(environ={"FETCHLOG_HOST": value}, install_dir=tmp_path)

    def test_control_character_in_db_name_rejected(self, tmp_path: Path):
        with pytest.raises(ValidationError, match="control character"):
            DeployConfig(install_dir=tmp_path, db_name="logs\n.db")

    def test_config_error_is_deploy_error(self):
        assert issubclass(ConfigError, DeployError)

    def test_relative_data_dir_rejected(self, tmp_path: Path):
        with pytest.raises(ValidationError):
            DeployConfig(install_dir=tmp_path, data_dir=Path("var/lib/fetchlog"))


class TestConfigFile:
    def _write(self, tmp_path: Path, content: str) -> Path:
        path = tmp_path / "deploy.yml"
        path.write_text(textwrap.dedent(content))
        return path

    def test_flat_file(self, tmp_path: Path):
        path = self._write(tmp_path, """\
            web_port: 8443
            data_dir: /srv/fetchlog
        """)
        config = load_config(environ={}, config_file=path, install_dir=tmp_path)
        assert config.web_port == 8443
        assert config.db_path == Path("/srv/fetchlog/logs.db")

    def test_wrapped_file(self, tmp_path: Path):
        path = self._write(tmp_path, """\
            deploy:
              udp_port: 1514
              min_python: [3, 11]
        """)
        config = load_config(environ={}, config_file=path, install_dir=tmp_path)
        assert config.udp_port == 1514
        assert config.min_python == (3, 11)

    def test_env_beats_file(self, tmp_path: Path):
        path = self._write(tmp_path, "web_port: 8443\n")
        config = load_config(
            environ={"FETCHLOG_WEB_PORT": "9000"},
            config_file=path,
            install_dir=tmp_path,
        )
        assert config.web_port == 9000

    def test_cli_install_dir_beats_file(self, tmp_path: Path):
        other = tmp_path / "elsewhere"
        other.mkdir()
        path = self._write(tmp_path, f"install_dir: {tmp_path}\n")
        config = load_config(environ={}, config_file=path, install_dir=other)
        assert config.install_dir == other.resolve()

    def test_file_from_environment(self, tmp_path: Path):
        path = self._write(tmp_path, "host: 10.0.0.5\n")
        config = load_config(
            environ={"FETCHLOG_CONFIG": str(path)},
            install_dir=tmp_path,
        )
        assert config.host == "10.0.0.5"

    def test_empty_file(self, tmp_path: Path):
        path = self._write(tmp_path, "")
        assert read_config_file(path) == {}

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            read_config_file(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = self._write(tmp_path, "web_port: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            read_config_file(path)

    def test_non_mapping(self, tmp_path: Path):
        path = self._write(tmp_path, "- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            read_config_file(path)

    def test_unknown_key(self, tmp_path: Path):
        path = self._write(tmp_path, "web_prot: 9000\n")
        with pytest.raises(ConfigError, match="web_prot"):
            load_config(environ={}, config_file=path, install_dir=tmp_path)

    def test_newline_in_data_dir_rejected(self, tmp_path: Path):
        path = self._write(tmp_path, 'data_dir: "/var/lib/fetch\\nlog"\n')
        with pytest.raises(ConfigError, match="data_dir"):
            load_config(environ={}, config_file=path, install_dir=tmp_path)
