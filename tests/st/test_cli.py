"""CLI 命令测试"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from provisioner.cli import main
from provisioner.utils.logger import reset_logging


@pytest.fixture()
def cli(platform, monkeypatch: pytest.MonkeyPatch):
    """CliRunner + 注入内存平台代替 Snowpark 会话"""
    monkeypatch.setattr(
        "provisioner.services.session.create_session", lambda cfg: platform,
    )
    monkeypatch.setenv("PROVISIONER_LOG_LEVEL", "WARNING")
    yield CliRunner()
    reset_logging()


def _args(tmp_path: Path, *extra: str) -> list[str]:
    return [
        "configure", "MONITORIAL__MSSQL", "mssql-prod",
        "--name", "My SQL", "--connectivity", "privatelink",
        "--method", "SQL Server Authentication",
        "-c", str(tmp_path / "missing.yml"),
        *extra,
    ]


class TestConfigure:
    def test_create(self, cli, platform, tmp_path: Path) -> None:
        result = cli.invoke(main, _args(
            tmp_path, "--param", "username=sa", "--param", "server_port=1433",
            "--secret", "password=p", "--production",
        ))
        assert result.exit_code == 0, result.output
        assert "SUCCESS" in result.output
        assert "模式: create" in result.output
        conn = platform.connections["mssql-prod"]
        assert conn["parameters"]["server_port"] == {"value": "1433"}
        assert conn["secrets"] == {"password": {"value": "p"}}
        (create,) = platform.calls("BEGIN_CONNECTION_CREATION")
        assert create[-2:] == [False, True]
        assert platform.closed is True

    def test_params_file_merged_and_overridden(self, cli, platform, tmp_path: Path) -> None:
        f = tmp_path / "params.yml"
        f.write_text(
            "parameters:\n"
            "  server_host: h\n"
            "  server_port: 1433\n"
            "  options:\n    value: encrypt\n    kind: flag\n"
            "secrets:\n  password: from-file\n",
            encoding="utf-8",
        )
        result = cli.invoke(main, _args(
            tmp_path, "--params-file", str(f), "--param", "server_port=1434",
        ))
        assert result.exit_code == 0, result.output
        params = platform.connections["mssql-prod"]["parameters"]
        assert params["server_port"] == {"value": "1434"}
        assert params["options"] == {"value": "encrypt", "kind": "flag"}
        assert platform.connections["mssql-prod"]["secrets"] == {"password": {"value": "from-file"}}

    def test_secret_prompted(self, cli, platform, tmp_path: Path) -> None:
        result = cli.invoke(main, _args(tmp_path, "--secret", "password"), input="hidden\n")
        assert result.exit_code == 0, result.output
        assert platform.connections["mssql-prod"]["secrets"] == {"password": {"value": "hidden"}}
        assert "hidden" not in result.output

    def test_param_without_value_rejected(self, cli, platform, tmp_path: Path) -> None:
        result = cli.invoke(main, _args(
            tmp_path, "--param", "username=sa", "--param", "server_host",
            "--secret", "password=p",
        ))
        assert result.exit_code != 0
        assert "server_host" in result.output
        assert platform.statements == []
        assert platform.connections == {}

    def test_session_error_reported_with_code(self, cli, platform, tmp_path: Path) -> None:
        platform.fail_on.add("addresses")
        result = cli.invoke(main, _args(tmp_path, "--param", "username=sa"))
        assert result.exit_code == 1
        assert "[ADDRESS_RESOLUTION_FAILED]" in result.output
        assert "Traceback" not in result.output
        assert platform.closed is True

    def test_ngrok_rejected_by_cli(self, cli, platform, tmp_path: Path) -> None:
        args = _args(tmp_path)
        args[args.index("privatelink")] = "ngrok"
        result = cli.invoke(main, args)
        assert result.exit_code == 2
        assert platform.statements == []

    def test_not_found_reported(self, cli, platform, tmp_path: Path) -> None:
        args = _args(tmp_path)
        args[1] = "DOES_NOT_EXIST"
        result = cli.invoke(main, args)
        assert result.exit_code == 1
        assert "[NOT_FOUND]" in result.output

    def test_bad_params_file(self, cli, tmp_path: Path) -> None:
        f = tmp_path / "params.yml"
        f.write_text("parameters: [1, 2]\n", encoding="utf-8")
        result = cli.invoke(main, _args(tmp_path, "--params-file", str(f)))
        assert result.exit_code == 1
        assert "[VALIDATION_ERROR]" in result.output


class TestShowConfig:
    def test_password_masked(self, cli, tmp_path: Path) -> None:
        p = tmp_path / "c.yml"
        p.write_text("snowflake:\n  account: acme\n  password: topsecret\n", encoding="utf-8")
        result = cli.invoke(main, ["show-config", "-c", str(p)])
        assert result.exit_code == 0, result.output
        assert "acme" in result.output
        assert "topsecret" not in result.output
        assert "******" in result.output

    def test_version(self, cli) -> None:
        result = cli.invoke(main, ["--version"])
        assert result.exit_code == 0
