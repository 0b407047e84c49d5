"""CLI: 一次性创建或更新连接"""

from __future__ import annotations

import os
from typing import Any

import click

from provisioner.cli import _parse_kv_pairs
from provisioner.core.config import DEFAULT_CONFIG_PATH, init_config
from provisioner.core.exceptions import ProvisionerError, ValidationError
from provisioner.core.models import CONNECTIVITY_OPTIONS
from provisioner.services.container import ServiceContainer
from provisioner.services.orchestrator import (
    ConnectionRequest,
    Orchestrator,
    ProvisioningReport,
)
from provisioner.utils.logger import setup_logging
from provisioner.utils.yaml_io import load_yaml


def register(group: click.Group) -> None:
    group.add_command(configure)


def _load_params_file(path: str) -> tuple[dict[str, Any], dict[str, Any]]:
    """读取参数文件，顶层键为 parameters / secrets"""
    try:
        data = load_yaml(path)
    except (OSError, ValueError) as e:
        raise ValidationError(f"无法读取参数文件 {path}: {e}") from e
    params = data.get("parameters") or {}
    secrets = data.get("secrets") or {}
    if not isinstance(params, dict) or not isinstance(secrets, dict):
        raise ValidationError(f"{path}: parameters/secrets 必须是字典")
    return params, secrets


def _collect_params(pairs: tuple[str, ...]) -> dict[str, str]:
    """参数只接受 key=value，缺少 "=" 的项直接报错"""
    bad = [p for p in pairs if "=" not in p]
    if bad:
        raise click.BadParameter(
            f"缺少 \"=\": {', '.join(bad)}（格式: key=value）", param_hint="--param",
        )
    return _parse_kv_pairs(pairs)


def _collect_secrets(pairs: tuple[str, ...]) -> dict[str, str]:
    """key=value 直接取值；只给 key 时交互式隐藏输入"""
    secrets = _parse_kv_pairs(pairs)
    for p in pairs:
        if "=" not in p:
            key = p.strip()
            secrets[key] = click.prompt(f"{key}", hide_input=True)
    return secrets


def _print_report(report: ProvisioningReport) -> None:
    click.echo("\n=== 连接配置报告 ===")
    for step in report.steps:
        status = step.get("status", "?")
        click.echo(f"  [{status:6s}] {step['step']}")
    if report.draft is not None:
        click.echo(f"集成: {report.draft.integration_name}")
    click.echo(f"模式: {report.mode}")
    click.echo(report.result)


@click.command(name="configure")
@click.argument("plugin_fqn")
@click.argument("slug")
@click.option("--name", "connection_name", required=True, help="连接显示名称")
@click.option(
    "--connectivity", default="direct",
    type=click.Choice(CONNECTIVITY_OPTIONS), help="连通方式",
)
@click.option("--method", "connection_method", required=True, help="连接方式（由插件定义）")
@click.option("--param", multiple=True, help="连接参数 key=value（可多次）")
@click.option("--secret", multiple=True, help="连接密钥 key=value 或 key（交互输入，可多次）")
@click.option("--params-file", default="", help="YAML 参数文件（parameters / secrets）")
@click.option("--other-environments-exist/--no-other-environments-exist", default=False)
@click.option("--production/--non-production", default=False, help="是否为生产环境")
@click.option("-c", "--config", "config_path", default=DEFAULT_CONFIG_PATH, help="配置文件路径")
def configure(**kwargs: Any) -> None:
    """创建或更新连接（可重复执行，但每次都会重建外部访问集成）"""
    try:
        cfg = init_config(kwargs["config_path"])
        if not os.getenv("PROVISIONER_LOG_LEVEL"):
            setup_logging(level=cfg.log_level, json_output=cfg.log_json)

        params: dict[str, Any] = {}
        secrets: dict[str, Any] = {}
        if kwargs.get("params_file"):
            params, secrets = _load_params_file(kwargs["params_file"])
        params.update(_collect_params(kwargs.get("param", ())))
        secrets.update(_collect_secrets(kwargs.get("secret", ())))

        request = ConnectionRequest(
            plugin_fqn=kwargs["plugin_fqn"],
            connection_name=kwargs["connection_name"],
            connection_slug=kwargs["slug"],
            connectivity_option=kwargs["connectivity"],
            connection_method=kwargs["connection_method"],
            connection_parameters=params,
            connection_secrets=secrets,
            other_environments_exist=kwargs["other_environments_exist"],
            is_production_environment=kwargs["production"],
        )
        container = ServiceContainer(config=cfg)
        try:
            report = Orchestrator(container).run(request)
        finally:
            container.close()
    except ProvisionerError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e

    _print_report(report)
