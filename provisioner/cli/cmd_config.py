"""CLI: 查看当前生效配置"""

from __future__ import annotations

import click
import yaml

from provisioner.core.config import DEFAULT_CONFIG_PATH, init_config
from provisioner.core.exceptions import ProvisionerError


def register(group: click.Group) -> None:
    group.add_command(show_config)


@click.command(name="show-config")
@click.option("-c", "--config", "config_path", default=DEFAULT_CONFIG_PATH, help="配置文件路径")
def show_config(config_path: str) -> None:
    """打印生效配置（密码已隐藏）"""
    try:
        cfg = init_config(config_path)
    except ProvisionerError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e
    click.echo(yaml.safe_dump(cfg.to_dict(), allow_unicode=True, sort_keys=False), nl=False)
