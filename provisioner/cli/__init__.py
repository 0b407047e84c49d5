"""provisioner 命令行接口

CLI 按功能拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os

import click

from provisioner import __version__
from provisioner.utils.logger import setup_logging


def _parse_kv_pairs(pairs: tuple[str, ...]) -> dict[str, str]:
    """解析 key=value 参数对"""
    result: dict[str, str] = {}
    for p in pairs:
        if "=" in p:
            k, v = p.split("=", 1)
            result[k.strip()] = v.strip()
    return result


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """provisioner - 同步平台连接一键配置"""
    setup_logging(
        level=os.getenv("PROVISIONER_LOG_LEVEL", "INFO"),
        json_output=os.getenv("PROVISIONER_LOG_JSON", "") == "1",
    )


# 注册子命令
from provisioner.cli.cmd_configure import register as _reg_configure  # noqa: E402
from provisioner.cli.cmd_config import register as _reg_config  # noqa: E402

_reg_configure(main)
_reg_config(main)
