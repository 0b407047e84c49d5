"""集中配置管理

支持从 YAML 文件加载 + 编程式覆盖。
snowflake 段原样透传给 Snowpark Session.builder.configs()。
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field
from typing import Any

from provisioner.core.exceptions import ConfigError
from provisioner.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "configs/default.yml"
PASSWORD_ENV = "SNOWFLAKE_PASSWORD"


@dataclass
class Config:
    """全局配置"""

    # 同步引擎
    sync_engine_database: str = "OMNATA_SYNC_ENGINE"

    # 插件应用内的 schema 与过程名
    data_schema: str = "DATA"
    plugin_schema: str = "PLUGIN"
    network_addresses_procedure: str = "NETWORK_ADDRESSES"

    # Snowpark 会话参数 (account/user/role/warehouse/authenticator ...)
    snowflake: dict[str, Any] = field(default_factory=dict)

    # 日志
    log_level: str = "INFO"
    log_json: bool = False

    # 放不到字段里的配置项
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_PATH) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (OSError, ValueError) as e:
            raise ConfigError(f"无法读取配置文件 {path}: {e}") from e
        if not data:
            return cls()
        known = {f for f in cls.__dataclass_fields__ if f != "extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        if not isinstance(matched.get("snowflake", {}), dict):
            raise ConfigError(f"{path}: snowflake 段必须是字典")
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def session_options(self) -> dict[str, Any]:
        """Snowpark 会话参数，密码缺省时从环境变量补齐"""
        opts = dict(self.snowflake)
        if "password" not in opts and os.getenv(PASSWORD_ENV):
            opts["password"] = os.environ[PASSWORD_ENV]
        return opts

    def to_dict(self, mask_secrets: bool = True) -> dict:
        data = asdict(self)
        if mask_secrets and "password" in data["snowflake"]:
            data["snowflake"]["password"] = "******"
        return data


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = DEFAULT_CONFIG_PATH) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
