"""Snowpark 会话创建"""

from __future__ import annotations

import logging

from snowflake.snowpark import Session

from provisioner.core.config import Config
from provisioner.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


def create_session(config: Config) -> Session:
    """按配置中的 snowflake 段创建会话"""
    options = config.session_options()
    if not options:
        raise ConfigError("配置中缺少 snowflake 会话参数")
    logger.info(
        "连接 Snowflake: account=%s user=%s role=%s",
        options.get("account", "?"), options.get("user", "?"), options.get("role", "-"),
    )
    return Session.builder.configs(options).create()
