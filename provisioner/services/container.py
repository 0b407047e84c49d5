"""服务容器: 统一依赖注入

所有协作方共享同一个 SQL 会话，通过容器懒加载获取。
过程入口直接注入调用方会话；CLI 入口不传会话时按配置创建 Snowpark 会话。

用法:
    container = ServiceContainer(session=session)
    container.engine.find_connection("mssql-prod")

    # 按配置自动建会话
    container = ServiceContainer(config=Config.from_file("my.yml"))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from provisioner.core.config import Config
    from provisioner.core.protocols import (
        AddressResolver,
        ConnectionLifecycle,
        EgressProvisioner,
        SqlSession,
    )

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器，同一实例内的服务共享会话与配置"""

    def __init__(
        self, session: SqlSession | None = None, config: Config | None = None,
    ) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from provisioner.core.config import get_config
            config = get_config()
        self._config = config
        self._session = session
        self._owns_session = False

    @property
    def config(self) -> Config:
        return self._config

    @property
    def session(self) -> SqlSession:
        if self._session is None:
            from provisioner.services.session import create_session
            self._session = create_session(self._config)
            self._owns_session = True
        return self._session

    # ---- 协作方 ----

    @property
    def engine(self) -> ConnectionLifecycle:
        if "engine" not in self._instances:
            from provisioner.services.sync_engine import SyncEngineClient
            self._instances["engine"] = SyncEngineClient(
                self.session, engine_database=self._config.sync_engine_database,
            )
        return self._instances["engine"]  # type: ignore[return-value]

    @property
    def egress(self) -> EgressProvisioner:
        if "egress" not in self._instances:
            from provisioner.services.egress import EgressIntegrationProvisioner
            self._instances["egress"] = EgressIntegrationProvisioner(
                self.session, data_schema=self._config.data_schema,
            )
        return self._instances["egress"]  # type: ignore[return-value]

    @property
    def addresses(self) -> AddressResolver:
        if "addresses" not in self._instances:
            from provisioner.services.plugin_api import PluginAddressResolver
            self._instances["addresses"] = PluginAddressResolver(
                self.session,
                plugin_schema=self._config.plugin_schema,
                procedure=self._config.network_addresses_procedure,
            )
        return self._instances["addresses"]  # type: ignore[return-value]

    def close(self) -> None:
        """关闭由容器自行创建的会话；外部注入的会话由调用方负责"""
        if self._owns_session and self._session is not None:
            self._session.close()  # type: ignore[attr-defined]
            logger.debug("会话已关闭")
        self._session = None
        self._owns_session = False
        self._instances.clear()
