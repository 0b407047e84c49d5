"""外部访问集成（egress integration）配置

以 CREATE OR REPLACE 方式按草稿给出的名字重建集成，
仅放行草稿中的网络规则与密钥容器，然后把使用权授予插件应用。
重复调用时旧集成被原子替换，新旧绑定不会累积。
"""

from __future__ import annotations

import logging
from typing import Callable

from provisioner.core.exceptions import ProvisioningError
from provisioner.core.models import ConnectionInProgress
from provisioner.core.protocols import SqlSession
from provisioner.utils.sql import check_identifier, collect_rows, qualified_name

logger = logging.getLogger(__name__)


class EgressIntegrationProvisioner:
    """满足 EgressProvisioner 协议"""

    def __init__(self, session: SqlSession, data_schema: str = "DATA") -> None:
        self.session = session
        self.data_schema = check_identifier(data_schema, "数据 schema 名")

    def provision(
        self, plugin_database: str, draft: ConnectionInProgress,
        on_replaced: Callable[[], None] | None = None,
    ) -> None:
        """重建集成并授权；on_replaced 在集成被替换后、授权前调用"""
        # 标识符全部校验完再发 DDL，校验失败不产生任何副作用
        rule = qualified_name(plugin_database, self.data_schema, draft.network_rule_name)
        secrets = qualified_name(plugin_database, self.data_schema, draft.other_secrets_name)
        self.create_or_replace(draft.integration_name, rule, secrets)
        if on_replaced is not None:
            on_replaced()
        self.grant_usage(draft.integration_name, plugin_database)

    def create_or_replace(self, integration_name: str, network_rule: str, secrets: str) -> None:
        self._execute(
            f"""CREATE OR REPLACE EXTERNAL ACCESS INTEGRATION IDENTIFIER(?)
    ALLOWED_NETWORK_RULES = ({network_rule})
    ALLOWED_AUTHENTICATION_SECRETS = ({secrets})
    ENABLED = true""",
            [integration_name],
            action=f"创建外部访问集成 {integration_name}",
        )
        logger.info(
            "外部访问集成已重建: %s (rule=%s, secrets=%s)",
            integration_name, network_rule, secrets,
        )

    def grant_usage(self, integration_name: str, application: str) -> None:
        self._execute(
            "GRANT USAGE ON INTEGRATION IDENTIFIER(?) TO APPLICATION IDENTIFIER(?)",
            [integration_name, application],
            action=f"授予 {application} 使用 {integration_name}",
        )
        logger.info("已授权应用 %s 使用集成 %s", application, integration_name)

    def _execute(self, query: str, params: list, *, action: str) -> None:
        collect_rows(
            self.session, query, params,
            error_cls=ProvisioningError, action=action,
        )
