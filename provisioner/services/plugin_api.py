"""插件网络地址解析过程调用

调用 <插件数据库>.PLUGIN.NETWORK_ADDRESSES(method, parameters)，
得到集成需要放行的地址列表。返回内容由插件负责，这里只检查 success。
"""

from __future__ import annotations

import json
import logging
from typing import Any

from provisioner.core.exceptions import AddressResolutionError
from provisioner.core.protocols import SqlSession
from provisioner.utils.sql import call_api, check_identifier, qualified_name

logger = logging.getLogger(__name__)


class PluginAddressResolver:
    """满足 AddressResolver 协议"""

    def __init__(
        self, session: SqlSession,
        plugin_schema: str = "PLUGIN", procedure: str = "NETWORK_ADDRESSES",
    ) -> None:
        self.session = session
        self.plugin_schema = check_identifier(plugin_schema, "插件 schema 名")
        self.procedure = check_identifier(procedure, "过程名")

    def procedure_name(self, plugin_database: str) -> str:
        return qualified_name(plugin_database, self.plugin_schema, self.procedure)

    def resolve(
        self, plugin_database: str, connection_method: str,
        parameters: dict[str, Any],
    ) -> Any:
        proc = self.procedure_name(plugin_database)
        result = call_api(
            self.session,
            "call IDENTIFIER(?)(?,parse_json(?))",
            [proc, connection_method, json.dumps(parameters)],
            source=proc,
            error_cls=AddressResolutionError,
        )
        addresses = result.unwrap(AddressResolutionError)
        logger.debug("%s 返回地址: %s", proc, addresses)
        return addresses
