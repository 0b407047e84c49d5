"""编排器数据模型

数据类：
- ConnectionRequest: 一次配置调用的全部入参
- ProvisioningReport: 编排报告
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from provisioner.core.models import ConnectionInProgress

SUCCESS = "SUCCESS"


@dataclass
class ConnectionRequest:
    """连接配置请求"""

    plugin_fqn: str
    connection_name: str
    connection_slug: str
    connectivity_option: str = "direct"
    connection_method: str = ""
    connection_parameters: dict[str, Any] = field(default_factory=dict)
    connection_secrets: dict[str, Any] = field(default_factory=dict, repr=False)
    other_environments_exist: bool = False
    is_production_environment: bool = False


@dataclass
class ProvisioningReport:
    """编排执行报告

    parameters/secrets 为规范化后的副本，secrets 不参与 repr。
    """

    request: ConnectionRequest
    plugin_database: str = ""
    existing_connection_id: Any = None
    parameters: dict[str, Any] = field(default_factory=dict)
    secrets: dict[str, Any] = field(default_factory=dict, repr=False)
    draft: ConnectionInProgress | None = None
    integration_replaced: bool = False
    network_addresses: Any = None
    result: str = ""
    steps: list[dict[str, Any]] = field(default_factory=list)

    @property
    def mode(self) -> str:
        return "edit" if self.existing_connection_id is not None else "create"

    @property
    def success(self) -> bool:
        return self.result == SUCCESS

    def mark_integration_replaced(self) -> None:
        """集成一经替换即置位，授权失败时编排器据此告警"""
        self.integration_replaced = True

    def record(self, step: str, status: str = "done", **detail: Any) -> None:
        self.steps.append({"step": step, "status": status, **detail})
