"""存储过程入口

以调用方身份运行的单次连接配置：
    run(session, plugin_fqn, connection_name, connection_slug, ...) -> "SUCCESS"

注意事项:
1. 调用方需为 ACCOUNTADMIN，并拥有同步引擎应用或 OMNATA_ADMINISTRATOR 应用角色
2. 连通方式只支持 'direct' 与 'privatelink'（不支持 'ngrok'）
3. 不支持基于 OAuth 的连接方式
4. 可重复调用以更新配置，但每次都会重建外部访问集成，应谨慎使用
"""

from __future__ import annotations

from typing import Any

from provisioner.core.config import Config
from provisioner.core.protocols import SqlSession
from provisioner.services.container import ServiceContainer
from provisioner.services.orchestrator import ConnectionRequest, Orchestrator


def run(
    session: SqlSession,
    plugin_fqn: str,
    connection_name: str,
    connection_slug: str,
    connectivity_option: str,
    connection_method: str,
    connection_parameters: dict[str, Any] | None,
    connection_secrets: dict[str, Any] | None,
    other_environments_exist: bool,
    is_production_environment: bool,
    config: Config | None = None,
) -> str:
    request = ConnectionRequest(
        plugin_fqn=plugin_fqn,
        connection_name=connection_name,
        connection_slug=connection_slug,
        connectivity_option=connectivity_option,
        connection_method=connection_method,
        connection_parameters=dict(connection_parameters or {}),
        connection_secrets=dict(connection_secrets or {}),
        other_environments_exist=bool(other_environments_exist),
        is_production_environment=bool(is_production_environment),
    )
    container = ServiceContainer(session=session, config=config)
    report = Orchestrator(container).run(request)
    return report.result
