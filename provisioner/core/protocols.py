"""领域协议定义

集中定义编排器与外部协作方之间的接口契约（Protocol），
编排器只依赖抽象；生产环境由 Snowpark Session 满足 SqlSession，
测试中由内存假会话满足。
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence


# =========================================================================
# SQL 会话协议
# =========================================================================

class SqlStatement(Protocol):
    """session.sql() 返回的惰性语句对象"""

    def collect(self) -> list[Any]:
        """执行语句并返回全部行（行可按位置和列名取值）"""
        ...


class SqlSession(Protocol):
    """与 snowflake.snowpark.Session 同形的最小会话接口"""

    def sql(self, query: str, params: Sequence[Any] | None = None) -> SqlStatement:
        ...


# =========================================================================
# 同步引擎接口协议
# =========================================================================

class ConnectionLifecycle(Protocol):
    """插件目录 + 连接生命周期接口

    每个 call 都返回 {success, error, data}，失败时原样抛出 error。
    """

    def plugin_database(self, plugin_fqn: str) -> str:
        """插件 FQN → 插件应用所在数据库；不存在时抛 NotFoundError"""
        ...

    def find_connection(self, slug: str) -> Any | None:
        """按 slug 查找已有连接 ID；不存在返回 None（不是错误）"""
        ...

    def begin_edit(self, name: str, slug: str, connection_id: Any) -> Any:
        """开始编辑已有连接，返回 ConnectionInProgress"""
        ...

    def begin_creation(
        self, *,
        plugin_fqn: str, name: str, slug: str,
        connectivity_option: str, connection_method: str,
        other_environments_exist: bool, is_production_environment: bool,
    ) -> Any:
        """开始创建新连接，返回 ConnectionInProgress"""
        ...

    def complete(
        self, in_progress_id: Any, network_addresses: Any,
        parameters: dict[str, Any], secrets: dict[str, Any],
    ) -> Any:
        """提交连接草稿"""
        ...


# =========================================================================
# 插件与外部访问集成协议
# =========================================================================

class AddressResolver(Protocol):
    """插件自带的网络地址解析过程（信任边界，不解读其返回）"""

    def resolve(
        self, plugin_database: str, connection_method: str,
        parameters: dict[str, Any],
    ) -> Any:
        ...


class EgressProvisioner(Protocol):
    """外部访问集成的 create-or-replace + 授权"""

    def provision(
        self, plugin_database: str, draft: Any,
        on_replaced: Callable[[], None] | None = None,
    ) -> None:
        """on_replaced 在集成被替换后立即回调（授权之前）"""
        ...
