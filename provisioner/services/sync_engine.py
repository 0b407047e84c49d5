"""同步引擎接口客户端

封装插件目录、连接目录与连接生命周期接口（开始编辑/开始创建/完成创建）。
所有生命周期 call 返回 {success, error, data}；失败时以 error 原文
抛出 LifecycleRejectedError。
"""

from __future__ import annotations

import json
import logging
from typing import Any

from provisioner.core.exceptions import LifecycleRejectedError, NotFoundError
from provisioner.core.models import ConnectionInProgress
from provisioner.core.protocols import SqlSession
from provisioner.utils.sql import call_api, check_identifier, collect_rows

logger = logging.getLogger(__name__)


class SyncEngineClient:
    """同步引擎 API 客户端，满足 ConnectionLifecycle 协议"""

    def __init__(self, session: SqlSession, engine_database: str = "OMNATA_SYNC_ENGINE") -> None:
        self.session = session
        self.engine = check_identifier(engine_database, "同步引擎数据库名")

    # ---- 目录查询 ----

    def plugin_database(self, plugin_fqn: str) -> str:
        rows = collect_rows(
            self.session,
            f"select DATABASE from {self.engine}.DATA_VIEWS.PLUGIN where PLUGIN_FQN=?",
            [plugin_fqn],
            error_cls=LifecycleRejectedError, action=f"查询插件 {plugin_fqn} ",
        )
        if not rows:
            raise NotFoundError(f"Plugin with FQN {plugin_fqn} not found in Sync Engine")
        database = rows[0]["DATABASE"]
        logger.debug("插件 %s 位于数据库 %s", plugin_fqn, database)
        return database

    def find_connection(self, slug: str) -> Any | None:
        rows = collect_rows(
            self.session,
            f"select CONNECTION_ID from {self.engine}.DATA_VIEWS.CONNECTION where CONNECTION_SLUG=?",
            [slug],
            error_cls=LifecycleRejectedError, action=f"查询连接 {slug} ",
        )
        if not rows:
            return None
        return rows[0]["CONNECTION_ID"]

    # ---- 生命周期 ----

    def begin_edit(self, name: str, slug: str, connection_id: Any) -> ConnectionInProgress:
        # 末尾两个固定为 False 的开关在本流程中保留不用
        result = call_api(
            self.session,
            f"call {self.engine}.API.BEGIN_CONNECTION_EDIT(?,?,?,?,?)",
            [name, slug, connection_id, False, False],
            source="BEGIN_CONNECTION_EDIT",
            error_cls=LifecycleRejectedError,
        )
        return ConnectionInProgress.from_payload(result.unwrap(LifecycleRejectedError))

    def begin_creation(
        self, *,
        plugin_fqn: str, name: str, slug: str,
        connectivity_option: str, connection_method: str,
        other_environments_exist: bool, is_production_environment: bool,
    ) -> ConnectionInProgress:
        result = call_api(
            self.session,
            f"call {self.engine}.API.BEGIN_CONNECTION_CREATION(?,?,?,?,?,?,?,?)",
            [
                plugin_fqn, name, slug,
                connectivity_option, connection_method,
                False,
                other_environments_exist, is_production_environment,
            ],
            source="BEGIN_CONNECTION_CREATION",
            error_cls=LifecycleRejectedError,
        )
        return ConnectionInProgress.from_payload(result.unwrap(LifecycleRejectedError))

    def complete(
        self, in_progress_id: Any, network_addresses: Any,
        parameters: dict[str, Any], secrets: dict[str, Any],
    ) -> Any:
        result = call_api(
            self.session,
            f"call {self.engine}.API.COMPLETE_CONNECTION_CREATION("
            "?,PARSE_JSON(?),PARSE_JSON(?),PARSE_JSON(?))",
            [
                in_progress_id,
                json.dumps(network_addresses),
                json.dumps(parameters),
                json.dumps(secrets),
            ],
            source="COMPLETE_CONNECTION_CREATION",
            error_cls=LifecycleRejectedError,
        )
        return result.unwrap(LifecycleRejectedError)
