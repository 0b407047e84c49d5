"""测试共享 fixture: 内存版同步平台

FakePlatform 同时扮演插件目录、连接生命周期接口、插件地址过程
以及外部访问集成 DDL，满足 SqlSession 协议：

  session.sql(query, params).collect()
        │
        ├── select ... DATA_VIEWS.PLUGIN       → 插件数据库
        ├── select ... DATA_VIEWS.CONNECTION   → 连接 ID
        ├── call ...BEGIN_CONNECTION_*         → 连接草稿
        ├── CREATE OR REPLACE ... INTEGRATION  → integrations[name]
        ├── GRANT USAGE ...                    → grants
        ├── call IDENTIFIER(?)(...)            → 网络地址
        └── call ...COMPLETE_CONNECTION_*      → connections[slug]
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

import pytest

import provisioner.core.config as cfgmod

_RULES = re.compile(
    r"ALLOWED_NETWORK_RULES = \((?P<rule>[^)]*)\)\s*"
    r"ALLOWED_AUTHENTICATION_SECRETS = \((?P<secrets>[^)]*)\)",
)


class FakeRow(dict):
    """可按列名或位置取值的行"""

    def __getitem__(self, key: Any) -> Any:
        if isinstance(key, int):
            return list(self.values())[key]
        return super().__getitem__(key)


class FakeStatement:
    def __init__(self, rows: list[FakeRow]) -> None:
        self._rows = rows

    def collect(self) -> list[FakeRow]:
        return self._rows


def _api(success: bool, data: Any = None, error: str = "") -> list[FakeRow]:
    return [FakeRow(result=json.dumps({"success": success, "error": error, "data": data}))]


@dataclass
class FakePlatform:
    plugins: dict[str, str] = field(default_factory=dict)
    connections: dict[str, dict[str, Any]] = field(default_factory=dict)
    integrations: dict[str, dict[str, str]] = field(default_factory=dict)
    grants: list[tuple[str, str]] = field(default_factory=list)
    drafts: dict[int, dict[str, Any]] = field(default_factory=dict)
    addresses: list[dict[str, Any]] = field(
        default_factory=lambda: [{"host": "h", "port": 1433}],
    )
    failing_methods: set[str] = field(default_factory=set)
    fail_on: set[str] = field(default_factory=set)
    statements: list[tuple[str, list]] = field(default_factory=list)
    closed: bool = False

    def sql(self, query: str, params: list | None = None) -> FakeStatement:
        params = list(params or [])
        self.statements.append((query, params))
        return FakeStatement(self._dispatch(query, params))

    def close(self) -> None:
        self.closed = True

    def calls(self, marker: str) -> list[list]:
        return [p for q, p in self.statements if marker in q]

    # ---- 分发 ----

    def _dispatch(self, query: str, params: list) -> list[FakeRow]:
        if "DATA_VIEWS.PLUGIN" in query:
            if "lookup" in self.fail_on:
                raise RuntimeError("warehouse suspended")
            db = self.plugins.get(params[0])
            return [FakeRow(DATABASE=db)] if db else []
        if "DATA_VIEWS.CONNECTION" in query:
            conn = self.connections.get(params[0])
            return [FakeRow(CONNECTION_ID=conn["id"])] if conn else []
        if "BEGIN_CONNECTION_EDIT" in query:
            if "begin_edit" in self.fail_on:
                return _api(False, error="connection is being edited elsewhere")
            name, slug, conn_id = params[:3]
            return _api(True, self._new_draft(slug, conn_id, name))
        if "BEGIN_CONNECTION_CREATION" in query:
            if "begin_creation" in self.fail_on:
                return _api(False, error="invalid connectivity option")
            _fqn, name, slug = params[:3]
            return _api(True, self._new_draft(slug, None, name))
        if "EXTERNAL ACCESS INTEGRATION" in query:
            if "integration" in self.fail_on:
                raise RuntimeError("insufficient privileges")
            m = _RULES.search(query)
            self.integrations[params[0]] = {
                "rule": m.group("rule"), "secrets": m.group("secrets"),
            }
            return [FakeRow(status="ok")]
        if query.startswith("GRANT USAGE"):
            if "grant" in self.fail_on:
                raise RuntimeError("grant denied")
            self.grants.append((params[0], params[1]))
            return [FakeRow(status="ok")]
        if query.startswith("call IDENTIFIER"):
            if "addresses" in self.fail_on:
                raise RuntimeError("procedure NETWORK_ADDRESSES does not exist")
            if params[1] in self.failing_methods:
                return _api(False, error=f"unsupported method {params[1]}")
            return _api(True, self.addresses)
        if "COMPLETE_CONNECTION_CREATION" in query:
            if "complete" in self.fail_on:
                return _api(False, error="connection test failed")
            draft = self.drafts.pop(params[0])
            self.connections[draft["slug"]] = {
                "id": draft["id"],
                "name": draft["name"],
                "addresses": json.loads(params[1]),
                "parameters": json.loads(params[2]),
                "secrets": json.loads(params[3]),
            }
            return _api(True, {"CONNECTION_ID": draft["id"]})
        raise AssertionError(f"unexpected statement: {query}")

    def _new_draft(self, slug: str, conn_id: Any, name: str) -> dict[str, Any]:
        n = len(self.statements)
        base = slug.upper().replace("-", "_")
        self.drafts[n] = {"slug": slug, "id": conn_id or f"conn-{n}", "name": name}
        return {
            "NETWORK_RULE_NAME": f"{base}_RULE_{n}",
            "OTHER_SECRETS_NAME": f"{base}_SECRETS_{n}",
            "EXTERNAL_ACCESS_INTEGRATION_NAME": f"{base}_EAI",
            "CONNECTION_IN_PROGRESS_ID": n,
        }


@pytest.fixture()
def platform() -> FakePlatform:
    return FakePlatform(plugins={"MONITORIAL__MSSQL": "MDB"})


@pytest.fixture(autouse=True)
def _default_config(monkeypatch: pytest.MonkeyPatch):
    """每个测试使用独立的默认配置"""
    monkeypatch.setattr(cfgmod, "_current", cfgmod.Config())
    yield
