"""核心数据模型

连接配置流程中流转的数据类集中定义于此：
- 参数/密钥条目的标签联合（Scalar / Attributed）
- 外部接口统一返回结构 ApiResult
- 生命周期接口返回的连接草稿 ConnectionInProgress
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from provisioner.core.exceptions import ProvisionerError, ValidationError

# 标量条目被包装后使用的规范键
VALUE_KEY = "value"

# 本流程支持的连通方式（ngrok 与 OAuth 类连接方式不支持）
CONNECTIVITY_OPTIONS = ("direct", "privatelink")


# =========================================================================
# 参数/密钥条目
# =========================================================================


@dataclass(frozen=True)
class Scalar:
    """调用方直接给出的裸值，统一以字符串形式保存"""

    value: str

    def to_attributed(self) -> dict[str, Any]:
        return {VALUE_KEY: self.value}


@dataclass(frozen=True)
class Attributed:
    """已是带属性记录的条目，保持原样"""

    attrs: dict[str, Any]

    def to_attributed(self) -> dict[str, Any]:
        return self.attrs


Entry = Scalar | Attributed


def to_entry(raw: Any) -> Entry:
    """在边界处把任意输入值归为 Scalar 或 Attributed

    字典视为已带属性的记录；其余一律按 str() 转成标量，从不拒绝。
    布尔值保持 Python 的 "True"/"False" 字符串形式。
    """
    if isinstance(raw, Attributed | Scalar):
        return raw
    if isinstance(raw, dict):
        return Attributed(raw)
    return Scalar(str(raw))


# =========================================================================
# 外部接口返回结构
# =========================================================================


@dataclass
class ApiResult:
    """同步引擎 / 插件过程统一的 {success, error, data} 返回"""

    success: bool
    error: str = ""
    data: Any = None

    @classmethod
    def from_json(cls, raw: Any, source: str = "") -> ApiResult:
        """解析过程返回的 JSON 文本（或已解析的字典）"""
        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError as e:
                raise ValidationError(f"{source} 返回的不是合法 JSON: {e}") from e
        if not isinstance(raw, dict) or "success" not in raw:
            raise ValidationError(f"{source} 返回结构缺少 success 字段")
        return cls(
            success=bool(raw["success"]),
            error=str(raw.get("error") or ""),
            data=raw.get("data"),
        )

    def unwrap(self, error_cls: type[ProvisionerError]) -> Any:
        """成功时返回 data，失败时以 error 原文抛出 error_cls"""
        if not self.success:
            raise error_cls(self.error)
        return self.data


# =========================================================================
# 连接草稿
# =========================================================================


@dataclass(frozen=True)
class ConnectionInProgress:
    """开始创建/编辑后得到的连接草稿，持有待用的资源名"""

    network_rule_name: str
    other_secrets_name: str
    integration_name: str
    in_progress_id: Any
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: Any) -> ConnectionInProgress:
        if not isinstance(payload, dict):
            raise ValidationError("连接草稿不是字典结构")
        required = (
            "NETWORK_RULE_NAME", "OTHER_SECRETS_NAME",
            "EXTERNAL_ACCESS_INTEGRATION_NAME", "CONNECTION_IN_PROGRESS_ID",
        )
        missing = [k for k in required if k not in payload]
        if missing:
            raise ValidationError("连接草稿缺少字段", details=missing)
        return cls(
            network_rule_name=payload["NETWORK_RULE_NAME"],
            other_secrets_name=payload["OTHER_SECRETS_NAME"],
            integration_name=payload["EXTERNAL_ACCESS_INTEGRATION_NAME"],
            in_progress_id=payload["CONNECTION_IN_PROGRESS_ID"],
            raw=payload,
        )
