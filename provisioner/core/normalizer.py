"""参数/密钥规范化

接受简化写法 {"server_port": 1433}，输出生命周期接口要求的
带属性形式 {"server_port": {"value": "1433"}}。已是字典的条目原样保留。
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from provisioner.core.models import to_entry


def normalize_entries(entries: Mapping[str, Any] | None) -> dict[str, dict[str, Any]]:
    """返回新字典，不修改入参；键名与顺序保持不变"""
    if not entries:
        return {}
    return {key: to_entry(value).to_attributed() for key, value in entries.items()}


def normalize(
    parameters: Mapping[str, Any] | None,
    secrets: Mapping[str, Any] | None,
) -> tuple[dict[str, dict[str, Any]], dict[str, dict[str, Any]]]:
    """同时规范化参数与密钥"""
    return normalize_entries(parameters), normalize_entries(secrets)
