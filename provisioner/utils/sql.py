"""SQL 调用辅助: 标识符校验与单行 JSON 结果读取

DDL 中的 ALLOWED_NETWORK_RULES 等子句无法绑定参数，只能拼接，
因此拼接前必须校验每段标识符。
"""

from __future__ import annotations

import re
from typing import Any, Sequence

from provisioner.core.exceptions import ProvisionerError, ValidationError
from provisioner.core.models import ApiResult
from provisioner.core.protocols import SqlSession

_UNQUOTED = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*$")
_QUOTED = re.compile(r'^"(?:[^"]|"")+"$')


def check_identifier(name: Any, label: str = "标识符") -> str:
    """校验单段 SQL 标识符，合法则原样返回"""
    if not isinstance(name, str) or not (_UNQUOTED.match(name) or _QUOTED.match(name)):
        raise ValidationError(f"非法的{label}: {name!r}")
    return name


def qualified_name(*parts: Any) -> str:
    """逐段校验后以 "." 拼接为全限定名"""
    return ".".join(check_identifier(p) for p in parts)


def collect_rows(
    session: SqlSession, query: str, params: Sequence[Any] | None = None, *,
    error_cls: type[ProvisionerError], action: str,
) -> list[Any]:
    """执行语句；会话层异常统一包装为 error_cls，原异常挂在 __cause__ 上"""
    try:
        return session.sql(query, params=list(params or [])).collect()
    except ProvisionerError:
        raise
    except Exception as e:
        raise error_cls(f"{action}失败: {e}") from e


def call_api(
    session: SqlSession, query: str, params: Sequence[Any], source: str, *,
    error_cls: type[ProvisionerError],
) -> ApiResult:
    """执行 call 语句，把首行首列解析为 ApiResult"""
    rows = collect_rows(session, query, params, error_cls=error_cls, action=f"调用 {source} ")
    if not rows:
        raise ValidationError(f"{source} 没有返回结果")
    return ApiResult.from_json(rows[0][0], source=source)
