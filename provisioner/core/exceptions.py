"""统一异常体系

所有业务异常继承 ProvisionerError，每类带 code 属性。
CLI 层据此输出 "[CODE] message" 形式的友好提示；
外部接口返回的 error 文本原样作为异常消息，不做改写。
"""

from __future__ import annotations


class ProvisionerError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(ProvisionerError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(ProvisionerError):
    """输入数据或接口返回结构校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class NotFoundError(ProvisionerError):
    """插件 FQN 无法解析"""

    code = "NOT_FOUND"


class LifecycleRejectedError(ProvisionerError):
    """连接生命周期接口（开始编辑/开始创建/完成创建）返回失败"""

    code = "LIFECYCLE_REJECTED"


class ProvisioningError(ProvisionerError):
    """外部访问集成创建或授权失败"""

    code = "PROVISIONING_FAILED"


class AddressResolutionError(ProvisionerError):
    """插件网络地址解析过程返回失败"""

    code = "ADDRESS_RESOLUTION_FAILED"
