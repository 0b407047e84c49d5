"""连接配置编排器

拆分说明：
- models.py: 请求与报告数据模型
- steps.py: 7 个步骤实现
- orchestrator.py: 协调器
"""

from provisioner.services.orchestrator.models import ConnectionRequest, ProvisioningReport
from provisioner.services.orchestrator.orchestrator import Orchestrator
from provisioner.services.orchestrator.steps import ProvisioningSteps

__all__ = [
    "ConnectionRequest",
    "ProvisioningReport",
    "Orchestrator",
    "ProvisioningSteps",
]
