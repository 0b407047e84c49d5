"""连接配置编排器 - 协调 7 步流水线

职责：
- 严格按顺序执行 7 个步骤，首个失败即终止并原样抛出
- 失败步骤记入报告
- 不做自动回滚：草稿由同步引擎回收，集成可通过重跑覆盖
"""

from __future__ import annotations

import logging

from provisioner.services.container import ServiceContainer
from provisioner.services.orchestrator.models import ConnectionRequest, ProvisioningReport
from provisioner.services.orchestrator.steps import ProvisioningSteps

logger = logging.getLogger(__name__)


class Orchestrator:
    """7 步连接配置编排器"""

    def __init__(self, container: ServiceContainer | None = None) -> None:
        self.c = container or ServiceContainer()
        self.steps = ProvisioningSteps(self.c)

    def run(self, request: ConnectionRequest) -> ProvisioningReport:
        """执行编排流程，成功时 report.result == "SUCCESS" """
        report = ProvisioningReport(request=request)
        pipeline = (
            ("resolve_plugin", self.steps.resolve_plugin),
            ("locate_connection", self.steps.locate_connection),
            ("normalize", self.steps.normalize),
            ("begin_lifecycle", self.steps.begin_lifecycle),
            ("provision_egress", self.steps.provision_egress),
            ("resolve_addresses", self.steps.resolve_addresses),
            ("finalize", self.steps.finalize),
        )
        for name, step in pipeline:
            try:
                step(report)
            except Exception as e:
                report.record(name, status="failed", error=str(e))
                logger.error("步骤 %s 失败: %s", name, e)
                if report.integration_replaced:
                    logger.warning(
                        "集成 %s 已重建，草稿 %s 未提交，将由同步引擎回收",
                        report.draft.integration_name, report.draft.in_progress_id,
                    )
                raise
        return report
