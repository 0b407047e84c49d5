"""编排器步骤实现 - 7 步流水线

步骤顺序：
1. resolve_plugin - 解析插件所在数据库
2. locate_connection - 按 slug 查找已有连接
3. normalize - 规范化参数与密钥
4. begin_lifecycle - 开始编辑或开始创建，得到连接草稿
5. provision_egress - 重建外部访问集成并授权插件应用
6. resolve_addresses - 调用插件过程解析网络地址
7. finalize - 提交连接草稿

每步只调用一个外部协作方，失败即抛出，不做重试。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from provisioner.services.container import ServiceContainer
    from provisioner.services.orchestrator.models import ProvisioningReport

from provisioner.core.normalizer import normalize
from provisioner.services.orchestrator.models import SUCCESS

logger = logging.getLogger(__name__)


class ProvisioningSteps:
    """编排步骤集合"""

    def __init__(self, container: ServiceContainer) -> None:
        self.c = container

    def resolve_plugin(self, report: ProvisioningReport) -> None:
        """步骤1: 插件 FQN → 插件数据库，找不到即终止（尚无任何副作用）"""
        fqn = report.request.plugin_fqn
        report.plugin_database = self.c.engine.plugin_database(fqn)
        report.record("resolve_plugin", database=report.plugin_database)
        logger.info("[Step 1] 插件已解析: %s → %s", fqn, report.plugin_database)

    def locate_connection(self, report: ProvisioningReport) -> None:
        """步骤2: 查找已有连接，决定走编辑还是创建"""
        slug = report.request.connection_slug
        report.existing_connection_id = self.c.engine.find_connection(slug)
        report.record(
            "locate_connection", mode=report.mode,
            connection_id=report.existing_connection_id,
        )
        logger.info("[Step 2] 连接 %s: %s", slug, report.mode)

    def normalize(self, report: ProvisioningReport) -> None:
        """步骤3: 标量条目包装为 {"value": str(v)}"""
        req = report.request
        report.parameters, report.secrets = normalize(
            req.connection_parameters, req.connection_secrets,
        )
        report.record(
            "normalize",
            parameters=sorted(report.parameters), secrets=sorted(report.secrets),
        )
        logger.info(
            "[Step 3] 参数已规范化: parameters=%s secrets=%s",
            sorted(report.parameters), sorted(report.secrets),
        )

    def begin_lifecycle(self, report: ProvisioningReport) -> None:
        """步骤4: 编辑已有连接或开始创建新连接"""
        req = report.request
        if report.existing_connection_id is not None:
            draft = self.c.engine.begin_edit(
                req.connection_name, req.connection_slug,
                report.existing_connection_id,
            )
        else:
            draft = self.c.engine.begin_creation(
                plugin_fqn=req.plugin_fqn,
                name=req.connection_name,
                slug=req.connection_slug,
                connectivity_option=req.connectivity_option,
                connection_method=req.connection_method,
                other_environments_exist=req.other_environments_exist,
                is_production_environment=req.is_production_environment,
            )
        report.draft = draft
        report.record(
            "begin_lifecycle", mode=report.mode,
            in_progress_id=draft.in_progress_id,
            integration=draft.integration_name,
        )
        logger.info(
            "[Step 4] 连接草稿已创建 (%s): in_progress_id=%s",
            report.mode, draft.in_progress_id,
        )

    def provision_egress(self, report: ProvisioningReport) -> None:
        """步骤5: create-or-replace 外部访问集成并授权"""
        draft = report.draft
        self.c.egress.provision(
            report.plugin_database, draft, on_replaced=report.mark_integration_replaced,
        )
        report.record(
            "provision_egress", integration=draft.integration_name,
            network_rule=draft.network_rule_name,
            secrets=draft.other_secrets_name,
        )
        logger.info("[Step 5] 外部访问集成就绪: %s", draft.integration_name)

    def resolve_addresses(self, report: ProvisioningReport) -> None:
        """步骤6: 由插件计算需要放行的网络地址"""
        report.network_addresses = self.c.addresses.resolve(
            report.plugin_database, report.request.connection_method,
            report.parameters,
        )
        report.record("resolve_addresses")
        logger.info("[Step 6] 网络地址已解析")

    def finalize(self, report: ProvisioningReport) -> None:
        """步骤7: 提交草稿，这是参数与密钥唯一一次落盘"""
        self.c.engine.complete(
            report.draft.in_progress_id, report.network_addresses,
            report.parameters, report.secrets,
        )
        report.result = SUCCESS
        report.record("finalize", in_progress_id=report.draft.in_progress_id)
        logger.info("[Step 7] 连接 %s 已提交", report.request.connection_slug)
