"""sync-connection-provisioner - 同步平台连接一键配置工具"""

__version__ = "0.1.0"
