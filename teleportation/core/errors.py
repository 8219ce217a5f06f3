"""
@description 异常定义
@responsibility 区分可恢复的领域结果（别名不存在、别名已存在）与致命错误（环境、配置、存储故障）
"""


class TeleportError(Exception):
    """所有异常的基类"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AliasNotFoundError(TeleportError):
    """目标别名（或文件夹）不存在，可恢复"""


class AliasExistsError(TeleportError):
    """违反 (folder_path, alias) 唯一约束，可恢复"""


class FatalError(TeleportError):
    """致命错误：输出诊断后以非零状态退出"""

    exit_code = 1


class UsageError(FatalError):
    """命令行调用格式错误（无参数或未知参数）"""


class ConfigError(FatalError):
    """配置加载失败"""


class StoreError(FatalError):
    """数据库打开、建表或查询失败"""
