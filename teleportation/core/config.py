"""
@description 配置管理模块
@responsibility 加载可选的 config.yaml，支持环境变量覆盖，解析数据库文件路径
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from teleportation.core.errors import ConfigError

CONFIG_FILENAME = "config.yaml"
LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class Config(BaseModel):
    """全局配置"""

    config_dir: Path = Field(..., description="配置目录（数据库默认存放位置）")
    db_filename: str = Field(
        default="teleportation.sqlite3", description="数据库文件名"
    )
    db_path: Optional[Path] = Field(
        default=None, description="数据库文件路径（设置后忽略 db_filename）"
    )
    log_level: str = Field(default="WARNING", description="日志级别")
    sqlite_client: str = Field(default="sqlite3", description="--sqlite 使用的客户端命令")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"未知的日志级别: {value}")
        return level

    @property
    def database_path(self) -> Path:
        """数据库文件的实际路径"""
        if self.db_path is not None:
            return self.db_path
        return self.config_dir / self.db_filename


def get_default_config_dir() -> Path:
    """获取默认配置目录 ~/.config/teleportation"""
    if config_dir := os.environ.get("TLP_CONFIG_DIR"):
        return Path(config_dir)
    try:
        home_dir = Path.home()
    except RuntimeError as e:
        raise ConfigError(f"Error getting home directory: {e}") from e
    return home_dir / ".config" / "teleportation"


def get_config_path(config_dir: Path) -> Optional[Path]:
    """获取配置文件路径，不存在时返回 None"""
    # 显式指定的配置文件必须存在
    if config_path_str := os.environ.get("TLP_CONFIG_PATH"):
        config_path = Path(config_path_str)
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        return config_path

    config_path = config_dir / CONFIG_FILENAME
    return config_path if config_path.exists() else None


def load_config() -> Config:
    """
    加载配置

    优先级：环境变量 > config.yaml > 默认值
    """
    config_dir = get_default_config_dir()
    config_data: dict = {"config_dir": config_dir}

    config_path = get_config_path(config_dir)
    if config_path is not None:
        try:
            with open(config_path) as f:
                file_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Error reading config file {config_path}: {e}") from e
        if not isinstance(file_data, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")
        config_data.update(file_data)

    # 应用环境变量覆盖
    if db_path := os.environ.get("TLP_DB_PATH"):
        config_data["db_path"] = db_path
    if log_level := os.environ.get("TLP_LOG_LEVEL"):
        config_data["log_level"] = log_level
    if sqlite_client := os.environ.get("TLP_SQLITE_CLIENT"):
        config_data["sqlite_client"] = sqlite_client

    # 解析为 Pydantic 模型（验证数据结构）
    return Config(**config_data)
