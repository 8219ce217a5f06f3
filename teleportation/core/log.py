"""
@description 日志配置
@responsibility 配置 loguru 输出到 stderr，保证 stdout 只承载渲染器输出
"""

import sys

from loguru import logger

LOG_FORMAT = "{time:HH:mm:ss} [{level}] {name}: {message}"


def setup_logging(level: str = "WARNING") -> None:
    """移除默认 sink，按配置级别输出到 stderr"""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
