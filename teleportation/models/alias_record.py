"""
@description 别名记录模型
@responsibility 记录 (folder_path, alias) 到绝对路径的映射及调用次数
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, Text, UniqueConstraint

from teleportation.core.database import Base


class AliasRecord(Base):
    __tablename__ = "aliases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # 调用方定义的命名空间，通常是 shell 的工作目录，但不要求是真实路径
    folder_path = Column(Text, nullable=False)
    alias = Column(Text, nullable=False)
    # 原样保存，不做规范化
    absolute_path = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)
    invocation_count = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("folder_path", "alias", name="uq_folder_alias"),
    )
