"""
@description 别名存储的返回模型
@responsibility 定义存储层对外返回的数据结构，与 ORM 对象解耦
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AliasItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    folder_path: str = Field(..., description="文件夹命名空间")
    alias: str = Field(..., description="别名")
    absolute_path: str = Field(..., description="目标路径")
    created_at: datetime = Field(..., description="创建时间")
    updated_at: datetime = Field(..., description="更新时间")
    invocation_count: int = Field(..., ge=0, description="调用次数")


class UpsertOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"


class RecallResult(BaseModel):
    """召回结果：路径总是有效，计数失败只作为附加信息"""

    absolute_path: str = Field(..., description="目标路径")
    count_error: Optional[str] = Field(None, description="调用次数更新失败的原因")
