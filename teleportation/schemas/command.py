"""
@description 命令行调用模型
@responsibility 定义解析后的调用：操作类型、位置参数和模式标志
"""

from enum import Enum

from pydantic import BaseModel, Field


class Operation(str, Enum):
    STORE = "store"
    RECALL = "recall"
    SEARCH = "search"
    LIST_ALL = "list_all"
    LIST_BY_FOLDER = "list_by_folder"
    DELETE = "delete"
    RENAME = "rename"
    RENAME_FOLDER = "rename_folder"
    OPEN_SQLITE = "open_sqlite"
    USAGE = "usage"


class Invocation(BaseModel):
    operation: Operation = Field(..., description="选中的操作")
    args: list[str] = Field(default_factory=list, description="位置参数（不含程序名）")
    program: str = Field(..., description="程序名（argv[0]）")
    update: bool = Field(False, description="--update：允许覆盖已有别名")
    sourced: bool = Field(False, description="--sourced：输出供父 shell 执行")
