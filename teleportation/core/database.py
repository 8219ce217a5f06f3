"""
@description 数据库连接管理
@responsibility 提供 SQLAlchemy 引擎、会话管理和幂等的建表步骤
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from teleportation.core.errors import StoreError

MEMORY_DATABASE = ":memory:"

Base = declarative_base()


def create_db_engine(db_path: Union[Path, str]) -> Engine:
    """
    创建 SQLite 引擎

    Args:
        db_path: 数据库文件路径，":memory:" 表示内存数据库

    Returns:
        SQLAlchemy 引擎
    """
    if str(db_path) == MEMORY_DATABASE:
        return create_engine("sqlite://", echo=False)

    db_path = Path(db_path)
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StoreError(f"Error creating config directory: {e}") from e

    return create_engine(f"sqlite:///{db_path}", echo=False)


def init_db(engine: Engine) -> None:
    """
    初始化数据库，创建所有表（已存在时跳过）
    """
    # 导入所有模型，确保在 Base.metadata 中注册
    from teleportation.models.alias_record import AliasRecord

    try:
        Base.metadata.create_all(engine)
    except SQLAlchemyError as e:
        raise StoreError(f"Error creating table: {e}") from e
    logger.debug(f"数据库初始化完成: {engine.url}")


def create_session_factory(engine: Engine) -> sessionmaker:
    """创建会话工厂"""
    return sessionmaker(engine, class_=Session, expire_on_commit=False)


@contextmanager
def get_session(session_factory: sessionmaker) -> Iterator[Session]:
    """
    会话上下文管理器
    """
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
