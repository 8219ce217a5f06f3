"""
@description 数据库模型的单元测试
@responsibility 验证 AliasRecord 表创建、CRUD 操作和 (folder_path, alias) 唯一约束
"""

import pytest
from sqlalchemy import inspect, select
from sqlalchemy.exc import IntegrityError

from teleportation.core.database import (
    Base,
    create_db_engine,
    create_session_factory,
    get_session,
    init_db,
)
from teleportation.models.alias_record import AliasRecord


@pytest.fixture
def engine(tmp_path):
    """创建测试数据库引擎（临时目录中的 SQLite 文件）"""
    engine = create_db_engine(tmp_path / "nested" / "test.sqlite3")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


def test_create_tables(engine, tmp_path):
    """测试数据库目录和表创建"""
    assert (tmp_path / "nested").is_dir()
    assert "aliases" in inspect(engine).get_table_names()


def test_init_db_is_idempotent(engine):
    """重复初始化不报错"""
    init_db(engine)
    init_db(engine)
    assert "aliases" in Base.metadata.tables


def test_memory_database():
    """内存数据库同样可以初始化"""
    engine = create_db_engine(":memory:")
    init_db(engine)
    assert "aliases" in inspect(engine).get_table_names()
    engine.dispose()


def test_alias_record_crud(session_factory):
    """测试 AliasRecord 的 CRUD 操作"""
    with get_session(session_factory) as session:
        record = AliasRecord(
            folder_path="code/projects",
            alias="myapp",
            absolute_path="/home/user/code/myapp",
        )
        session.add(record)
        session.commit()

        stmt = select(AliasRecord).where(AliasRecord.alias == "myapp")
        fetched = session.execute(stmt).scalar_one_or_none()

        assert fetched is not None
        assert fetched.folder_path == "code/projects"
        assert fetched.absolute_path == "/home/user/code/myapp"
        assert fetched.invocation_count == 0
        assert fetched.created_at is not None
        assert fetched.updated_at is not None

        fetched.absolute_path = "/tmp/myapp"
        session.commit()

        updated = session.execute(stmt).scalar_one()
        assert updated.absolute_path == "/tmp/myapp"

        session.delete(updated)
        session.commit()

        assert session.execute(stmt).scalar_one_or_none() is None


def test_unique_folder_alias(session_factory):
    """同一文件夹下的别名不能重复，不同文件夹可以"""
    with get_session(session_factory) as session:
        session.add(AliasRecord(folder_path="a", alias="x", absolute_path="/1"))
        session.add(AliasRecord(folder_path="b", alias="x", absolute_path="/2"))
        session.commit()

        session.add(AliasRecord(folder_path="a", alias="x", absolute_path="/3"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

        rows = session.execute(select(AliasRecord)).scalars().all()
        assert len(rows) == 2
