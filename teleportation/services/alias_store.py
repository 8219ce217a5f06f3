"""
@description 别名存储服务
@responsibility 提供别名的创建/更新、召回、删除、重命名、文件夹重命名、列表和跨文件夹搜索
"""

from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Union

from loguru import logger
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from teleportation.core.database import (
    create_db_engine,
    create_session_factory,
    get_session,
    init_db,
)
from teleportation.core.errors import AliasExistsError, AliasNotFoundError, StoreError
from teleportation.models.alias_record import AliasRecord
from teleportation.schemas.alias import AliasItem, RecallResult, UpsertOutcome

_ORDERING = (AliasRecord.folder_path, AliasRecord.alias)


def _now() -> datetime:
    return datetime.now()


def _alias_exists(folder_path: str, alias: str) -> AliasExistsError:
    return AliasExistsError(
        f"Error: Alias '{alias}' under folder '{folder_path}' already exists. "
        "Use --update to modify it."
    )


class AliasStore:
    """
    别名存储

    (folder_path, alias) 唯一；每个操作使用独立会话并在返回前提交。
    领域结果（不存在、已存在）抛出可恢复异常，其余数据库错误包装为 StoreError。
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def upsert_alias(
        self, folder_path: str, alias: str, absolute_path: str, allow_update: bool
    ) -> UpsertOutcome:
        """
        创建别名，或在 allow_update 时覆盖已有别名的目标路径

        先查后写，不对并发的其他进程加锁；并发插入同一个键时由唯一约束兜底。
        更新不会重置 invocation_count。

        Returns:
            UpsertOutcome.CREATED 或 UpsertOutcome.UPDATED

        Raises:
            AliasExistsError: 别名已存在且未允许更新
        """
        now = _now()
        with get_session(self._session_factory) as session:
            try:
                record = self._find(session, folder_path, alias)

                if record is not None and not allow_update:
                    raise _alias_exists(folder_path, alias)

                if record is not None:
                    record.absolute_path = absolute_path
                    record.updated_at = now
                    session.commit()
                    logger.debug(f"别名已更新: {folder_path} {alias} -> {absolute_path}")
                    return UpsertOutcome.UPDATED

                session.add(
                    AliasRecord(
                        folder_path=folder_path,
                        alias=alias,
                        absolute_path=absolute_path,
                        created_at=now,
                        updated_at=now,
                        invocation_count=0,
                    )
                )
                session.commit()
                logger.debug(f"别名已创建: {folder_path} {alias} -> {absolute_path}")
                return UpsertOutcome.CREATED
            except IntegrityError as e:
                session.rollback()
                logger.warning(f"插入别名时违反唯一约束: {e}")
                raise _alias_exists(folder_path, alias) from e
            except SQLAlchemyError as e:
                session.rollback()
                raise StoreError(f"Error saving alias: {e}") from e

    def recall(self, folder_path: str, alias: str) -> RecallResult:
        """
        召回别名对应的路径并将调用次数加 1

        计数只是统计信息：计数失败时路径仍然返回，失败原因记录在 count_error。

        Raises:
            AliasNotFoundError: 别名不存在（此时不做任何修改）
        """
        with get_session(self._session_factory) as session:
            try:
                record = self._find(session, folder_path, alias)
            except SQLAlchemyError as e:
                raise StoreError(f"Error retrieving alias: {e}") from e

            if record is None:
                raise AliasNotFoundError(
                    f"Error: Alias '{alias}' under folder '{folder_path}' does not exist."
                )
            absolute_path = record.absolute_path

            try:
                self._increment_invocation_count(session, folder_path, alias)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                logger.warning(f"调用次数更新失败: {folder_path} {alias}: {e}")
                return RecallResult(
                    absolute_path=absolute_path,
                    count_error=f"Error updating invocation count: {e}",
                )

        return RecallResult(absolute_path=absolute_path)

    def delete_alias(self, folder_path: str, alias: str) -> None:
        """
        删除别名

        Raises:
            AliasNotFoundError: 没有删除任何行
        """
        stmt = delete(AliasRecord).where(
            AliasRecord.folder_path == folder_path, AliasRecord.alias == alias
        )
        rowcount = self._execute_write(stmt, "Error deleting alias")
        if rowcount == 0:
            raise AliasNotFoundError(
                f"Alias '{alias}' under folder '{folder_path}' not found."
            )
        logger.debug(f"别名已删除: {folder_path} {alias}")

    def rename_alias(self, folder_path: str, old_alias: str, new_alias: str) -> None:
        """
        在同一文件夹内重命名别名，不修改目标路径

        Raises:
            AliasNotFoundError: 旧别名不存在
            AliasExistsError: 新别名已被占用
        """
        stmt = (
            update(AliasRecord)
            .where(AliasRecord.folder_path == folder_path, AliasRecord.alias == old_alias)
            .values(alias=new_alias, updated_at=_now())
        )
        try:
            rowcount = self._execute_write(stmt, "Error renaming alias")
        except IntegrityError as e:
            raise AliasExistsError(
                f"Error: Alias '{new_alias}' already exists under folder '{folder_path}'."
            ) from e

        if rowcount == 0:
            raise AliasNotFoundError(
                f"Alias '{old_alias}' under folder '{folder_path}' not found."
            )
        logger.debug(f"别名已重命名: {folder_path} {old_alias} -> {new_alias}")

    def rename_folder(self, old_folder_path: str, new_folder_path: str) -> int:
        """
        批量重命名文件夹命名空间

        任意一行与目标文件夹中的别名冲突时整体回滚。

        Returns:
            受影响的别名数量

        Raises:
            AliasNotFoundError: 旧文件夹下没有别名
            AliasExistsError: 目标文件夹中已存在同名别名
        """
        stmt = (
            update(AliasRecord)
            .where(AliasRecord.folder_path == old_folder_path)
            .values(folder_path=new_folder_path, updated_at=_now())
        )
        try:
            rowcount = self._execute_write(stmt, "Error renaming folder path")
        except IntegrityError as e:
            raise AliasExistsError(
                f"Error: Folder path '{new_folder_path}' already holds an alias "
                f"from '{old_folder_path}'."
            ) from e

        if rowcount == 0:
            raise AliasNotFoundError(
                f"No aliases found under folder path '{old_folder_path}'."
            )
        logger.debug(f"文件夹已重命名: {old_folder_path} -> {new_folder_path} ({rowcount})")
        return rowcount

    def list_all(self) -> list[AliasItem]:
        """按 (folder_path, alias) 升序列出所有别名"""
        stmt = select(AliasRecord).order_by(*_ORDERING)
        return self._query(stmt, "Error listing aliases")

    def list_by_folder(self, substring: str) -> list[AliasItem]:
        """列出 folder_path 包含 substring 的别名（区分大小写，按字面匹配）"""
        # instr 不把 % 和 _ 当通配符，且区分大小写
        stmt = (
            select(AliasRecord)
            .where(func.instr(AliasRecord.folder_path, substring) > 0)
            .order_by(*_ORDERING)
        )
        return self._query(stmt, "Error listing aliases")

    def search_by_alias(self, alias: str) -> list[AliasItem]:
        """跨文件夹查找同名别名，结果为空、唯一或多个由调用方处理"""
        stmt = select(AliasRecord).where(AliasRecord.alias == alias).order_by(*_ORDERING)
        return self._query(stmt, "Error searching for alias")

    def _find(self, session: Session, folder_path: str, alias: str):
        stmt = select(AliasRecord).where(
            AliasRecord.folder_path == folder_path, AliasRecord.alias == alias
        )
        return session.execute(stmt).scalar_one_or_none()

    def _increment_invocation_count(
        self, session: Session, folder_path: str, alias: str
    ) -> None:
        session.execute(
            update(AliasRecord)
            .where(AliasRecord.folder_path == folder_path, AliasRecord.alias == alias)
            .values(invocation_count=AliasRecord.invocation_count + 1)
        )

    def _execute_write(self, stmt, error_prefix: str) -> int:
        """执行写语句并提交，返回受影响行数；IntegrityError 原样抛出"""
        with get_session(self._session_factory) as session:
            try:
                result = session.execute(stmt)
                session.commit()
                return result.rowcount
            except IntegrityError:
                session.rollback()
                raise
            except SQLAlchemyError as e:
                session.rollback()
                raise StoreError(f"{error_prefix}: {e}") from e

    def _query(self, stmt, error_prefix: str) -> list[AliasItem]:
        with get_session(self._session_factory) as session:
            try:
                records = session.execute(stmt).scalars().all()
            except SQLAlchemyError as e:
                raise StoreError(f"{error_prefix}: {e}") from e
            return [AliasItem.model_validate(record) for record in records]


@contextmanager
def open_store(db_path: Union[Path, str]) -> Iterator[AliasStore]:
    """
    打开别名存储，退出时释放数据库连接（包括异常路径）

    Args:
        db_path: 数据库文件路径
    """
    engine = create_db_engine(db_path)
    try:
        init_db(engine)
        yield AliasStore(create_session_factory(engine))
    finally:
        engine.dispose()
        logger.debug("数据库连接已释放")
