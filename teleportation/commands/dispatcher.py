"""
@description 命令分发
@responsibility 解析调用、加载配置、打开存储、执行操作并通过渲染器输出结果，返回进程退出码
"""

import sys
from typing import Optional, TextIO

from loguru import logger
from pydantic import ValidationError

from teleportation.commands.parser import InvalidInvocation, parse_args
from teleportation.core.config import Config, load_config
from teleportation.core.errors import AliasExistsError, AliasNotFoundError, FatalError
from teleportation.core.log import setup_logging
from teleportation.schemas.alias import UpsertOutcome
from teleportation.schemas.command import Invocation, Operation
from teleportation.services.alias_store import AliasStore, open_store
from teleportation.services.renderer import Renderer, get_renderer
from teleportation.utils.helpers import format_alias_line

USAGE_LINES = (
    "Usage for storing: {cmd} <folder_path> <alias> <absolute_path> [--update] [--sourced]",
    "Usage for recalling: {cmd} <folder_path> <alias> [--sourced]",
    "Usage for searching: {cmd} <alias> [--sourced]",
    "Usage for listing all aliases: {cmd} --list [<partial_folder>] [--sourced]",
    "Usage for deleting: {cmd} --delete <folder_path> <alias> [--sourced]",
    "Usage for renaming an alias: {cmd} --rename <folder_path> <alias> <new_alias_name> [--sourced]",
    "Usage for renaming a folder: {cmd} --rename-folder <old_folder_path> <new_folder_path> [--sourced]",
    "Usage for opening SQLite: {cmd} --sqlite",
)


def print_usage(renderer: Renderer, program: str) -> None:
    for line in USAGE_LINES:
        renderer.info(line.format(cmd=program))


class CommandDispatcher:
    """将一次调用分发到存储操作，所有结果和诊断都经由渲染器输出"""

    def __init__(self, store: AliasStore, renderer: Renderer):
        self._store = store
        self._renderer = renderer

    def dispatch(self, invocation: Invocation) -> None:
        """
        执行存储相关操作

        可恢复的领域结果（不存在、已存在）在这里渲染后结束；FatalError 向上抛出。
        """
        handlers = {
            Operation.STORE: self.handle_store,
            Operation.RECALL: self.handle_recall,
            Operation.SEARCH: self.handle_search,
            Operation.LIST_ALL: self.handle_list_all,
            Operation.LIST_BY_FOLDER: self.handle_list_by_folder,
            Operation.DELETE: self.handle_delete,
            Operation.RENAME: self.handle_rename,
            Operation.RENAME_FOLDER: self.handle_rename_folder,
        }
        handler = handlers.get(invocation.operation)
        if handler is None:
            print_usage(self._renderer, invocation.program)
            return

        logger.debug(f"执行操作: {invocation.operation.value} {invocation.args}")
        try:
            handler(invocation)
        except (AliasNotFoundError, AliasExistsError) as e:
            self._renderer.error(e.message)

    def handle_store(self, invocation: Invocation) -> None:
        folder_path, alias, absolute_path = invocation.args
        outcome = self._store.upsert_alias(
            folder_path, alias, absolute_path, invocation.update
        )
        if outcome is UpsertOutcome.UPDATED:
            self._renderer.info(f"Alias '{alias}' updated.")
        else:
            self._renderer.info(f"Alias '{alias}' created.")

    def handle_recall(self, invocation: Invocation) -> None:
        folder_path, alias = invocation.args
        result = self._store.recall(folder_path, alias)
        if result.count_error:
            self._renderer.error(result.count_error)
        # 父 shell 执行 cd 完成目录切换
        self._renderer.command(f"cd {result.absolute_path}")

    def handle_search(self, invocation: Invocation) -> None:
        (alias,) = invocation.args
        matches = self._store.search_by_alias(alias)

        if not matches:
            self._renderer.info(f"Alias '{alias}' not found.")
        elif len(matches) == 1:
            self._renderer.command(f"cd {matches[0].absolute_path}")
        else:
            self._renderer.info(
                f"There are {len(matches)} aliases under different folders. "
                "Please specify the folder too:"
            )
            for item in matches:
                self._renderer.info(format_alias_line(item))

    def handle_list_all(self, invocation: Invocation) -> None:
        items = self._store.list_all()
        if not items:
            self._renderer.info("No aliases found.")
            return

        self._renderer.info(f"{len(items)} aliases found:")
        for item in items:
            self._renderer.info(format_alias_line(item))

    def handle_list_by_folder(self, invocation: Invocation) -> None:
        (partial_folder,) = invocation.args
        items = self._store.list_by_folder(partial_folder)
        if not items:
            self._renderer.info(
                f"No aliases found under the folder path '{partial_folder}'."
            )
            return

        self._renderer.info(
            f"{len(items)} aliases found under the folder path '{partial_folder}':"
        )
        for item in items:
            self._renderer.info(format_alias_line(item))

    def handle_delete(self, invocation: Invocation) -> None:
        folder_path, alias = invocation.args
        self._store.delete_alias(folder_path, alias)
        self._renderer.info(
            f"Alias '{alias}' under folder '{folder_path}' deleted successfully."
        )

    def handle_rename(self, invocation: Invocation) -> None:
        folder_path, old_alias, new_alias = invocation.args
        self._store.rename_alias(folder_path, old_alias, new_alias)
        self._renderer.info(
            f"Alias '{old_alias}' under folder '{folder_path}' renamed to '{new_alias}'."
        )

    def handle_rename_folder(self, invocation: Invocation) -> None:
        old_folder_path, new_folder_path = invocation.args
        count = self._store.rename_folder(old_folder_path, new_folder_path)
        self._renderer.info(
            f"Folder path '{old_folder_path}' renamed to '{new_folder_path}' "
            f"for {count} aliases."
        )


def handle_open_sqlite(config: Config, renderer: Renderer, sourced: bool) -> None:
    """sourced 模式输出打开数据库的命令，交互模式只给出提示"""
    db_path = config.database_path
    if sourced:
        renderer.command(f"{config.sqlite_client} {db_path}")
    else:
        renderer.info(
            f'Use the "{config.sqlite_client}" command to manually edit the entries '
            f"at the SQLite database at '{db_path}'"
        )


def run(
    argv: list[str],
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """
    执行一次调用

    Args:
        argv: 完整参数列表（含程序名）
        out: 标准输出（测试时可替换）
        err: 标准错误（测试时可替换）

    Returns:
        进程退出码：致命错误为 1，其余（包括可恢复的领域结果）为 0
    """
    try:
        invocation = parse_args(argv)
    except InvalidInvocation as e:
        renderer = get_renderer(e.sourced, out, err)
        renderer.fatal(e.message)
        print_usage(renderer, e.program)
        return e.exit_code

    renderer = get_renderer(invocation.sourced, out, err)

    if invocation.operation is Operation.USAGE:
        print_usage(renderer, invocation.program)
        return 0

    try:
        try:
            config = load_config()
        except ValidationError as e:
            raise FatalError(f"Invalid configuration: {e}") from e
        setup_logging(config.log_level)

        if invocation.operation is Operation.OPEN_SQLITE:
            handle_open_sqlite(config, renderer, invocation.sourced)
            return 0

        with open_store(config.database_path) as store:
            CommandDispatcher(store, renderer).dispatch(invocation)
    except FatalError as e:
        renderer.fatal(e.message)
        return e.exit_code

    return 0


def main() -> None:
    """控制台入口"""
    sys.exit(run(sys.argv))
