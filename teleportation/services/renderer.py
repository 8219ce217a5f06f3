"""
@description 输出渲染器
@responsibility 按调用模式渲染信息、错误和可执行命令：交互模式输出纯文本，sourced 模式输出供父 shell 执行的行
"""

import sys
from abc import ABC, abstractmethod
from typing import Optional, TextIO

from teleportation.utils.helpers import escape_for_shell


class Renderer(ABC):
    """渲染器基类，每次调用只选择一次策略"""

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self._out = out if out is not None else sys.stdout
        self._err = err if err is not None else sys.stderr

    @abstractmethod
    def info(self, message: str) -> None:
        """信息文本"""

    @abstractmethod
    def error(self, message: str) -> None:
        """可恢复错误"""

    @abstractmethod
    def fatal(self, message: str) -> None:
        """致命错误（调用方随后以非零状态退出）"""

    def command(self, command: str) -> None:
        """可执行命令，两种模式下都原样输出"""
        self._write(self._out, command)

    @staticmethod
    def _write(stream: TextIO, line: str) -> None:
        stream.write(line + "\n")
        stream.flush()


class PlainRenderer(Renderer):
    """交互模式：直接输出人类可读文本"""

    def info(self, message: str) -> None:
        self._write(self._out, message)

    def error(self, message: str) -> None:
        self._write(self._out, message)

    def fatal(self, message: str) -> None:
        self._write(self._err, message)


class SourcedRenderer(Renderer):
    """sourced 模式：文本包装为转义后的 echo 语句"""

    def info(self, message: str) -> None:
        self._write_echo(message)

    def error(self, message: str) -> None:
        self._write_echo(message)

    def fatal(self, message: str) -> None:
        self._write_echo(message)

    def _write_echo(self, message: str) -> None:
        # 多行文本逐行 echo，换行不能进入父 shell 成为新命令
        for line in message.splitlines() or [""]:
            self._write(self._out, self.echo(line))

    @staticmethod
    def echo(message: str) -> str:
        return f"echo {escape_for_shell(message)}"


def get_renderer(
    sourced: bool, out: Optional[TextIO] = None, err: Optional[TextIO] = None
) -> Renderer:
    """根据调用模式创建渲染器"""
    if sourced:
        return SourcedRenderer(out, err)
    return PlainRenderer(out, err)
