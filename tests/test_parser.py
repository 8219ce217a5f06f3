"""
@description 命令行解析测试
@responsibility 验证参数个数与标志组合到操作的映射
"""

import os

import pytest

from teleportation.commands.parser import InvalidInvocation, parse_args
from teleportation.schemas.command import Operation


class TestPositionalShapes:
    """无标志时按位置参数个数选择操作"""

    @pytest.mark.parametrize(
        "argv,operation",
        [
            (["tlp2", "myapp"], Operation.SEARCH),
            (["tlp2", "code", "myapp"], Operation.RECALL),
            (["tlp2", "code", "myapp", "/home/user/myapp"], Operation.STORE),
            (["tlp2", "a", "b", "c", "d"], Operation.USAGE),
        ],
    )
    def test_shape(self, argv, operation):
        invocation = parse_args(argv)
        assert invocation.operation is operation
        assert invocation.args == argv[1:]
        assert invocation.program == "tlp2"
        assert invocation.sourced is False
        assert invocation.update is False


class TestFlags:
    """前缀标志"""

    @pytest.mark.parametrize(
        "argv,operation",
        [
            (["tlp2", "--list"], Operation.LIST_ALL),
            (["tlp2", "--list", "code"], Operation.LIST_BY_FOLDER),
            (["tlp2", "--list", "a", "b"], Operation.USAGE),
            (["tlp2", "--delete", "code", "myapp"], Operation.DELETE),
            (["tlp2", "--delete", "myapp"], Operation.USAGE),
            (["tlp2", "--rename", "code", "old", "new"], Operation.RENAME),
            (["tlp2", "--rename", "code", "old"], Operation.USAGE),
            (["tlp2", "--rename-folder", "old", "new"], Operation.RENAME_FOLDER),
            (["tlp2", "--rename-folder", "old"], Operation.USAGE),
            (["tlp2", "--sqlite"], Operation.OPEN_SQLITE),
            (["tlp2", "--sourced"], Operation.USAGE),
        ],
    )
    def test_flag_selects_operation(self, argv, operation):
        assert parse_args(argv).operation is operation

    def test_combined_prefix_run(self):
        invocation = parse_args(["tlp2", "--sourced", "--update", "f", "a", "/p"])
        assert invocation.operation is Operation.STORE
        assert invocation.sourced is True
        assert invocation.update is True
        assert invocation.args == ["f", "a", "/p"]

    def test_trailing_flags(self):
        invocation = parse_args(["tlp2", "f", "a", "/p", "--update", "--sourced"])
        assert invocation.operation is Operation.STORE
        assert invocation.update is True
        assert invocation.sourced is True

    def test_sqlite_takes_precedence(self):
        assert parse_args(["tlp2", "--list", "--sqlite"]).operation is Operation.OPEN_SQLITE

    def test_list_takes_precedence_over_delete(self):
        assert parse_args(["tlp2", "--delete", "--list"]).operation is Operation.LIST_ALL


class TestInvalidInvocation:
    """致命的调用错误"""

    def test_no_arguments(self):
        with pytest.raises(InvalidInvocation) as exc_info:
            parse_args(["tlp2"])
        assert exc_info.value.message == "Invalid usage. Please check the instructions."
        assert exc_info.value.exit_code == 1

    def test_unknown_flag(self):
        with pytest.raises(InvalidInvocation) as exc_info:
            parse_args(["tlp2", "--sourced", "--bogus", "a"])
        assert exc_info.value.message == (
            "Invalid flag provided. Please check the instructions."
        )
        assert exc_info.value.sourced is True
        assert exc_info.value.program == "tlp2"

    def test_unknown_trailing_flag_is_positional(self):
        invocation = parse_args(["tlp2", "code", "--bogus"])
        assert invocation.operation is Operation.RECALL
        assert invocation.args == ["code", "--bogus"]


def test_non_utf8_argument():
    """surrogateescape 解码的字节参数被拒绝"""
    with pytest.raises(InvalidInvocation) as exc_info:
        parse_args(["tlp2", "--sourced", "f", "a", os.fsdecode(b"/tmp/\xff")])

    assert exc_info.value.message == "Invalid argument: argument 4 is not valid UTF-8."
    assert exc_info.value.sourced is True
