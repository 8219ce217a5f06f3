"""
@description 命令行解析
@responsibility 将 argv 按标志前缀和位置参数个数映射到唯一的操作
"""

from teleportation.core.errors import UsageError
from teleportation.schemas.command import Invocation, Operation

FLAGS = (
    "--update",
    "--list",
    "--delete",
    "--rename",
    "--rename-folder",
    "--sqlite",
    "--sourced",
)


class InvalidInvocation(UsageError):
    """调用格式错误，携带已经解析出的 sourced 标志，以便按正确模式输出诊断"""

    def __init__(self, message: str, program: str, sourced: bool):
        super().__init__(message)
        self.program = program
        self.sourced = sourced


def parse_args(argv: list[str]) -> Invocation:
    """
    解析命令行参数

    标志必须以连续前缀出现（也接受末尾连续的已知标志）；
    未知的前缀标志是致命错误，已知标志但参数个数不符则回落到 Usage。

    Args:
        argv: 完整参数列表，argv[0] 为程序名

    Raises:
        InvalidInvocation: 没有参数、出现未知标志或参数不是合法的 UTF-8
    """
    program = argv[0] if argv else "tlp2"
    args = list(argv[1:])
    _check_encoding(args, program)
    flags: set[str] = set()

    while args and args[0].startswith("--"):
        if args[0] not in FLAGS:
            raise InvalidInvocation(
                "Invalid flag provided. Please check the instructions.",
                program,
                "--sourced" in flags or "--sourced" in args,
            )
        flags.add(args.pop(0))

    # 文档中的写法把 --update / --sourced 放在末尾
    while args and args[-1] in FLAGS:
        flags.add(args.pop())

    sourced = "--sourced" in flags
    if not args and not flags:
        raise InvalidInvocation(
            "Invalid usage. Please check the instructions.", program, sourced
        )

    operation = _select_operation(flags, len(args))
    return Invocation(
        operation=operation,
        args=args,
        program=program,
        update="--update" in flags,
        sourced=sourced,
    )


def _check_encoding(args: list[str], program: str) -> None:
    """非 UTF-8 参数（surrogateescape 解码的字节）无法写入数据库，也无法原样输出"""
    for position, arg in enumerate(args, start=1):
        try:
            arg.encode("utf-8")
        except UnicodeEncodeError:
            raise InvalidInvocation(
                f"Invalid argument: argument {position} is not valid UTF-8.",
                program,
                "--sourced" in args,
            ) from None


def _select_operation(flags: set[str], count: int) -> Operation:
    if "--sqlite" in flags:
        return Operation.OPEN_SQLITE

    if "--list" in flags:
        if count == 0:
            return Operation.LIST_ALL
        if count == 1:
            return Operation.LIST_BY_FOLDER
        return Operation.USAGE

    if "--delete" in flags:
        return Operation.DELETE if count == 2 else Operation.USAGE

    if "--rename" in flags:
        return Operation.RENAME if count == 3 else Operation.USAGE

    if "--rename-folder" in flags:
        return Operation.RENAME_FOLDER if count == 2 else Operation.USAGE

    if count == 1:
        return Operation.SEARCH
    if count == 2:
        return Operation.RECALL
    if count == 3:
        return Operation.STORE
    return Operation.USAGE
