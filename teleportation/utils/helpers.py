"""
@description 通用工具函数
@responsibility 提供 shell 转义和别名记录的文本格式化
"""

import shlex

from teleportation.schemas.alias import AliasItem


def escape_for_shell(text: str) -> str:
    """
    把文本整体加单引号转义为一个 shell 参数，父 shell 求值后原样得到 text

    单引号内所有字符（反斜杠、反引号、$、#、通配符、空白）都不再有特殊含义。

    Examples:
        >>> escape_for_shell("plain")
        'plain'

        >>> print(escape_for_shell("a #b"))
        'a #b'

        >>> print(escape_for_shell("it's"))
        'it'"'"'s'
    """
    return shlex.quote(text)


def format_alias_line(item: AliasItem) -> str:
    """格式化单条记录：<alias> <folder_path> <absolute_path>"""
    return f"{item.alias} {item.folder_path} {item.absolute_path}"
