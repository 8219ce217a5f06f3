"""
@description 命令行入口
@responsibility 执行一次 tlp2 调用并以对应状态码退出
"""

from teleportation.commands.dispatcher import main

if __name__ == "__main__":
    main()
