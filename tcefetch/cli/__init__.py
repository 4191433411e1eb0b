"""tcefetch 命令行接口

各命令模块注册自己的命令到 main group。
"""

import os

import click

from tcefetch import __version__
from tcefetch.utils.logger import setup_logging


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """tcefetch - 拉取 Tiny Core Linux 扩展及其依赖，供离线安装"""
    setup_logging(
        level=os.getenv("TCEFETCH_LOG_LEVEL", "WARNING"),
        json_output=os.getenv("TCEFETCH_LOG_JSON", "") == "1",
    )


from tcefetch.cli.cmd_fetch import register as _reg_fetch  # noqa: E402

_reg_fetch(main)
