"""depfetch 命令行接口

各子模块注册自己的命令到 main group。
"""

import os

import click

from depfetch import __version__
from depfetch.utils.logger import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default="", help="配置文件路径")
def main(config_path: str) -> None:
    """depfetch - Git 来源依赖包解析工具"""
    setup_logging(
        level=os.getenv("DEPFETCH_LOG_LEVEL", "INFO"),
        json_output=os.getenv("DEPFETCH_LOG_JSON", "") == "1",
    )
    if config_path:
        from depfetch.core.config import init_config
        init_config(config_path)


from depfetch.cli.cmd_fetch import register as _reg_fetch  # noqa: E402

_reg_fetch(main)
