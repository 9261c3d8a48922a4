"""GCDI services 命令实现"""

import sys
from pathlib import Path
from typing import Optional

import click

from gcdi.core.bootstrap import build_container
from gcdi.core.container import Container
from gcdi.core.logger import LoggerConfig
from gcdi.cli.utils import FormatterConfig, OutputFormatter


class ServicesCommand:
    """列出注册信息"""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        logger_config: Optional[LoggerConfig] = None,
        container: Optional[Container] = None,
    ):
        self.container = container or build_container(config_path, logger_config)

    def execute(self, formatter: OutputFormatter, show_types: bool = False) -> None:
        """输出服务表，show_types 为 True 时附带类型映射表"""
        description = self.container.describe()

        rows = [
            [
                name,
                info["lifecycle"],
                info["tier"],
                "yes" if info["instantiated"] else "no",
                ", ".join(info["parameters"]) or "-",
            ]
            for name, info in sorted(description["services"].items())
        ]
        click.echo(formatter.format_table(["SERVICE", "LIFECYCLE", "TIER", "INSTANTIATED", "PARAMETERS"], rows))

        if show_types:
            click.echo()
            type_rows = [[t, s] for t, s in sorted(description["type_aliases"].items())]
            click.echo(formatter.format_table(["TYPE", "SERVICE"], type_rows))


@click.command()
@click.option('--types', 'show_types', is_flag=True, help='同时显示类型到服务的映射')
@click.pass_context
def services(ctx, show_types):
    """列出容器中注册的服务"""
    obj = ctx.obj or {}
    formatter = OutputFormatter(FormatterConfig(no_color=obj.get('no_color', False)))
    try:
        cmd = ServicesCommand(obj.get('config_path'), obj.get('logger_config'))
        cmd.execute(formatter, show_types)
    except Exception as e:
        click.echo(formatter.error(f"错误：{e}"), err=True)
        sys.exit(1)
