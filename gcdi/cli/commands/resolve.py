"""GCDI resolve 命令实现

按完整类型名自动装配一个类，用于排查装配路径上的问题。"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click

from gcdi.core.bootstrap import build_container
from gcdi.core.container import Container
from gcdi.core.exceptions import ContainerException
from gcdi.core.locator import ServiceLocator
from gcdi.core.logger import LoggerConfig, get_logger
from gcdi.core.reflection import type_name_of
from gcdi.cli.utils import FormatterConfig, OutputFormatter

logger = get_logger("gcdi.cli.resolve")


def parse_parameters(params: Tuple[str, ...]) -> Dict[str, Any]:
    """解析 name=value 形式的参数

    Raises:
        click.BadParameter: 缺少等号或参数名为空
    """
    parsed = {}
    for item in params:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected name=value, got '{item}'", param_hint="--param")
        parsed[name.strip()] = value
    return parsed


class ResolveCommand:
    """自动装配命令"""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        logger_config: Optional[LoggerConfig] = None,
        container: Optional[Container] = None,
    ):
        self.locator = ServiceLocator(container or build_container(config_path, logger_config))

    def execute(self, type_name: str, parameters: Dict[str, Any]) -> Any:
        """构造实例

        Args:
            type_name: 完整类型名（module.Class 或 module:Class）
            parameters: 直接传入构造函数的参数

        Returns:
            构造出的实例
        """
        logger.info("Resolving type", type_name=type_name, parameters=sorted(parameters))
        return self.locator.create(type_name, parameters)


@click.command()
@click.argument('dotted_type')
@click.option('--param', 'params', multiple=True, metavar='NAME=VALUE',
              help='直接传入构造函数的参数，可重复')
@click.pass_context
def resolve(ctx, dotted_type, params):
    """自动装配 DOTTED_TYPE 并显示结果

    示例:
      gcdi resolve gcdi.core.metadata.CoreFieldsMetadata
      gcdi resolve myapp.mail.Sender --param host=localhost
    """
    obj = ctx.obj or {}
    formatter = OutputFormatter(FormatterConfig(no_color=obj.get('no_color', False)))
    parameters = parse_parameters(params)
    try:
        cmd = ResolveCommand(obj.get('config_path'), obj.get('logger_config'))
        instance = cmd.execute(dotted_type, parameters)
    except ContainerException as e:
        click.echo(formatter.error(f"错误：{e.message}"), err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(formatter.error(f"错误：{e}"), err=True)
        sys.exit(1)

    click.echo(formatter.success(f"Resolved {type_name_of(type(instance))}"))
    if obj.get('verbose'):
        click.echo(repr(instance))
