"""GCDI CLI 主入口"""

import sys

import click

from gcdi.cli.commands.check import check
from gcdi.cli.commands.resolve import resolve
from gcdi.cli.commands.services import services
from gcdi.core.logger import LoggerConfig


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    '--verbose',
    is_flag=True,
    help='详细日志输出（调试用）'
)
@click.option(
    '--config',
    'config_path',
    type=click.Path(dir_okay=False),
    default=None,
    help='配置文件路径（默认为当前目录下的 gcdi.yaml）'
)
@click.option(
    '--no-color',
    is_flag=True,
    help='关闭彩色输出'
)
@click.pass_context
def cli(ctx, verbose, config_path, no_color):
    """GCDI - 依赖注入容器工具

    命令：
      check                   检查所有服务能否解析
      services [--types]      列出已注册服务
      resolve <type>          自动装配指定类型

    示例:
      gcdi check
      gcdi --config app.yaml services --types
      gcdi resolve gcdi.core.metadata.CoreFieldsMetadata
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['no_color'] = no_color
    ctx.obj['config_path'] = config_path
    # 未指定 --verbose 时由配置文件的 logging.* 决定
    ctx.obj['logger_config'] = LoggerConfig(level="DEBUG", console_output=True) if verbose else None


cli.add_command(check)
cli.add_command(services)
cli.add_command(resolve)


def main():
    """CLI 入口点，处理全局异常"""
    try:
        cli()
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
