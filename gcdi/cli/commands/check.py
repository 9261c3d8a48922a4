"""GCDI check 命令实现

构建容器并逐个解析已注册的服务，报告哪些服务处于降级模式。"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from gcdi.core.bootstrap import build_container
from gcdi.core.container import Container
from gcdi.core.exceptions import ContainerException
from gcdi.core.logger import LoggerConfig, get_logger
from gcdi.cli.utils import FormatterConfig, OutputFormatter

logger = get_logger("gcdi.cli.check")


class CheckCommand:
    """服务健康检查命令"""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        logger_config: Optional[LoggerConfig] = None,
        container: Optional[Container] = None,
    ):
        """初始化检查命令

        Args:
            config_path: 配置文件路径
            logger_config: 日志配置
            container: 已构建的容器（测试时注入）
        """
        self.container = container or build_container(config_path, logger_config)

    def check_services(self) -> List[Dict[str, Any]]:
        """解析全部已注册服务

        Returns:
            每个服务的检查结果，status 为 ok、degraded 或 failed
        """
        results = []
        for definition in self.container.registry.definitions():
            entry = {
                "name": definition.name,
                "lifecycle": definition.lifecycle.value,
                "tier": definition.tier.value,
                "status": "ok",
                "error": None,
            }
            try:
                resolution = self.container.resolve(definition.name)
                if resolution.is_degraded:
                    entry["status"] = "degraded"
                    entry["error"] = str(resolution.error)
            except ContainerException as e:
                entry["status"] = "failed"
                entry["error"] = e.message
            except Exception as e:
                entry["status"] = "failed"
                entry["error"] = str(e)

            logger.debug("Service checked", service=definition.name, status=entry["status"])
            results.append(entry)
        return results

    def execute(self, formatter: OutputFormatter) -> int:
        """执行检查并输出结果

        降级服务只产生警告，只有 failed 的服务会使命令以 1 退出。

        Returns:
            退出码
        """
        results = self.check_services()
        rows = [[r["name"], r["lifecycle"], r["tier"], r["status"]] for r in results]
        click.echo(formatter.format_table(["SERVICE", "LIFECYCLE", "TIER", "STATUS"], rows))
        click.echo()

        failed = [r for r in results if r["status"] == "failed"]
        degraded = [r for r in results if r["status"] == "degraded"]
        for r in degraded:
            click.echo(formatter.warning(f"{r['name']} is degraded: {r['error']}"))
        for r in failed:
            click.echo(formatter.error(f"{r['name']} failed: {r['error']}"))

        if failed:
            return 1
        if not degraded:
            click.echo(formatter.success(f"All {len(results)} services resolved"))
        return 0


@click.command()
@click.pass_context
def check(ctx):
    """检查所有已注册服务能否解析

    关键服务初始化失败时会以降级模式运行，这里以警告形式列出。
    """
    obj = ctx.obj or {}
    formatter = OutputFormatter(FormatterConfig(no_color=obj.get('no_color', False)))
    try:
        cmd = CheckCommand(obj.get('config_path'), obj.get('logger_config'))
        exit_code = cmd.execute(formatter)
    except Exception as e:
        click.echo(formatter.error(f"错误：{e}"), err=True)
        sys.exit(1)
    if exit_code:
        sys.exit(exit_code)
