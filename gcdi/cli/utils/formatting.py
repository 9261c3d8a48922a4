"""CLI 输出格式化工具

提供颜色、状态前缀和对齐表格的格式化功能。"""

from typing import Any, List, Optional


class Color:
    """ANSI 颜色代码"""
    RESET = '\033[0m'
    BOLD = '\033[1m'

    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'


class FormatterConfig:
    """格式化配置中心"""

    def __init__(self, no_color: bool = False):
        """初始化配置
        Args:
            no_color: 是否禁用颜色输出
        """
        self.no_color = no_color

    def colorize(self, text: str, color: str) -> str:
        """根据配置为文本添加 ANSI 颜色
        Args:
            text: 目标文本
            color: ANSI 颜色代码
        Returns:
            格式化后的文本
        """
        if self.no_color:
            return text
        return f"{color}{text}{Color.RESET}"


class OutputFormatter:
    """CLI 输出格式化器实现"""

    def __init__(self, config: Optional[FormatterConfig] = None):
        self.config = config or FormatterConfig()

    def success(self, message: str) -> str:
        """格式化成功消息"""
        prefix = self.config.colorize("+", Color.GREEN)
        return f"{prefix} {message}"

    def error(self, message: str) -> str:
        """格式化错误消息"""
        prefix = self.config.colorize("-", Color.RED)
        return f"{prefix} {message}"

    def warning(self, message: str) -> str:
        """格式化警告消息"""
        prefix = self.config.colorize("!", Color.YELLOW)
        return f"{prefix} {message}"

    def info(self, message: str) -> str:
        """格式化普通信息消息"""
        prefix = self.config.colorize("*", Color.BLUE)
        return f"{prefix} {message}"

    def format_table(self, headers: List[str], rows: List[List[Any]]) -> str:
        """格式化对齐的表格字符串
        Args:
            headers: 表头列表
            rows: 数据行列表
        """
        if not headers:
            return ""

        widths = []
        for i, header in enumerate(headers):
            width = len(str(header))
            for row in rows:
                if i < len(row):
                    width = max(width, len(str(row[i])))
            widths.append(width)

        header_row = "  ".join(str(h).ljust(w) for h, w in zip(headers, widths))
        lines = [self.config.colorize(header_row.rstrip(), Color.BOLD)]
        lines.append("  ".join("-" * w for w in widths))
        for row in rows:
            lines.append("  ".join(str(cell).ljust(w) for cell, w in zip(row, widths)).rstrip())
        return "\n".join(lines)
