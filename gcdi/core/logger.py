"""结构化日志系统

容器及核心服务使用的结构化日志记录器。使用 structlog 库提供控制台或 JSON 输出格式。"""

import contextvars
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import structlog


# 链路上下文变量（每个请求/调用构建自己的容器）
_request_id: contextvars.ContextVar[str] = contextvars.ContextVar(
    'request_id', default=""
)


class LoggerConfig:
    """日志配置类"""

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        level: str = "INFO",
        json_output: bool = False,
        console_output: bool = False,
        log_file: str = "gcdi.log",
    ):
        """初始化日志配置
        Args:
            log_dir: 日志目录，如果为 None 则不写入文件
            level: 日志级别 (DEBUG, INFO, WARNING, ERROR)
            json_output: 是否输出 JSON 格式
            console_output: 是否输出到控制台 (stderr)
            log_file: 日志文件名
        """
        self.log_dir = log_dir
        self.level = level.upper()
        self.json_output = json_output
        self.console_output = console_output
        self.log_file = log_file

    @classmethod
    def from_dict(cls, settings: Dict[str, Any]) -> 'LoggerConfig':
        """从配置节（logging.*）构建日志配置

        Args:
            settings: 包含 level、path、json、console 的字典

        Returns:
            日志配置对象
        """
        path = settings.get("path")
        log_dir = Path(path).parent if path else None
        log_file = Path(path).name if path else "gcdi.log"
        return cls(
            log_dir=log_dir,
            level=str(settings.get("level", "INFO")),
            json_output=bool(settings.get("json", False)),
            console_output=bool(settings.get("console", False)),
            log_file=log_file,
        )


class Logger:
    """结构化日志记录器

    对 structlog 的薄封装，事件名 + 关键字上下文。
    """

    def __init__(self, name: str = "gcdi", config: Optional[LoggerConfig] = None):
        """初始化日志记录器

        Args:
            name: 日志记录器名称
            config: 日志配置对象

        Raises:
            OSError: 日志目录或文件无法创建时抛出
        """
        self.name = name
        self.config = config or LoggerConfig()
        self._setup_structlog()
        self.logger = structlog.get_logger(name)

    def _setup_structlog(self) -> None:
        """配置 structlog"""
        handlers = []

        if self.config.console_output:
            handlers.append(logging.StreamHandler(sys.stderr))

        if self.config.log_dir:
            log_dir = Path(self.config.log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_dir / self.config.log_file))

        # 同名记录器重新创建时替换旧的处理器
        std_logger = logging.getLogger(self.name)
        for handler in list(std_logger.handlers):
            std_logger.removeHandler(handler)
            handler.close()

        if handlers:
            for handler in handlers:
                handler.setFormatter(logging.Formatter("%(message)s"))
                std_logger.addHandler(handler)
            std_logger.setLevel(getattr(logging, self.config.level, logging.INFO))
        # 有自己的输出时不再交给上级记录器，避免重复输出
        std_logger.propagate = not handlers

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                structlog.processors.JSONRenderer()
                if self.config.json_output
                else structlog.dev.ConsoleRenderer(colors=False),
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

    def debug(self, event: str, **kwargs) -> None:
        """记录 DEBUG 级别日志"""
        self._log("debug", event, **kwargs)

    def info(self, event: str, **kwargs) -> None:
        """记录 INFO 级别日志"""
        self._log("info", event, **kwargs)

    def warning(self, event: str, **kwargs) -> None:
        """记录 WARNING 级别日志"""
        self._log("warning", event, **kwargs)

    def error(self, event: str, **kwargs) -> None:
        """记录 ERROR 级别日志"""
        self._log("error", event, **kwargs)

    def bind(self, **kwargs) -> 'Logger':
        """绑定上下文信息到日志记录器

        Args:
            **kwargs: 要绑定的上下文信息

        Returns:
            新的日志记录器实例，绑定了指定的上下文
        """
        new_logger = Logger.__new__(type(self))
        new_logger.__dict__.update(self.__dict__)
        new_logger.logger = self.logger.bind(**kwargs)
        return new_logger

    def is_degraded(self) -> bool:
        return False

    def original_error(self) -> Optional[BaseException]:
        return None

    def _log(self, level: str, event: str, **kwargs) -> None:
        context = self._build_context(**kwargs)
        log_method = getattr(self.logger, level)
        log_method(event, **context)

    def _build_context(self, **kwargs) -> Dict[str, Any]:
        """构建日志上下文

        Args:
            **kwargs: 额外的上下文信息

        Returns:
            包含链路信息和其他上下文的字典
        """
        context = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        }

        request_id = _request_id.get()
        if request_id:
            context['request_id'] = request_id

        context.update(kwargs)
        return context

    @staticmethod
    def set_request_id(request_id: str) -> None:
        """设置请求 ID

        Args:
            request_id: 请求标识符
        """
        _request_id.set(request_id)

    @staticmethod
    def clear_context() -> None:
        """清除链路上下文"""
        _request_id.set("")


# 按名称缓存的记录器实例
_loggers: Dict[str, Logger] = {}


def get_logger(
    name: str = "gcdi",
    config: Optional[LoggerConfig] = None,
) -> Logger:
    """获取日志记录器实例
    Args:
        name: 日志记录器名称
        config: 日志配置对象（仅在首次创建时生效）

    Returns:
        日志记录器实例
    """
    if name not in _loggers:
        _loggers[name] = Logger(name, config)
    return _loggers[name]


def configure_logger(config: LoggerConfig, name: str = "gcdi") -> Logger:
    """重新配置指定名称的记录器
    Args:
        config: 日志配置对象
        name: 日志记录器名称

    Returns:
        新的日志记录器实例
    """
    _loggers[name] = Logger(name, config)
    return _loggers[name]
