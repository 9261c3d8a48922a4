"""服务降级

Resolved / Degraded: 注册中心返回的带标签解析结果，调用方据此判断是否处于降级模式。
*Stub: 基础服务初始化失败时的替身实现，保持原有接口、行为安全惰性，并携带原始异常。
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from gcdi.core.config import Config
from gcdi.core.database import DatabaseConnector
from gcdi.core.exceptions import ServiceUnavailableError
from gcdi.core.logger import Logger, LoggerConfig
from gcdi.core.metadata import MetadataEngine

T = TypeVar('T')


@dataclass(frozen=True)
class Resolved(Generic[T]):
    """正常解析的服务"""
    instance: T

    @property
    def is_degraded(self) -> bool:
        return False

    @property
    def error(self) -> None:
        return None


@dataclass(frozen=True)
class Degraded(Generic[T]):
    """降级的服务：instance 为桩实现，error 为原始异常"""
    instance: T
    error: BaseException

    @property
    def is_degraded(self) -> bool:
        return True


Resolution = Union[Resolved[T], Degraded[T]]


def _require_error(error: Optional[BaseException]) -> BaseException:
    if error is None:
        raise ValueError("A stub must carry the original error")
    return error


class LoggerStub(Logger):
    """日志降级：仅向 stderr 输出 WARNING 及以上级别"""

    def __init__(self, error: BaseException):
        self._original_error = _require_error(error)
        super().__init__("gcdi.fallback", LoggerConfig(level="WARNING", console_output=True))
        self.warning("File logging failed, using stderr", error=str(error))

    def is_degraded(self) -> bool:
        return True

    def original_error(self) -> BaseException:
        return self._original_error


class ConfigStub(Config):
    """配置降级：所有读取返回内置默认值，修改只保存在内存中"""

    def __init__(self, logger: Logger, error: BaseException):
        self._original_error = _require_error(error)
        self.logger = logger
        self.config_path = Path(self.CONFIG_FILENAME)
        self._config = self.get_default_config()
        self.logger.warning(
            "Using ConfigStub with default values",
            error=str(error),
        )

    def get(self, key_path: str, default: Any = None) -> Any:
        self.logger.debug("Using default config for key", key_path=key_path)
        return super().get(key_path, default)

    def set(self, key_path: str, value: Any) -> None:
        self.logger.warning("ConfigStub in use, change will not persist", key_path=key_path)
        super().set(key_path, value)

    def write(self, path: Optional[Path] = None) -> None:
        self.logger.error("Cannot write config file, ConfigStub is in use")
        raise ServiceUnavailableError(
            "Configuration file cannot be written - configuration failed to load",
            {'service_name': 'config'},
            self._original_error,
        )

    def config_file_exists(self) -> bool:
        return False

    def is_degraded(self) -> bool:
        return True

    def original_error(self) -> BaseException:
        return self._original_error


class DatabaseConnectorStub(DatabaseConnector):
    """数据库降级：任何读写都报告不可用"""

    def __init__(self, logger: Logger, error: BaseException):
        self._original_error = _require_error(error)
        self.logger = logger
        self.db_params = {}
        self._connection = None
        self.error_message = f"Database service unavailable: {error}"
        self.logger.error("DatabaseConnectorStub active, database operations will fail gracefully")

    def get_connection(self):
        raise ServiceUnavailableError(
            f"{self.error_message} - check database configuration and connectivity",
            {'service_name': 'database_connector'},
            self._original_error,
        )

    def test_connection(self) -> bool:
        self.logger.warning("Database connection test failed, using DatabaseConnectorStub")
        return False

    def table_exists(self, table_name: str) -> bool:
        self.logger.warning("Cannot check table, database unavailable", table=table_name)
        return False

    def get_params(self) -> Dict[str, Any]:
        return {}

    def is_degraded(self) -> bool:
        return True

    def original_error(self) -> BaseException:
        return self._original_error


class MetadataEngineStub(MetadataEngine):
    """元数据降级：所有查询返回空元数据"""

    def __init__(self, logger: Logger, error: BaseException):
        self._original_error = _require_error(error)
        self.logger = logger
        self.core_fields_metadata = None
        self._metadata = {"models": {}, "relationships": {}}
        self.logger.error("MetadataEngineStub active, metadata operations will return empty results",
                          error=str(error))

    def load_all_metadata(self) -> Dict[str, Any]:
        self.logger.warning("load_all_metadata called on MetadataEngineStub")
        return {"models": {}, "relationships": {}}

    def get_model_metadata(self, model_name: str) -> Dict[str, Any]:
        self.logger.warning("get_model_metadata called on MetadataEngineStub", model=model_name)
        return {}

    def get_available_models(self) -> List[str]:
        return []

    def is_degraded(self) -> bool:
        return True

    def original_error(self) -> BaseException:
        return self._original_error
