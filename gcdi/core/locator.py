"""服务定位器

对容器的带类型的命名访问。其余应用代码通过它获取服务，
任何解析失败都会转换为携带原始原因的 ServiceUnavailableError。
"""

from typing import Any, Mapping, Optional, Union

from gcdi.core.config import Config
from gcdi.core.container import Container
from gcdi.core.database import DatabaseConnector
from gcdi.core.exceptions import ServiceUnavailableError
from gcdi.core.logger import Logger, get_logger
from gcdi.core.metadata import CoreFieldsMetadata, MetadataEngine
from gcdi.core.stubs import Resolution

logger = get_logger("gcdi.locator")


class ServiceLocator:
    """服务定位器"""

    def __init__(self, container: Container):
        self.container = container

    def _get(self, name: str, description: str) -> Any:
        try:
            return self.container.get(name)
        except Exception as e:
            logger.error("Failed to get service", service=name, error=str(e))
            raise ServiceUnavailableError(
                f"{description} unavailable: {e}",
                {'service_name': name, 'original_error': str(e)},
                e,
            ) from e

    def get_logger(self) -> Logger:
        return self._get("logger", "Logger service")

    def get_config(self) -> Config:
        """获取配置服务（可能是 ConfigStub，调用方可用 is_degraded() 判断）"""
        return self._get("config", "Config service")

    def get_database_connector(self) -> DatabaseConnector:
        """获取数据库连接器

        Raises:
            ServiceUnavailableError: 连接器初始化失败或处于降级模式
        """
        resolution = self.resolve("database_connector")
        if resolution.is_degraded:
            raise ServiceUnavailableError(
                "Database service unavailable. Check configuration and ensure the database is accessible.",
                {'service_name': 'database_connector', 'stub_error': str(resolution.error)},
                resolution.error,
            ) from resolution.error
        return resolution.instance

    def get_metadata_engine(self) -> MetadataEngine:
        return self._get("metadata_engine", "Metadata service")

    def get_core_fields_metadata(self) -> CoreFieldsMetadata:
        return self._get("core_fields_metadata", "Core fields metadata service")

    def get(self, name: str) -> Any:
        """获取任意服务（未注册时尝试按类型名自动装配）"""
        return self._get(name, f"Service '{name}'")

    def resolve(self, name: str) -> Resolution:
        """获取带标签的解析结果"""
        try:
            return self.container.resolve(name)
        except Exception as e:
            logger.error("Failed to resolve service", service=name, error=str(e))
            raise ServiceUnavailableError(f"Service '{name}' unavailable: {e}", {'service_name': name}, e) from e

    def has_service(self, name: str) -> bool:
        return self.container.has(name)

    def create(self, type_ref: Union[str, type], parameters: Optional[Mapping[str, Any]] = None) -> Any:
        """自动装配任意类，parameters 中的参数直接使用

        解析错误（循环依赖、深度超限等）以原始类型抛出。
        """
        if not parameters:
            return self.container.auto_wire(type_ref)
        return self.container.create_with_overrides(type_ref, parameters)

    def reset(self) -> None:
        """重置容器（测试用）"""
        self.container.reset()
