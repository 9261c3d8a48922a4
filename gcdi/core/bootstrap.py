"""容器引导

注册核心服务（logger、config、database_connector、metadata_engine 为关键服务，失败时降级），
登记类型映射，并提供降级容器和测试容器的构建方法。
"""

from functools import partial
from pathlib import Path
from typing import Any, Dict, Optional, Union

from gcdi.core.config import Config
from gcdi.core.container import Container
from gcdi.core.database import DatabaseConnector
from gcdi.core.exceptions import ConfigException
from gcdi.core.interfaces import IConfigSource, IDatabaseConnector, IMetadataProvider
from gcdi.core.logger import Logger, LoggerConfig, get_logger
from gcdi.core.metadata import CoreFieldsMetadata, MetadataEngine
from gcdi.core.policy import AutoWirePolicy
from gcdi.core.registry import CriticalityTier, Lifecycle
from gcdi.core.stubs import ConfigStub, DatabaseConnectorStub, LoggerStub, MetadataEngineStub

logger = get_logger("gcdi.bootstrap")

CORE_TYPE_ALIASES = {
    Logger: "logger",
    Config: "config",
    IConfigSource: "config",
    DatabaseConnector: "database_connector",
    IDatabaseConnector: "database_connector",
    MetadataEngine: "metadata_engine",
    IMetadataProvider: "metadata_engine",
    CoreFieldsMetadata: "core_fields_metadata",
}


def load_logger_config(config_path: Optional[Union[str, Path]] = None) -> LoggerConfig:
    """从配置文件的 logging.* 构建日志配置

    直接读取文件而不是 config 服务，config 服务本身依赖 logger。
    文件无法加载时使用默认配置，错误由 config 服务在降级时报告。

    Args:
        config_path: 配置文件路径

    Returns:
        日志配置
    """
    try:
        settings = Config(config_path).get_logging_config()
    except ConfigException as e:
        logger.debug("Logging section unavailable, using defaults", error=e.message)
        return LoggerConfig()
    return LoggerConfig.from_dict(settings)


def configure_core_services(
    container: Container,
    config_path: Optional[Union[str, Path]] = None,
    logger_config: Optional[LoggerConfig] = None,
) -> None:
    """注册核心服务

    Args:
        container: 目标容器
        config_path: 配置文件路径
        logger_config: 日志配置，为 None 时读取配置文件的 logging.*
    """
    container.register(
        "logger",
        Lifecycle.SINGLETON,
        lambda: Logger("gcdi", logger_config or load_logger_config(config_path)),
        tier=CriticalityTier.CRITICAL,
        stub_factory=LoggerStub,
    )

    container.register(
        "config",
        Lifecycle.SINGLETON,
        lambda: Config(config_path, container.get("logger")),
        tier=CriticalityTier.CRITICAL,
        stub_factory=lambda error: ConfigStub(container.get("logger"), error),
    )

    container.register(
        "database_connector",
        Lifecycle.SINGLETON,
        lambda: DatabaseConnector(container.get("logger"), container.get("config")),
        tier=CriticalityTier.CRITICAL,
        stub_factory=lambda error: DatabaseConnectorStub(container.get("logger"), error),
    )
    container.register_alias("database", "database_connector")

    container.register_class("core_fields_metadata", CoreFieldsMetadata)

    container.register(
        "metadata_engine",
        Lifecycle.SINGLETON,
        lambda: MetadataEngine(
            container.get("logger"),
            container.get("config"),
            container.get("core_fields_metadata"),
        ),
        tier=CriticalityTier.CRITICAL,
        stub_factory=lambda error: MetadataEngineStub(container.get("logger"), error),
    )


def configure_type_aliases(container: Container) -> None:
    """登记核心类型到服务名的映射"""
    for type_ref, service_name in CORE_TYPE_ALIASES.items():
        container.register_type_alias(type_ref, service_name)


def configure_autowire_policy(container: Container) -> None:
    """自动装配策略从 config 服务的 autowire.* 惰性读取"""
    container.set_policy_factory(
        lambda: AutoWirePolicy.from_dict(container.get("config").get_autowire_settings())
    )


def configure_container(
    container: Container,
    config_path: Optional[Union[str, Path]] = None,
    logger_config: Optional[LoggerConfig] = None,
) -> None:
    configure_core_services(container, config_path, logger_config)
    configure_type_aliases(container)
    configure_autowire_policy(container)


def build_container(
    config_path: Optional[Union[str, Path]] = None,
    logger_config: Optional[LoggerConfig] = None,
) -> Container:
    """构建应用容器

    注册阶段失败时记录错误并返回降级容器。

    Args:
        config_path: 配置文件路径
        logger_config: 日志配置

    Returns:
        已构建的容器
    """
    container = Container(
        configurator=partial(configure_container, config_path=config_path, logger_config=logger_config)
    )
    try:
        return container.build()
    except Exception as e:
        logger.error("Container initialization failed, using fallback", error=str(e))
        return build_fallback_container(e)


def build_fallback_container(original_error: BaseException) -> Container:
    """构建降级容器：所有关键服务都是携带 original_error 的桩实现"""

    def configure(container: Container) -> None:
        def fail():
            raise original_error

        container.register("logger", Lifecycle.SINGLETON, fail,
                           tier=CriticalityTier.CRITICAL, stub_factory=LoggerStub)
        container.register("config", Lifecycle.SINGLETON, fail,
                           tier=CriticalityTier.CRITICAL,
                           stub_factory=lambda error: ConfigStub(container.get("logger"), error))
        container.register("database_connector", Lifecycle.SINGLETON, fail,
                           tier=CriticalityTier.CRITICAL,
                           stub_factory=lambda error: DatabaseConnectorStub(container.get("logger"), error))
        container.register_alias("database", "database_connector")
        container.register("metadata_engine", Lifecycle.SINGLETON, fail,
                           tier=CriticalityTier.CRITICAL,
                           stub_factory=lambda error: MetadataEngineStub(container.get("logger"), error))
        configure_type_aliases(container)

    return Container(configurator=configure).build()


def configure_for_testing(
    test_services: Optional[Dict[str, Any]] = None,
    config_path: Optional[Union[str, Path]] = None,
    logger_config: Optional[LoggerConfig] = None,
) -> Container:
    """构建测试容器：test_services 中的实例覆盖同名服务，其余使用默认注册

    Args:
        test_services: 服务名 -> 测试实例（通常是 mock）
        config_path: 配置文件路径
        logger_config: 日志配置

    Returns:
        新构建的容器
    """
    container = build_container(config_path, logger_config)
    for name, instance in (test_services or {}).items():
        container.register_instance(name, instance)
    return container
