"""配置源

提供 YAML 配置文件的加载、点号路径读写和保存功能。
加载失败时抛出配置异常，由容器将其降级为 ConfigStub。
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from gcdi.core.exceptions import ConfigIOError, ConfigParseError, ConfigValidationError
from gcdi.core.interfaces import IConfigSource
from gcdi.core.logger import Logger, get_logger
from gcdi.core.policy import DEFAULT_AUTOWIRE


class Config(IConfigSource):
    """YAML 配置源

    加载时与 DEFAULT_CONFIG 深度合并，缺失的键使用默认值。
    """

    DEFAULT_CONFIG = {
        "app": {
            "name": "gcdi",
            "environment": "development",
            "debug": False,
        },
        "database": {
            "driver": "sqlite",
            "path": "gcdi.sqlite",
        },
        "logging": {
            "level": "INFO",
            "path": None,
            "json": False,
            "console": False,
        },
        "metadata": {
            "models_dir": "src/models",
            "relationships_dir": "src/relationships",
            "cache_dir": "cache/",
        },
        "autowire": DEFAULT_AUTOWIRE,
        "installed": False,
    }

    CONFIG_FILENAME = "gcdi.yaml"

    def __init__(self, config_path: Optional[Union[str, Path]] = None, logger: Optional[Logger] = None):
        """初始化并加载配置

        Args:
            config_path: 配置文件路径，默认为当前目录下的 gcdi.yaml
            logger: 日志记录器

        Raises:
            ConfigIOError: 文件不存在或读取失败时抛出
            ConfigParseError: YAML 解析失败时抛出
            ConfigValidationError: 顶层结构不是字典时抛出
        """
        self.config_path = Path(config_path) if config_path else Path.cwd() / self.CONFIG_FILENAME
        self.logger = logger or get_logger("gcdi.config")
        self._config: Dict[str, Any] = self.load_config()

    @classmethod
    def get_default_config(cls) -> Dict[str, Any]:
        """获取默认配置

        Returns:
            默认配置字典的深拷贝
        """
        return copy.deepcopy(cls.DEFAULT_CONFIG)

    def load_config(self) -> Dict[str, Any]:
        """从文件加载配置

        Returns:
            与默认配置合并后的配置字典
        """
        path = self.config_path
        self.logger.info("Loading configuration", path=str(path))

        if not path.exists():
            self.logger.error("Configuration file not found", path=str(path))
            raise ConfigIOError(f"Config file not found: {path}", details=str(path))

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            self.logger.error("Failed to parse YAML configuration", path=str(path), error=str(e))
            raise ConfigParseError(f"Failed to parse YAML configuration: {e}", details=str(e))
        except OSError as e:
            self.logger.error("Failed to read configuration file", path=str(path), error=str(e))
            raise ConfigIOError(f"Failed to read configuration file: {e}", details=str(e))

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"Config file is not a valid mapping: {path}",
                details=type(data).__name__,
            )

        merged = merge_configs(self.get_default_config(), data)
        self.logger.info("Configuration loaded successfully", path=str(path))
        return merged

    def get(self, key_path: str, default: Any = None) -> Any:
        """获取配置值，支持点号分隔的路径

        例如: get("database.driver")

        Args:
            key_path: 配置路径
            default: 路径不存在时的默认值

        Returns:
            配置值或默认值
        """
        value = self._config
        for key in key_path.split("."):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, key_path: str, value: Any) -> None:
        """设置配置值，支持点号分隔的路径

        Args:
            key_path: 配置路径
            value: 要设置的值
        """
        keys = key_path.split(".")
        target = self._config
        for key in keys[:-1]:
            if not isinstance(target.get(key), dict):
                target[key] = {}
            target = target[key]
        target[keys[-1]] = value
        self.logger.debug("Set configuration value", key_path=key_path)

    def write(self, path: Optional[Path] = None) -> None:
        """保存配置到文件

        Args:
            path: 保存路径，默认写回加载路径

        Raises:
            ConfigIOError: 文件写入失败时抛出
        """
        save_path = Path(path) if path else self.config_path
        try:
            save_path.parent.mkdir(parents=True, exist_ok=True)
            with open(save_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(self._config, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        except OSError as e:
            self.logger.error("Failed to write configuration file", path=str(save_path), error=str(e))
            raise ConfigIOError(f"Failed to write configuration file: {e}", details=str(e))
        self.logger.info("Configuration saved successfully", path=str(save_path))

    def config_file_exists(self) -> bool:
        return self.config_path.exists()

    def get_database_params(self) -> Dict[str, Any]:
        return dict(self.get("database", {}) or {})

    def get_logging_config(self) -> Dict[str, Any]:
        return dict(self.get("logging", {}) or {})

    def get_app_settings(self) -> Dict[str, Any]:
        return dict(self.get("app", {}) or {})

    def get_autowire_settings(self) -> Dict[str, Any]:
        return dict(self.get("autowire", {}) or {})

    def is_degraded(self) -> bool:
        return False

    def original_error(self) -> Optional[BaseException]:
        return None


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """深度合并配置，字典递归合并，其他值（含列表）直接覆盖

    Args:
        base: 基础配置
        override: 覆盖配置

    Returns:
        合并后的新字典
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result
