"""配置源接口定义"""

from abc import abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from .degradable import IDegradable


class IConfigSource(IDegradable):
    """只读为主的配置源接口"""

    @abstractmethod
    def get(self, key_path: str, default: Any = None) -> Any:
        """按点号路径获取配置值"""
        pass

    @abstractmethod
    def set(self, key_path: str, value: Any) -> None:
        """按点号路径设置配置值"""
        pass

    @abstractmethod
    def write(self, path: Optional[Path] = None) -> None:
        """写回配置文件"""
        pass

    @abstractmethod
    def config_file_exists(self) -> bool:
        """配置文件是否存在"""
        pass

    @abstractmethod
    def get_database_params(self) -> Dict[str, Any]:
        """获取数据库连接参数"""
        pass
