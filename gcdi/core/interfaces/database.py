"""数据库连接器接口定义"""

from abc import abstractmethod
from typing import Any, Dict

from .degradable import IDegradable


class IDatabaseConnector(IDegradable):
    """数据库连接器接口"""

    @abstractmethod
    def get_connection(self) -> Any:
        """获取数据库连接"""
        pass

    @abstractmethod
    def test_connection(self) -> bool:
        """测试连接是否可用"""
        pass

    @abstractmethod
    def table_exists(self, table_name: str) -> bool:
        """检查表是否存在"""
        pass

    @abstractmethod
    def get_params(self) -> Dict[str, Any]:
        """获取连接参数"""
        pass
