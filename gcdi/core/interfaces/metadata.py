"""元数据提供者接口定义"""

from abc import abstractmethod
from typing import Any, Dict, List

from .degradable import IDegradable


class IMetadataProvider(IDegradable):
    """元数据提供者接口"""

    @abstractmethod
    def load_all_metadata(self) -> Dict[str, Any]:
        """加载全部模型与关系元数据"""
        pass

    @abstractmethod
    def get_model_metadata(self, model_name: str) -> Dict[str, Any]:
        """获取单个模型的元数据"""
        pass

    @abstractmethod
    def get_available_models(self) -> List[str]:
        """获取可用模型名称列表"""
        pass
