"""降级状态接口定义"""

from abc import ABC, abstractmethod
from typing import Optional


class IDegradable(ABC):
    """可降级服务接口

    真实服务返回 False / None，桩实现返回 True 和原始异常。
    """

    @abstractmethod
    def is_degraded(self) -> bool:
        """是否处于降级模式"""
        pass

    @abstractmethod
    def original_error(self) -> Optional[BaseException]:
        """导致降级的原始异常"""
        pass
