"""类型到服务的映射表

自动装配时，声明类型命中映射表的参数直接从注册中心获取服务，而不是临时构造。"""

from typing import Dict, Optional, Union

from gcdi.core.reflection import type_name_of


class TypeServiceMap:
    """类型名 -> 服务名"""

    def __init__(self):
        self._mapping: Dict[str, str] = {}

    def register(self, type_ref: Union[str, type], service_name: str) -> None:
        """登记类型别名

        Args:
            type_ref: 类或完整类型名
            service_name: 注册中心中的服务名
        """
        self._mapping[_key(type_ref)] = service_name

    def lookup(self, type_ref: Union[str, type]) -> Optional[str]:
        return self._mapping.get(_key(type_ref))

    def __contains__(self, type_ref: Union[str, type]) -> bool:
        return _key(type_ref) in self._mapping

    def items(self):
        return self._mapping.items()

    def clear(self) -> None:
        self._mapping.clear()


def _key(type_ref: Union[str, type]) -> str:
    return type_ref if isinstance(type_ref, str) else type_name_of(type_ref)
