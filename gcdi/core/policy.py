"""自动装配策略

AutoWirePolicy: 可序列化的允许/排除列表，决定哪些类型可以被临时构造。
PrimitiveHeuristics: 按参数名解析基本类型参数的规则表。
"""

import copy
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, Optional, Union

from gcdi.core.reflection import type_name_of

if TYPE_CHECKING:
    from gcdi.core.container import Container


DEFAULT_AUTOWIRE = {
    "allow": ["gcdi"],
    "exclude": ["gcdi.external", "gcdi.legacy", "gcdi.tests"],
    "allow_types": [],
}


class AutoWirePolicy:
    """自动装配资格判定

    模块按包边界匹配：允许 "app" 时 "app.services" 可装配，"appx" 不可。
    allowed_types 中显式列出的类型总是可装配，优先于排除列表。
    """

    def __init__(
        self,
        allowed_modules: Iterable[str] = (),
        excluded_modules: Iterable[str] = (),
        allowed_types: Iterable[str] = (),
    ):
        self.allowed_modules = list(allowed_modules)
        self.excluded_modules = list(excluded_modules)
        self.allowed_types = set(allowed_types)

    def is_eligible(self, type_ref: Union[str, type]) -> bool:
        """判断类型是否允许自动装配

        Args:
            type_ref: 类或完整类型名

        Returns:
            允许返回 True
        """
        if isinstance(type_ref, type):
            type_name = type_name_of(type_ref)
            module = type_ref.__module__
        else:
            type_name = type_ref
            module = type_ref.rpartition(".")[0]

        if type_name in self.allowed_types:
            return True
        if any(_under(module, excluded) for excluded in self.excluded_modules):
            return False
        return any(_under(module, allowed) for allowed in self.allowed_modules)

    def allow_module(self, module: str) -> None:
        if module not in self.allowed_modules:
            self.allowed_modules.append(module)

    def allow_type(self, type_ref: Union[str, type]) -> None:
        self.allowed_types.add(type_ref if isinstance(type_ref, str) else type_name_of(type_ref))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allow": list(self.allowed_modules),
            "exclude": list(self.excluded_modules),
            "allow_types": sorted(self.allowed_types),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'AutoWirePolicy':
        """从配置节（autowire.*）构建策略"""
        data = data or {}
        return cls(
            allowed_modules=data.get("allow") or [],
            excluded_modules=data.get("exclude") or [],
            allowed_types=data.get("allow_types") or [],
        )


def _under(module: str, package: str) -> bool:
    return module == package or module.startswith(package + ".")


class PrimitiveHeuristics:
    """按参数名解析无类型或基本类型参数

    规则可以是常量（可变常量每次使用时复制），也可以是接收容器的可调用对象。
    """

    def __init__(self, rules: Optional[Dict[str, Any]] = None):
        self._rules: Dict[str, Any] = dict(rules or {})

    def register(self, parameter_name: str, rule: Any) -> None:
        self._rules[parameter_name] = rule

    def has(self, parameter_name: str) -> bool:
        return parameter_name in self._rules

    def resolve(self, parameter_name: str, container: 'Container') -> Any:
        rule = self._rules[parameter_name]
        if callable(rule):
            return rule(container)
        return copy.deepcopy(rule)

    def names(self):
        return list(self._rules)


def _config_value(key_path: str, default: Any) -> Callable[['Container'], Any]:
    def rule(container: 'Container') -> Any:
        return container.get("config").get(key_path, default)
    return rule


def default_heuristics() -> PrimitiveHeuristics:
    """默认的参数名规则表"""
    return PrimitiveHeuristics({
        "metadata": {},
        "db_params": lambda container: container.get("config").get_database_params(),
        "models_dir_path": _config_value("metadata.models_dir", "src/models"),
        "relationships_dir_path": _config_value("metadata.relationships_dir", "src/relationships"),
        "cache_dir_path": _config_value("metadata.cache_dir", "cache/"),
    })
