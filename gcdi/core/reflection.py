"""反射工具

根据类型名加载类，并内省构造函数参数：声明类型、是否允许 None、默认值。
"""

import importlib
import inspect
import types
from dataclasses import dataclass
from typing import (
    Annotated,
    Any,
    Dict,
    ForwardRef,
    List,
    Optional,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from gcdi.core.exceptions import TypeNotFoundError

_NONE_TYPE = type(None)
_UNION_TYPES = (Union, getattr(types, "UnionType", Union))


@dataclass(frozen=True)
class ParameterInfo:
    """构造函数参数描述

    Attributes:
        name: 参数名
        annotation: 声明的类（已去掉 Optional 包装），无法确定时为 None
        type_name: 声明类型的完整名称；字符串前向引用无法解析时保留原字符串
        allows_null: 是否允许 None（Optional 注解或默认值为 None）
        has_default: 是否有默认值
        default: 默认值
        keyword_only: 是否为仅限关键字参数
        positional_only: 是否为仅限位置参数
    """
    name: str
    annotation: Optional[type]
    type_name: Optional[str]
    allows_null: bool
    has_default: bool
    default: Any = None
    keyword_only: bool = False
    positional_only: bool = False

    @property
    def is_builtin(self) -> bool:
        """无类型声明或声明为内置类型"""
        if self.type_name is None:
            return True
        if self.annotation is None:
            return False
        return self.annotation.__module__ == "builtins"


def type_name_of(cls: type) -> str:
    """返回类的完整名称 (module.QualName)"""
    return f"{cls.__module__}.{cls.__qualname__}"


def short_name(type_name: str) -> str:
    """返回完整类型名的最后一段"""
    return type_name.rsplit(".", 1)[-1]


def load_type(type_name: str) -> type:
    """按名称加载类

    支持 "package.module.Class" 和 "package.module:Outer.Inner" 两种写法。

    Args:
        type_name: 类型名称

    Returns:
        对应的类对象

    Raises:
        TypeNotFoundError: 模块或属性不存在，或目标不是类
    """
    if ":" in type_name:
        module_name, _, qualname = type_name.partition(":")
        candidates = [(module_name, qualname.split("."))]
    else:
        parts = type_name.split(".")
        candidates = [(".".join(parts[:i]), parts[i:]) for i in range(len(parts) - 1, 0, -1)]

    last_error: Optional[BaseException] = None
    for module_name, attrs in candidates:
        try:
            target: Any = importlib.import_module(module_name)
        except ImportError as e:
            last_error = e
            continue
        try:
            for attr in attrs:
                target = getattr(target, attr)
        except AttributeError as e:
            last_error = e
            continue
        if isinstance(target, type):
            return target
        last_error = TypeError(f"{type_name} is not a class")
        break

    raise TypeNotFoundError(type_name, last_error)


class ClassReflector:
    """构造函数内省"""

    def has_constructor(self, cls: type) -> bool:
        """类（或其基类）是否定义了自己的 __init__"""
        return cls.__init__ is not object.__init__

    def constructor_parameters(self, cls: type) -> List[ParameterInfo]:
        """获取构造函数参数（不含 self、*args、**kwargs）

        Args:
            cls: 目标类

        Returns:
            按声明顺序排列的参数描述列表
        """
        if not self.has_constructor(cls):
            return []

        init = cls.__init__
        signature = inspect.signature(init)
        hints = self._type_hints(init)

        result = []
        for index, (name, param) in enumerate(signature.parameters.items()):
            if index == 0:
                continue
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue
            annotation = hints.get(name, param.annotation)
            result.append(self._describe(name, param, annotation))
        return result

    def _type_hints(self, init) -> Dict[str, Any]:
        """解析构造函数注解

        整体解析失败时逐个解析，只有无法解析的注解保留原样（字符串或 ForwardRef）。
        """
        try:
            return get_type_hints(init, include_extras=True)
        except Exception:
            pass

        globalns = getattr(init, "__globals__", {})
        hints = {}
        for name, annotation in getattr(init, "__annotations__", {}).items():
            holder = types.SimpleNamespace(__annotations__={name: annotation})
            try:
                hints.update(get_type_hints(holder, globalns, include_extras=True))
            except Exception:
                hints[name] = annotation
        return hints

    def _describe(self, name: str, param: inspect.Parameter, annotation: Any) -> ParameterInfo:
        has_default = param.default is not inspect.Parameter.empty
        default = param.default if has_default else None
        allows_null = has_default and param.default is None

        cls: Optional[type] = None
        type_name: Optional[str] = None

        if get_origin(annotation) is Annotated:
            annotation = get_args(annotation)[0]

        if get_origin(annotation) in _UNION_TYPES:
            args = get_args(annotation)
            if _NONE_TYPE in args:
                allows_null = True
            remaining = [a for a in args if a is not _NONE_TYPE]
            # 多类型联合无法确定具体类型，按基本类型处理
            annotation = remaining[0] if len(remaining) == 1 else object

        if annotation is inspect.Parameter.empty or annotation is Any:
            pass
        elif isinstance(annotation, str):
            type_name = annotation
        elif isinstance(annotation, ForwardRef):
            type_name = annotation.__forward_arg__
        elif isinstance(annotation, type):
            cls = annotation
            type_name = type_name_of(annotation)
        elif get_origin(annotation) is not None:
            # List[int]、Dict[str, Any] 之类的泛型别名
            origin = get_origin(annotation)
            if isinstance(origin, type):
                cls = origin
                type_name = type_name_of(origin)

        return ParameterInfo(
            name=name,
            annotation=cls,
            type_name=type_name,
            allows_null=allows_null,
            has_default=has_default,
            default=default,
            keyword_only=param.kind == inspect.Parameter.KEYWORD_ONLY,
            positional_only=param.kind == inspect.Parameter.POSITIONAL_ONLY,
        )
