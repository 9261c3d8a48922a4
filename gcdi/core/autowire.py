"""自动装配解析器

通过内省构造函数，递归构造从未注册过的类。每个参数依次查询：
显式参数覆盖 -> 基本类型名称规则 -> 类型到服务映射 -> 循环检测 -> 资格判定 -> 递归构造。
"""

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Tuple, Union

from gcdi.core.exceptions import (
    AutoWireNotAllowedError,
    CircularDependencyError,
    ContainerException,
    InstantiationError,
    ServiceResolutionError,
    UnresolvableParameterError,
)
from gcdi.core.logger import Logger, get_logger
from gcdi.core.reflection import ClassReflector, ParameterInfo, load_type, type_name_of
from gcdi.core.registry import ServiceReference
from gcdi.core.resolution import ResolutionContext

if TYPE_CHECKING:
    from gcdi.core.container import Container

_MISSING = object()


class AutoWireResolver:
    """自动装配解析器"""

    def __init__(
        self,
        container: 'Container',
        reflector: Optional[ClassReflector] = None,
        logger: Optional[Logger] = None,
    ):
        self.container = container
        self.reflector = reflector or ClassReflector()
        self.logger = logger or get_logger("gcdi.autowire")
        self._explicit_parameters: Dict[str, Dict[str, Any]] = {}

    def register_explicit_parameters(self, type_ref: Union[str, type], parameters: Mapping[str, Any]) -> None:
        """登记构造参数覆盖，对该类及其子类生效

        Args:
            type_ref: 类或完整类型名
            parameters: 参数名 -> 值（可为 ServiceReference）
        """
        type_name = type_ref if isinstance(type_ref, str) else type_name_of(type_ref)
        self._explicit_parameters.setdefault(type_name, {}).update(parameters)

    def explicit_parameters_for(self, cls: type) -> Dict[str, Any]:
        """合并类继承链上登记的参数覆盖，子类优先"""
        merged: Dict[str, Any] = {}
        for base in reversed(cls.__mro__):
            merged.update(self._explicit_parameters.get(type_name_of(base), {}))
        return merged

    def clear(self) -> None:
        self._explicit_parameters.clear()

    def resolve(
        self,
        type_ref: Union[str, type],
        context: ResolutionContext,
        trigger: Optional[ParameterInfo] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """构造类型实例

        Args:
            type_ref: 类或完整类型名
            context: 当前解析上下文
            trigger: 触发本次解析的构造参数（顶层调用为 None）
            overrides: 本次调用的参数覆盖，优先于登记的显式参数

        Returns:
            构造出的实例；循环依赖且参数允许时返回 None 或默认值

        Raises:
            DepthLimitExceededError: 深度超限
            TypeNotFoundError: 类型不存在
            CircularDependencyError: 循环依赖且无 None/默认值可用
        """
        type_name = type_ref if isinstance(type_ref, str) else type_name_of(type_ref)

        context.check_depth(type_name)

        cls = type_ref if isinstance(type_ref, type) else load_type(type_ref)
        type_name = type_name_of(cls)

        if context.contains(type_name):
            return self._cycle_fallback(trigger, type_name, context)

        with context.enter(type_name):
            self.logger.debug("Auto-wiring class", type_name=type_name, depth=context.depth)

            explicit = self.explicit_parameters_for(cls)
            explicit.update(overrides or {})

            args, kwargs = [], {}
            for parameter in self.reflector.constructor_parameters(cls):
                if parameter.name in explicit:
                    value = self._materialize(explicit[parameter.name], parameter, type_name)
                else:
                    value = self.resolve_parameter(parameter, type_name, context)

                if parameter.keyword_only:
                    kwargs[parameter.name] = value
                else:
                    args.append(value)

            return self._instantiate(cls, type_name, args, kwargs, context)

    def resolve_parameter(self, parameter: ParameterInfo, owner: str, context: ResolutionContext) -> Any:
        """解析单个构造参数

        Args:
            parameter: 参数描述
            owner: 参数所属类的类型名
            context: 当前解析上下文
        """
        if parameter.is_builtin:
            return self._resolve_primitive(parameter, owner, context)

        type_name = parameter.type_name
        service_name = self.container.type_map.lookup(type_name)
        if service_name is not None:
            try:
                return self.container.registry.get(service_name)
            except Exception as e:
                found, value = self._fallback(parameter)
                if found:
                    self.logger.debug(
                        "Mapped service failed, using fallback",
                        parameter=parameter.name, service=service_name, error=str(e),
                    )
                    return value
                raise ServiceResolutionError(parameter.name, type_name, service_name, e).add_path(
                    context.render_chain(type_name)
                ) from e

        if context.contains(type_name):
            return self._cycle_fallback(parameter, type_name, context)

        target = parameter.annotation if parameter.annotation is not None else type_name
        if not self.container.policy.is_eligible(target):
            found, value = self._fallback(parameter)
            if found:
                self.logger.debug("Type not auto-wirable, using fallback", parameter=parameter.name,
                                  type_name=type_name)
                return value
            raise AutoWireNotAllowedError(parameter.name, type_name).add_path(
                context.render_chain(type_name)
            )

        return self.resolve(target, context, trigger=parameter)

    def _resolve_primitive(self, parameter: ParameterInfo, owner: str, context: ResolutionContext) -> Any:
        heuristics = self.container.heuristics
        if heuristics.has(parameter.name):
            return heuristics.resolve(parameter.name, self.container)
        if parameter.has_default:
            return parameter.default
        if parameter.allows_null:
            return None
        raise UnresolvableParameterError(parameter.name, owner).add_path(context.render_path())

    def _cycle_fallback(self, parameter: Optional[ParameterInfo], type_name: str, context: ResolutionContext) -> Any:
        if parameter is not None:
            found, value = self._fallback(parameter)
            if found:
                self.logger.debug("Circular dependency broken by fallback", parameter=parameter.name,
                                  type_name=type_name)
                return value

        chain = context.render_chain(type_name)
        raise CircularDependencyError(chain, {
            'parameter_name': parameter.name if parameter else None,
            'type_name': type_name,
            'resolution_stack': context.stack,
            'dependency_chain': context.full_chain(type_name),
        })

    @staticmethod
    def _fallback(parameter: ParameterInfo) -> Tuple[bool, Any]:
        if parameter.allows_null:
            return True, None
        if parameter.has_default:
            return True, parameter.default
        return False, _MISSING

    def _materialize(self, value: Any, parameter: ParameterInfo, owner: str) -> Any:
        if isinstance(value, ServiceReference):
            try:
                return self.container.registry.get(value.service_name)
            except Exception as e:
                raise ServiceResolutionError(parameter.name, owner, value.service_name, e) from e
        return value

    def _instantiate(self, cls: type, type_name: str, args: list, kwargs: dict, context: ResolutionContext) -> Any:
        try:
            return cls(*args, **kwargs)
        except ContainerException:
            raise
        except Exception as e:
            raise InstantiationError(type_name, e).add_path(context.render_path()) from e
