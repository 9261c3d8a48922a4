"""服务注册中心

存储命名服务定义（生命周期 + 工厂），惰性实例化并缓存单例，原型服务每次创建新实例。
关键服务的工厂失败时由桩实现替代，结果以 Resolved / Degraded 标记返回。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from gcdi.core.exceptions import CircularDependencyError, ServiceNotFoundError
from gcdi.core.logger import Logger, get_logger
from gcdi.core.stubs import Degraded, Resolution, Resolved


class Lifecycle(Enum):
    """服务生命周期"""
    SINGLETON = "singleton"    # 注册中心生命周期内只创建一次
    PROTOTYPE = "prototype"    # 每次获取都调用工厂


class CriticalityTier(Enum):
    """服务关键级别"""
    STANDARD = "standard"      # 失败直接向调用方传播
    CRITICAL = "critical"      # 失败时降级为桩实现


@dataclass(frozen=True)
class ServiceDefinition:
    """服务定义，引导阶段创建后不再修改"""
    name: str
    lifecycle: Lifecycle
    factory: Callable[[], Any]
    tier: CriticalityTier = CriticalityTier.STANDARD
    stub_factory: Optional[Callable[[BaseException], Any]] = None
    explicit_parameters: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_singleton(self) -> bool:
        return self.lifecycle is Lifecycle.SINGLETON


@dataclass(frozen=True)
class ServiceReference:
    """对已注册服务的惰性引用，在构造时才从注册中心获取"""
    service_name: str


def lazy_get(service_name: str) -> ServiceReference:
    """创建服务引用，用于显式构造参数"""
    return ServiceReference(service_name)


class ServiceRegistry:
    """服务注册中心"""

    def __init__(self, logger: Optional[Logger] = None):
        self._definitions: Dict[str, ServiceDefinition] = {}
        self._instances: Dict[str, Resolution] = {}
        self._resolving: List[str] = []
        self.logger = logger or get_logger("gcdi.registry")

    def register(
        self,
        name: str,
        lifecycle: Lifecycle,
        factory: Callable[[], Any],
        tier: CriticalityTier = CriticalityTier.STANDARD,
        stub_factory: Optional[Callable[[BaseException], Any]] = None,
        explicit_parameters: Optional[Mapping[str, Any]] = None,
    ) -> ServiceDefinition:
        """注册服务（工厂不会被立即执行）

        重复注册同名服务会替换原定义并丢弃已缓存的实例。

        Args:
            name: 服务名
            lifecycle: 生命周期
            factory: 无参工厂函数
            tier: 关键级别
            stub_factory: 关键服务的桩工厂，接收原始异常
            explicit_parameters: 构造参数覆盖（describe() 中列出参数名）

        Returns:
            服务定义

        Raises:
            ValueError: 工厂不可调用，或关键服务缺少桩工厂
        """
        if not callable(factory):
            raise ValueError(f"Factory for service '{name}' is not callable")
        if tier is CriticalityTier.CRITICAL and stub_factory is None:
            raise ValueError(f"Critical service '{name}' requires a stub factory")

        definition = ServiceDefinition(
            name=name,
            lifecycle=lifecycle,
            factory=factory,
            tier=tier,
            stub_factory=stub_factory,
            explicit_parameters=dict(explicit_parameters or {}),
        )
        self._definitions[name] = definition
        self._instances.pop(name, None)
        self.logger.debug("Service registered", service=name, lifecycle=lifecycle.value, tier=tier.value)
        return definition

    def register_instance(self, name: str, instance: Any) -> ServiceDefinition:
        """注册现成实例作为单例"""
        definition = self.register(name, Lifecycle.SINGLETON, lambda: instance)
        self._instances[name] = Resolved(instance)
        return definition

    def register_alias(self, alias: str, target: str) -> ServiceDefinition:
        """注册服务别名，生命周期由目标服务决定"""
        return self.register(alias, Lifecycle.PROTOTYPE, lambda: self.resolve(target).instance)

    def has(self, name: str) -> bool:
        return name in self._definitions

    def definition(self, name: str) -> ServiceDefinition:
        if name not in self._definitions:
            raise ServiceNotFoundError(name)
        return self._definitions[name]

    def definitions(self) -> List[ServiceDefinition]:
        return list(self._definitions.values())

    def is_instantiated(self, name: str) -> bool:
        """单例是否已创建"""
        return name in self._instances

    def resolve(self, name: str) -> Resolution:
        """解析服务，返回带标签的结果

        Args:
            name: 服务名

        Returns:
            Resolved 或 Degraded

        Raises:
            ServiceNotFoundError: 服务未注册
            CircularDependencyError: 工厂在创建过程中再次请求自身
        """
        if name in self._instances:
            return self._instances[name]

        definition = self.definition(name)

        if name in self._resolving:
            chain = " -> ".join(self._resolving[self._resolving.index(name):] + [name])
            raise CircularDependencyError(chain, {'service_name': name, 'service_chain': chain})

        self._resolving.append(name)
        try:
            resolution = self._instantiate(definition)
        finally:
            self._resolving.pop()

        if definition.is_singleton:
            self._instances[name] = resolution
            self.logger.debug("Singleton instantiated", service=name, degraded=resolution.is_degraded)
        return resolution

    def get(self, name: str) -> Any:
        """获取服务实例"""
        return self.resolve(name).instance

    def _instantiate(self, definition: ServiceDefinition) -> Resolution:
        try:
            instance = definition.factory()
        except Exception as e:
            if definition.tier is CriticalityTier.CRITICAL:
                self.logger.warning(
                    "Service initialization failed, using stub",
                    service=definition.name,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                return Degraded(definition.stub_factory(e), e)
            self.logger.error(
                "Service initialization failed",
                service=definition.name,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise
        return Resolved(instance)

    def clear_instances(self) -> None:
        """丢弃所有已缓存的单例"""
        self._instances.clear()

    def reset(self) -> None:
        """丢弃全部定义和缓存的单例"""
        self._definitions.clear()
        self._instances.clear()
        self._resolving.clear()
        self.logger.debug("Service registry reset")
