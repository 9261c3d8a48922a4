"""依赖注入容器

进程入口处创建一次、显式向下传递的容器上下文对象，组合了
服务注册中心、类型到服务映射、自动装配策略和解析器。

状态: unbuilt -> built -> (reset) -> unbuilt。首次使用时执行 configurator 完成注册。
"""

from typing import Any, Callable, Dict, Mapping, Optional, Union

from gcdi.core.autowire import AutoWireResolver
from gcdi.core.exceptions import ServiceNotFoundError, TypeNotFoundError
from gcdi.core.logger import Logger, get_logger
from gcdi.core.policy import DEFAULT_AUTOWIRE, AutoWirePolicy, PrimitiveHeuristics, default_heuristics
from gcdi.core.reflection import ClassReflector, load_type, type_name_of
from gcdi.core.registry import CriticalityTier, Lifecycle, ServiceDefinition, ServiceRegistry
from gcdi.core.resolution import MAX_DEPTH, ResolutionContext
from gcdi.core.stubs import Resolution, Resolved
from gcdi.core.type_map import TypeServiceMap


class Container:
    """依赖注入容器"""

    def __init__(
        self,
        configurator: Optional[Callable[['Container'], None]] = None,
        policy: Optional[AutoWirePolicy] = None,
        heuristics: Optional[PrimitiveHeuristics] = None,
        max_depth: int = MAX_DEPTH,
        logger: Optional[Logger] = None,
        reflector: Optional[ClassReflector] = None,
    ):
        """初始化容器

        Args:
            configurator: 构建时执行的注册函数，reset 后再次使用时会重新执行
            policy: 自动装配资格策略，默认只允许 gcdi 包
            heuristics: 基本类型参数名规则表
            max_depth: 自动装配最大深度
            logger: 日志记录器
            reflector: 构造函数内省工具
        """
        self.logger = logger or get_logger("gcdi.container")
        self.registry = ServiceRegistry(self.logger)
        self.type_map = TypeServiceMap()
        self.heuristics = heuristics or default_heuristics()
        self.max_depth = max_depth
        self.resolver = AutoWireResolver(self, reflector, self.logger)
        self._configurator = configurator
        self._policy = policy
        self._policy_factory: Optional[Callable[[], AutoWirePolicy]] = None
        self._built = False

    @property
    def is_built(self) -> bool:
        return self._built

    def build(self) -> 'Container':
        """执行注册（仅一次，reset 后可再次执行）"""
        if not self._built:
            self._built = True
            if self._configurator is not None:
                self.logger.debug("Building container")
                try:
                    self._configurator(self)
                except Exception:
                    self._built = False
                    raise
        return self

    @property
    def policy(self) -> AutoWirePolicy:
        """自动装配策略，可由工厂惰性构建（例如读取配置服务）"""
        if self._policy is None:
            if self._policy_factory is not None:
                self._policy = self._policy_factory()
            else:
                self._policy = AutoWirePolicy.from_dict(DEFAULT_AUTOWIRE)
        return self._policy

    @policy.setter
    def policy(self, policy: AutoWirePolicy) -> None:
        self._policy = policy

    def set_policy_factory(self, factory: Callable[[], AutoWirePolicy]) -> None:
        self._policy_factory = factory
        self._policy = None

    # 注册

    def register(
        self,
        name: str,
        lifecycle: Lifecycle = Lifecycle.SINGLETON,
        factory: Optional[Callable[[], Any]] = None,
        tier: CriticalityTier = CriticalityTier.STANDARD,
        stub_factory: Optional[Callable[[BaseException], Any]] = None,
    ) -> ServiceDefinition:
        """注册命名服务（工厂在首次 get 时才执行）"""
        self.build()
        return self.registry.register(name, lifecycle, factory, tier, stub_factory)

    def register_class(
        self,
        name: str,
        cls: Union[str, type],
        lifecycle: Lifecycle = Lifecycle.SINGLETON,
        parameters: Optional[Mapping[str, Any]] = None,
        tier: CriticalityTier = CriticalityTier.STANDARD,
        stub_factory: Optional[Callable[[BaseException], Any]] = None,
    ) -> ServiceDefinition:
        """注册由自动装配构造的类，parameters 为显式构造参数

        Args:
            name: 服务名
            cls: 类或完整类型名
            lifecycle: 生命周期
            parameters: 显式构造参数（可包含 lazy_get 引用）
            tier: 关键级别
            stub_factory: 关键服务的桩工厂
        """
        self.build()
        overrides = dict(parameters or {})
        return self.registry.register(
            name,
            lifecycle,
            lambda: self.create_with_overrides(cls, overrides),
            tier,
            stub_factory,
            explicit_parameters=overrides,
        )

    def register_instance(self, name: str, instance: Any) -> ServiceDefinition:
        self.build()
        return self.registry.register_instance(name, instance)

    def register_alias(self, alias: str, target: str) -> ServiceDefinition:
        self.build()
        return self.registry.register_alias(alias, target)

    def register_type_alias(self, type_ref: Union[str, type], service_name: str) -> None:
        """登记类型 -> 服务映射，自动装配时该类型的参数从注册中心获取"""
        self.build()
        self.type_map.register(type_ref, service_name)

    def register_explicit_parameters(self, type_ref: Union[str, type], parameters: Mapping[str, Any]) -> None:
        """登记类型的构造参数覆盖，跳过这些参数的自动装配"""
        self.build()
        self.resolver.register_explicit_parameters(type_ref, parameters)

    # 查找

    def has(self, name: str) -> bool:
        self.build()
        return self.registry.has(name)

    def get(self, name: str) -> Any:
        """获取服务：已注册的名称走注册中心，否则按类型名自动装配

        Raises:
            ServiceNotFoundError: 未注册且不是可加载的类型名
        """
        self.build()
        if self.registry.has(name):
            return self.registry.get(name)
        try:
            cls = load_type(name)
        except TypeNotFoundError as e:
            raise ServiceNotFoundError(name, e) from e
        return self.auto_wire(cls)

    def resolve(self, name: str) -> Resolution:
        """获取带标签的解析结果 (Resolved / Degraded)"""
        self.build()
        if self.registry.has(name):
            return self.registry.resolve(name)
        return Resolved(self.get(name))

    def auto_wire(self, type_ref: Union[str, type]) -> Any:
        """自动装配类：已注册或已映射的类型优先返回注册的服务"""
        self.build()
        type_name = type_ref if isinstance(type_ref, str) else type_name_of(type_ref)
        if self.registry.has(type_name):
            return self.registry.get(type_name)
        service_name = self.type_map.lookup(type_name)
        if service_name is not None:
            return self.registry.get(service_name)
        return self.resolver.resolve(type_ref, ResolutionContext(self.max_depth))

    def create_with_overrides(self, type_ref: Union[str, type], overrides: Mapping[str, Any]) -> Any:
        """构造类，overrides 中的参数直接使用，其余参数自动装配"""
        self.build()
        return self.resolver.resolve(type_ref, ResolutionContext(self.max_depth), overrides=overrides)

    def describe(self) -> Dict[str, Any]:
        """导出注册信息（服务与类型映射）"""
        self.build()
        return {
            "services": {
                d.name: {
                    "lifecycle": d.lifecycle.value,
                    "tier": d.tier.value,
                    "instantiated": self.registry.is_instantiated(d.name),
                    "parameters": sorted(d.explicit_parameters),
                }
                for d in self.registry.definitions()
            },
            "type_aliases": dict(self.type_map.items()),
        }

    def reset(self) -> None:
        """丢弃全部注册和缓存的单例，下次使用时重新构建"""
        self.registry.reset()
        self.type_map.clear()
        self.resolver.clear()
        if self._policy_factory is not None:
            self._policy = None
        self._built = False
        self.logger.debug("Container reset")
