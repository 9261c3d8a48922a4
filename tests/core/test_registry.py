"""服务注册中心的单元测试"""

from unittest.mock import Mock

import pytest

from gcdi.core.exceptions import CircularDependencyError, ServiceNotFoundError
from gcdi.core.registry import (
    CriticalityTier,
    Lifecycle,
    ServiceReference,
    ServiceRegistry,
    lazy_get,
)
from gcdi.core.stubs import Degraded, Resolved


class Service:
    pass


class ServiceStub:
    def __init__(self, error):
        self.error = error

    def is_degraded(self):
        return True

    def original_error(self):
        return self.error


@pytest.fixture
def registry():
    """创建注册中心"""
    return ServiceRegistry()


class TestRegistration:
    """测试服务注册"""

    def test_register_does_not_call_factory(self, registry):
        """测试注册时不执行工厂"""
        factory = Mock(return_value=Service())
        registry.register("svc", Lifecycle.SINGLETON, factory)

        assert registry.has("svc")
        assert not registry.is_instantiated("svc")
        factory.assert_not_called()

    def test_register_non_callable_factory(self, registry):
        """测试工厂不可调用时报错"""
        with pytest.raises(ValueError):
            registry.register("svc", Lifecycle.SINGLETON, "not callable")

    def test_critical_requires_stub_factory(self, registry):
        """测试关键服务必须提供桩工厂"""
        with pytest.raises(ValueError, match="stub factory"):
            registry.register("svc", Lifecycle.SINGLETON, Service, tier=CriticalityTier.CRITICAL)

    def test_reregister_drops_cached_instance(self, registry):
        """测试重复注册会丢弃已缓存的实例"""
        registry.register("svc", Lifecycle.SINGLETON, Service)
        first = registry.get("svc")

        registry.register("svc", Lifecycle.SINGLETON, Service)

        assert registry.get("svc") is not first

    def test_register_instance(self, registry):
        """测试注册现成实例"""
        instance = Service()
        registry.register_instance("svc", instance)

        assert registry.is_instantiated("svc")
        assert registry.get("svc") is instance

    def test_definitions(self, registry):
        """测试导出服务定义"""
        registry.register("a", Lifecycle.SINGLETON, Service)
        registry.register("b", Lifecycle.PROTOTYPE, Service)

        names = [d.name for d in registry.definitions()]
        assert names == ["a", "b"]
        assert registry.definition("a").is_singleton
        assert not registry.definition("b").is_singleton

    def test_definition_unknown(self, registry):
        """测试获取未注册服务的定义"""
        with pytest.raises(ServiceNotFoundError):
            registry.definition("missing")


class TestLifecycle:
    """测试生命周期"""

    def test_singleton_identity(self, registry):
        """测试单例两次获取为同一实例"""
        factory = Mock(side_effect=Service)
        registry.register("svc", Lifecycle.SINGLETON, factory)

        assert registry.get("svc") is registry.get("svc")
        assert factory.call_count == 1

    def test_prototype_distinct(self, registry):
        """测试原型每次获取都是新实例"""
        registry.register("svc", Lifecycle.PROTOTYPE, Service)

        first = registry.get("svc")
        second = registry.get("svc")

        assert isinstance(first, Service)
        assert first is not second

    def test_alias_follows_target(self, registry):
        """测试别名返回目标服务"""
        registry.register("database_connector", Lifecycle.SINGLETON, Service)
        registry.register_alias("database", "database_connector")

        assert registry.get("database") is registry.get("database_connector")

    def test_unknown_service(self, registry):
        """测试获取未注册服务"""
        with pytest.raises(ServiceNotFoundError) as exc_info:
            registry.get("missing")

        assert exc_info.value.service_name == "missing"

    def test_reset_discards_everything(self, registry):
        """测试 reset 丢弃定义和单例"""
        registry.register("svc", Lifecycle.SINGLETON, Service)
        registry.get("svc")

        registry.reset()

        assert not registry.has("svc")
        assert not registry.is_instantiated("svc")

    def test_clear_instances_keeps_definitions(self, registry):
        """测试 clear_instances 只丢弃单例"""
        registry.register("svc", Lifecycle.SINGLETON, Service)
        first = registry.get("svc")

        registry.clear_instances()

        assert registry.has("svc")
        assert registry.get("svc") is not first


class TestDegradation:
    """测试关键服务降级"""

    def test_critical_failure_returns_stub(self, registry):
        """测试关键服务工厂失败时返回桩实现"""
        error = RuntimeError("config file missing")

        def factory():
            raise error

        registry.register("config", Lifecycle.SINGLETON, factory,
                          tier=CriticalityTier.CRITICAL, stub_factory=ServiceStub)

        resolution = registry.resolve("config")

        assert isinstance(resolution, Degraded)
        assert resolution.is_degraded
        assert resolution.error is error
        assert isinstance(resolution.instance, ServiceStub)
        assert resolution.instance.original_error() is error

    def test_degraded_singleton_is_cached(self, registry):
        """测试降级的单例会被缓存，工厂不再重试"""
        factory = Mock(side_effect=RuntimeError("boom"))
        registry.register("config", Lifecycle.SINGLETON, factory,
                          tier=CriticalityTier.CRITICAL, stub_factory=ServiceStub)

        assert registry.get("config") is registry.get("config")
        assert factory.call_count == 1

    def test_other_services_still_work(self, registry):
        """测试关键服务降级后其他服务不受影响"""
        registry.register("config", Lifecycle.SINGLETON, Mock(side_effect=OSError("denied")),
                          tier=CriticalityTier.CRITICAL, stub_factory=ServiceStub)
        registry.register("svc", Lifecycle.SINGLETON, Service)

        registry.get("config")

        assert isinstance(registry.get("svc"), Service)

    def test_standard_failure_propagates(self, registry):
        """测试普通服务工厂失败时异常向上传播"""
        registry.register("svc", Lifecycle.SINGLETON, Mock(side_effect=KeyError("x")))

        with pytest.raises(KeyError):
            registry.get("svc")
        assert not registry.is_instantiated("svc")

    def test_resolved_result(self, registry):
        """测试正常解析返回 Resolved"""
        registry.register("svc", Lifecycle.SINGLETON, Service)

        resolution = registry.resolve("svc")

        assert isinstance(resolution, Resolved)
        assert not resolution.is_degraded
        assert resolution.error is None


class TestReentrancy:
    """测试工厂之间的循环请求"""

    def test_service_cycle_detected(self, registry):
        """测试工厂相互请求时报告服务链"""
        registry.register("a", Lifecycle.SINGLETON, lambda: registry.get("b"))
        registry.register("b", Lifecycle.SINGLETON, lambda: registry.get("a"))

        with pytest.raises(CircularDependencyError) as exc_info:
            registry.get("a")

        assert exc_info.value.chain == "a -> b -> a"

    def test_registry_usable_after_cycle(self, registry):
        """测试检测到循环后注册中心状态恢复"""
        registry.register("a", Lifecycle.SINGLETON, lambda: registry.get("a"))
        registry.register("svc", Lifecycle.SINGLETON, Service)

        with pytest.raises(CircularDependencyError):
            registry.get("a")

        assert isinstance(registry.get("svc"), Service)


class TestServiceReference:
    """测试服务引用"""

    def test_lazy_get(self):
        """测试 lazy_get 创建引用"""
        reference = lazy_get("logger")

        assert isinstance(reference, ServiceReference)
        assert reference.service_name == "logger"
