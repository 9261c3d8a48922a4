"""服务定位器的单元测试"""

from unittest.mock import Mock

import pytest

from gcdi.core.container import Container
from gcdi.core.exceptions import CircularDependencyError, ServiceUnavailableError
from gcdi.core.locator import ServiceLocator
from gcdi.core.metadata import CoreFieldsMetadata
from gcdi.core.policy import AutoWirePolicy
from gcdi.core.registry import CriticalityTier, Lifecycle
from gcdi.core.stubs import DatabaseConnectorStub, Degraded


class Greeter:
    def __init__(self, greeting: str = "hello"):
        self.greeting = greeting


class Ping:
    def __init__(self, pong: "Pong"):
        self.pong = pong


class Pong:
    def __init__(self, ping: Ping):
        self.ping = ping


@pytest.fixture
def container():
    container = Container(policy=AutoWirePolicy([__name__]))
    container.register_instance("logger", Mock())
    container.register_instance("config", Mock())
    container.register("core_fields_metadata", Lifecycle.SINGLETON, CoreFieldsMetadata)
    return container


@pytest.fixture
def locator(container):
    return ServiceLocator(container)


class TestServiceAccessors:
    """测试命名服务访问"""

    def test_typed_accessors(self, locator, container):
        """测试各服务访问方法"""
        assert locator.get_logger() is container.get("logger")
        assert locator.get_config() is container.get("config")
        assert isinstance(locator.get_core_fields_metadata(), CoreFieldsMetadata)

    def test_missing_service_is_unavailable(self, locator):
        """测试未注册的服务转换为 ServiceUnavailableError"""
        with pytest.raises(ServiceUnavailableError) as exc_info:
            locator.get_metadata_engine()

        error = exc_info.value
        assert error.message.startswith("Metadata service unavailable:")
        assert error.context["service_name"] == "metadata_engine"
        assert error.cause is not None

    def test_failing_factory_is_unavailable(self, locator, container):
        """测试工厂失败时保留原始原因"""
        cause = RuntimeError("cannot build")
        container.register("mailer", Lifecycle.SINGLETON, Mock(side_effect=cause))

        with pytest.raises(ServiceUnavailableError) as exc_info:
            locator.get("mailer")

        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause

    def test_has_service(self, locator):
        """测试 has_service"""
        assert locator.has_service("logger")
        assert not locator.has_service("mailer")


class TestDatabaseConnector:
    """测试数据库连接器访问"""

    def test_real_connector(self, locator, container):
        """测试正常的连接器直接返回"""
        connector = Mock()
        connector.is_degraded.return_value = False
        container.register_instance("database_connector", connector)

        assert locator.get_database_connector() is connector

    def test_bare_mock_connector(self, locator, container):
        """测试未配置任何返回值的 mock 连接器按正常服务返回"""
        connector = Mock()
        container.register_instance("database_connector", connector)

        assert locator.get_database_connector() is connector
        connector.is_degraded.assert_not_called()

    def test_plain_object_connector(self, locator, container):
        """测试没有降级接口的对象按正常服务返回"""
        connector = object()
        container.register_instance("database_connector", connector)

        assert locator.get_database_connector() is connector

    def test_missing_connector_is_unavailable(self, locator):
        """测试未注册的连接器转换为 ServiceUnavailableError"""
        with pytest.raises(ServiceUnavailableError) as exc_info:
            locator.get_database_connector()

        assert exc_info.value.context["service_name"] == "database_connector"

    def test_degraded_connector_raises(self, locator, container):
        """测试降级的连接器报告不可用"""
        original = ConnectionError("refused")
        container.register(
            "database_connector",
            Lifecycle.SINGLETON,
            Mock(side_effect=original),
            tier=CriticalityTier.CRITICAL,
            stub_factory=lambda e: DatabaseConnectorStub(Mock(), e),
        )

        with pytest.raises(ServiceUnavailableError) as exc_info:
            locator.get_database_connector()

        assert exc_info.value.cause is original
        assert isinstance(locator.resolve("database_connector"), Degraded)


class TestCreate:
    """测试自动装配入口"""

    def test_create(self, locator):
        """测试自动装配任意类"""
        assert locator.create(Greeter).greeting == "hello"

    def test_create_with_parameters(self, locator):
        """测试带参数构造"""
        assert locator.create(Greeter, {"greeting": "hi"}).greeting == "hi"

    def test_resolution_errors_keep_type(self, locator):
        """测试解析错误以原始类型抛出"""
        with pytest.raises(CircularDependencyError) as exc_info:
            locator.create(Ping)

        assert exc_info.value.chain == "Ping -> Pong -> Ping"

    def test_resolve_wraps_errors(self, locator):
        """测试 resolve 失败时转换为 ServiceUnavailableError"""
        with pytest.raises(ServiceUnavailableError):
            locator.resolve("no_such_service")

    def test_reset(self, locator, container):
        """测试 reset 丢弃容器注册"""
        locator.reset()

        assert not locator.has_service("logger")
