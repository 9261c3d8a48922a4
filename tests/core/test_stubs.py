"""降级桩实现的单元测试"""

from unittest.mock import Mock

import pytest

from gcdi.core.config import Config
from gcdi.core.database import DatabaseConnector
from gcdi.core.exceptions import ServiceUnavailableError
from gcdi.core.interfaces import IConfigSource, IDatabaseConnector, IDegradable, IMetadataProvider
from gcdi.core.logger import Logger
from gcdi.core.metadata import MetadataEngine
from gcdi.core.stubs import (
    ConfigStub,
    DatabaseConnectorStub,
    Degraded,
    LoggerStub,
    MetadataEngineStub,
    Resolved,
)


@pytest.fixture
def logger():
    return Mock(spec=Logger)


@pytest.fixture
def error():
    return RuntimeError("original failure")


class TestTaggedResults:
    """测试带标签的解析结果"""

    def test_resolved(self):
        """测试 Resolved"""
        resolution = Resolved("value")

        assert resolution.instance == "value"
        assert not resolution.is_degraded
        assert resolution.error is None

    def test_degraded(self, error):
        """测试 Degraded"""
        resolution = Degraded("stub", error)

        assert resolution.instance == "stub"
        assert resolution.is_degraded
        assert resolution.error is error


class TestConfigStub:
    """测试配置降级"""

    def test_contract(self, logger, error):
        """测试保持配置接口并携带原始异常"""
        stub = ConfigStub(logger, error)

        assert isinstance(stub, Config)
        assert isinstance(stub, IConfigSource)
        assert isinstance(stub, IDegradable)
        assert stub.is_degraded()
        assert stub.original_error() is error
        logger.warning.assert_called_once()

    def test_defaults(self, logger, error):
        """测试读取返回默认值"""
        stub = ConfigStub(logger, error)

        assert stub.get("database.driver") == "sqlite"
        assert stub.get("metadata.models_dir") == "src/models"
        assert stub.get("missing.key", "fallback") == "fallback"
        assert stub.get_autowire_settings()["allow"] == ["gcdi"]

    def test_set_is_memory_only(self, logger, error):
        """测试修改只保存在内存中"""
        stub = ConfigStub(logger, error)

        stub.set("app.debug", True)

        assert stub.get("app.debug") is True
        assert logger.warning.call_count == 2
        assert not Config.get_default_config()["app"]["debug"]

    def test_write_refused(self, logger, error, tmp_path):
        """测试拒绝写入文件"""
        stub = ConfigStub(logger, error)

        with pytest.raises(ServiceUnavailableError) as exc_info:
            stub.write(tmp_path / "gcdi.yaml")

        assert exc_info.value.cause is error
        assert not (tmp_path / "gcdi.yaml").exists()
        assert not stub.config_file_exists()

    def test_requires_error(self, logger):
        """测试桩实现必须携带原始异常"""
        with pytest.raises(ValueError):
            ConfigStub(logger, None)


class TestDatabaseConnectorStub:
    """测试数据库降级"""

    def test_contract(self, logger, error):
        """测试保持连接器接口"""
        stub = DatabaseConnectorStub(logger, error)

        assert isinstance(stub, DatabaseConnector)
        assert isinstance(stub, IDatabaseConnector)
        assert stub.is_degraded()
        assert stub.original_error() is error

    def test_operations(self, logger, error):
        """测试所有操作都报告不可用"""
        stub = DatabaseConnectorStub(logger, error)

        with pytest.raises(ServiceUnavailableError) as exc_info:
            stub.get_connection()

        assert exc_info.value.cause is error
        assert "original failure" in exc_info.value.message
        assert stub.test_connection() is False
        assert stub.table_exists("users") is False
        assert stub.get_params() == {}


class TestMetadataEngineStub:
    """测试元数据降级"""

    def test_empty_results(self, logger, error):
        """测试查询返回空结果"""
        stub = MetadataEngineStub(logger, error)

        assert isinstance(stub, MetadataEngine)
        assert isinstance(stub, IMetadataProvider)
        assert stub.is_degraded()
        assert stub.original_error() is error
        assert stub.load_all_metadata() == {"models": {}, "relationships": {}}
        assert stub.get_model_metadata("User") == {}
        assert stub.get_available_models() == []


class TestLoggerStub:
    """测试日志降级"""

    def test_contract(self, error):
        """测试保持日志接口"""
        stub = LoggerStub(error)

        assert isinstance(stub, Logger)
        assert stub.is_degraded()
        assert stub.original_error() is error
        assert stub.config.level == "WARNING"
        assert stub.config.log_dir is None

        stub.info("ignored_event", key="value")
        stub.warning("visible_event", key="value")

    def test_requires_error(self):
        """测试桩实现必须携带原始异常"""
        with pytest.raises(ValueError):
            LoggerStub(None)
