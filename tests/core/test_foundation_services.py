"""基础服务（数据库连接器、元数据引擎）的单元测试"""

from unittest.mock import Mock

import pytest

from gcdi.core.database import DatabaseConnector
from gcdi.core.exceptions import DatabaseException, MetadataException
from gcdi.core.metadata import CoreFieldsMetadata, MetadataEngine


def make_config(values):
    """创建按点号路径返回值的配置 mock"""
    config = Mock()
    config.get.side_effect = lambda key, default=None: values.get(key, default)
    config.get_database_params.return_value = dict(values.get("database", {}))
    return config


class TestDatabaseConnector:
    """测试数据库连接器"""

    def test_connection(self, tmp_path):
        """测试惰性连接与表检查"""
        config = make_config({"database": {"driver": "sqlite", "path": str(tmp_path / "app.sqlite")}})
        connector = DatabaseConnector(Mock(), config)

        assert connector._connection is None
        assert connector.test_connection()
        connector.get_connection().execute("CREATE TABLE users (id INTEGER)")
        assert connector.table_exists("users")
        assert not connector.table_exists("orders")
        connector.close()

    def test_unsupported_driver(self):
        """测试不支持的驱动"""
        with pytest.raises(DatabaseException, match="Unsupported database driver"):
            DatabaseConnector(Mock(), make_config({"database": {"driver": "oracle", "path": "x"}}))

    def test_missing_path(self):
        """测试未配置数据库路径"""
        with pytest.raises(DatabaseException):
            DatabaseConnector(Mock(), make_config({"database": {"driver": "sqlite"}}))

    def test_params_are_copied(self, tmp_path):
        """测试 get_params 返回副本"""
        config = make_config({"database": {"driver": "sqlite", "path": str(tmp_path / "a.sqlite")}})
        connector = DatabaseConnector(Mock(), config)

        connector.get_params()["driver"] = "mysql"

        assert connector.get_params()["driver"] == "sqlite"
        assert not connector.is_degraded()


class TestMetadataEngine:
    """测试元数据引擎"""

    @pytest.fixture
    def dirs(self, tmp_path):
        models = tmp_path / "models"
        relationships = tmp_path / "relationships"
        models.mkdir()
        relationships.mkdir()
        return models, relationships

    def make_engine(self, models, relationships):
        config = make_config({
            "metadata.models_dir": str(models),
            "metadata.relationships_dir": str(relationships),
        })
        return MetadataEngine(Mock(), config, CoreFieldsMetadata())

    def test_load(self, dirs):
        """测试加载模型与关系并合并核心字段"""
        models, relationships = dirs
        (models / "post.yaml").write_text("fields:\n  title:\n    type: String\n", encoding="utf-8")
        (relationships / "author.yaml").write_text("name: post_author\nfrom: Post\n", encoding="utf-8")

        engine = self.make_engine(models, relationships)

        assert engine.get_available_models() == ["post"]
        post = engine.get_model_metadata("post")
        assert set(post["fields"]) >= {"title", "id", "created_at"}
        assert "post_author" in engine.get_cached_metadata()["relationships"]

    def test_missing_directories(self, tmp_path):
        """测试目录不存在时返回空元数据"""
        engine = self.make_engine(tmp_path / "none", tmp_path / "none2")

        assert engine.get_available_models() == []

    def test_unknown_model(self, dirs):
        """测试获取不存在的模型"""
        engine = self.make_engine(*dirs)

        with pytest.raises(MetadataException):
            engine.get_model_metadata("Missing")

    def test_not_a_mapping(self, dirs):
        """测试元数据文件不是字典"""
        models, relationships = dirs
        (models / "bad.yaml").write_text("- a\n", encoding="utf-8")

        with pytest.raises(MetadataException):
            self.make_engine(models, relationships)


class TestCoreFieldsMetadata:
    """测试核心字段"""

    def test_core_fields(self):
        """测试核心字段定义返回副本"""
        metadata = CoreFieldsMetadata()

        fields = metadata.get_core_fields()
        fields["id"]["type"] = "changed"

        assert metadata.get_core_fields()["id"]["type"] == "ID"
        assert metadata.is_core_field("created_at")
        assert not metadata.is_core_field("title")
