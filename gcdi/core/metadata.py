"""元数据服务

CoreFieldsMetadata 提供每个模型共有的核心字段定义；
MetadataEngine 从 YAML 文件加载模型与关系元数据并合并核心字段。
"""

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from gcdi.core.config import Config
from gcdi.core.exceptions import MetadataException
from gcdi.core.interfaces import IMetadataProvider
from gcdi.core.logger import Logger


class CoreFieldsMetadata:
    """核心字段定义"""

    CORE_FIELDS = {
        "id": {"type": "ID", "required": True, "readOnly": True},
        "created_at": {"type": "DateTime", "readOnly": True},
        "updated_at": {"type": "DateTime", "readOnly": True},
        "deleted_at": {"type": "DateTime", "readOnly": True},
        "created_by": {"type": "ID", "readOnly": True},
        "updated_by": {"type": "ID", "readOnly": True},
    }

    def get_core_fields(self) -> Dict[str, Dict[str, Any]]:
        return copy.deepcopy(self.CORE_FIELDS)

    def is_core_field(self, field_name: str) -> bool:
        return field_name in self.CORE_FIELDS


class MetadataEngine(IMetadataProvider):
    """元数据引擎

    构造时即加载全部元数据；文件格式错误会使构造失败，由容器降级为桩实现。
    """

    def __init__(self, logger: Logger, config: Config, core_fields_metadata: CoreFieldsMetadata):
        self.logger = logger
        self.core_fields_metadata = core_fields_metadata
        self.models_dir = Path(config.get("metadata.models_dir", "src/models"))
        self.relationships_dir = Path(config.get("metadata.relationships_dir", "src/relationships"))
        self._metadata: Dict[str, Any] = self.load_all_metadata()

    def load_all_metadata(self) -> Dict[str, Any]:
        """加载模型与关系元数据

        Returns:
            {'models': {...}, 'relationships': {...}}

        Raises:
            MetadataException: 元数据文件无法解析时抛出
        """
        models = self._scan(self.models_dir)
        core_fields = self.core_fields_metadata.get_core_fields()
        for name, model in models.items():
            fields = model.setdefault("fields", {})
            for field_name, definition in core_fields.items():
                fields.setdefault(field_name, definition)

        relationships = self._scan(self.relationships_dir)
        self.logger.info(
            "Metadata loaded",
            models=len(models),
            relationships=len(relationships),
        )
        return {"models": models, "relationships": relationships}

    def _scan(self, directory: Path) -> Dict[str, Dict[str, Any]]:
        if not directory.is_dir():
            self.logger.warning("Metadata directory not found", path=str(directory))
            return {}

        result = {}
        for path in sorted(directory.glob("*.yaml")):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise MetadataException(f"Failed to load metadata file {path}: {e}", details=str(e))
            if not isinstance(data, dict):
                raise MetadataException(f"Metadata file {path} is not a mapping")
            result[data.get("name", path.stem)] = data
        return result

    def get_model_metadata(self, model_name: str) -> Dict[str, Any]:
        """获取单个模型的元数据

        Raises:
            MetadataException: 模型不存在时抛出
        """
        models = self._metadata["models"]
        if model_name not in models:
            raise MetadataException(f"Model metadata not found: {model_name}")
        return copy.deepcopy(models[model_name])

    def get_available_models(self) -> List[str]:
        return sorted(self._metadata["models"])

    def get_cached_metadata(self) -> Dict[str, Any]:
        return copy.deepcopy(self._metadata)

    def is_degraded(self) -> bool:
        return False

    def original_error(self) -> Optional[BaseException]:
        return None
