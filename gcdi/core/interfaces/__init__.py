"""GCDI 核心服务接口定义"""

from .config import IConfigSource
from .database import IDatabaseConnector
from .metadata import IMetadataProvider
from .degradable import IDegradable

__all__ = [
    'IConfigSource',
    'IDatabaseConnector',
    'IMetadataProvider',
    'IDegradable',
]
