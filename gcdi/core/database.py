"""数据库连接器

容器中的基础服务之一。只负责按配置建立连接，持久化逻辑不在此处。"""

import sqlite3
from typing import Any, Dict, Optional

from gcdi.core.config import Config
from gcdi.core.exceptions import DatabaseException
from gcdi.core.interfaces import IDatabaseConnector
from gcdi.core.logger import Logger


class DatabaseConnector(IDatabaseConnector):
    """基于配置的数据库连接器（目前支持 sqlite）"""

    SUPPORTED_DRIVERS = ("sqlite",)

    def __init__(self, logger: Logger, config: Config):
        """初始化连接器并校验连接参数

        Args:
            logger: 日志记录器
            config: 配置源

        Raises:
            DatabaseException: 连接参数无效时抛出
        """
        self.logger = logger
        self.db_params: Dict[str, Any] = config.get_database_params()
        self._connection: Optional[sqlite3.Connection] = None
        self._validate_params()

    def _validate_params(self) -> None:
        driver = self.db_params.get("driver")
        if driver not in self.SUPPORTED_DRIVERS:
            raise DatabaseException(
                f"Unsupported database driver: {driver}",
                details=f"supported: {', '.join(self.SUPPORTED_DRIVERS)}",
            )
        if not self.db_params.get("path"):
            raise DatabaseException("Database path is not configured")

    def get_connection(self) -> sqlite3.Connection:
        """获取（惰性创建）数据库连接

        Raises:
            DatabaseException: 连接失败时抛出
        """
        if self._connection is None:
            path = str(self.db_params["path"])
            try:
                self._connection = sqlite3.connect(path)
            except sqlite3.Error as e:
                self.logger.error("Database connection failed", path=path, error=str(e))
                raise DatabaseException(f"Database connection failed: {e}", details=path)
            self.logger.debug("Database connection opened", path=path)
        return self._connection

    def test_connection(self) -> bool:
        try:
            self.get_connection().execute("SELECT 1")
            return True
        except (DatabaseException, sqlite3.Error) as e:
            self.logger.warning("Database connection test failed", error=str(e))
            return False

    def table_exists(self, table_name: str) -> bool:
        cursor = self.get_connection().execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return cursor.fetchone() is not None

    def get_params(self) -> Dict[str, Any]:
        return dict(self.db_params)

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def is_degraded(self) -> bool:
        return False

    def original_error(self) -> Optional[BaseException]:
        return None
