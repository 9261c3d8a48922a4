"""GCDI 异常体系"""

from typing import Any, Dict, List, Optional


class GCDIException(Exception):
    """基础异常类"""
    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


# 容器相关异常
class ContainerException(GCDIException):
    """容器异常

    context 中记录参数名、类型名、服务名等信息，
    便于从顶层异常还原完整的失败路径。
    """
    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, details=str(cause) if cause else None)
        self.context = context or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def add_path(self, path: str) -> 'ContainerException':
        """附加解析路径（只附加一次，保留最外层看到的完整路径）"""
        if 'resolution_path' not in self.context:
            self.context['resolution_path'] = path
            self.message = f"{self.message} (resolution path: {path})"
            self.args = (self.message,)
        return self


class ServiceNotFoundError(ContainerException):
    """服务未注册且无法自动装配"""
    def __init__(self, service_name: str, cause: Optional[BaseException] = None):
        super().__init__(
            f"Service '{service_name}' not registered and not auto-wirable",
            {'service_name': service_name},
            cause,
        )
        self.service_name = service_name


class TypeNotFoundError(ContainerException):
    """类型不存在（无法导入或内省）"""
    def __init__(self, type_name: str, cause: Optional[BaseException] = None):
        super().__init__(f"Class {type_name} does not exist", {'type_name': type_name}, cause)
        self.type_name = type_name


class CircularDependencyError(ContainerException):
    """循环依赖

    chain 是依赖链本身（如 "A -> B -> A"），消息在其前面加上
    "Circular dependency detected: " 前缀。
    """
    def __init__(self, chain: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(f"Circular dependency detected: {chain}", context)
        self.chain = chain


class DepthLimitExceededError(ContainerException):
    """自动装配深度超限"""
    def __init__(self, type_name: str, depth: int, stack: List[str], max_depth: int):
        super().__init__(
            f"Auto-wiring depth limit exceeded ({max_depth}) for class: {type_name}",
            {'type_name': type_name, 'depth': depth, 'resolution_stack': list(stack)},
        )
        self.type_name = type_name
        self.depth = depth
        self.stack = list(stack)


class UnresolvableParameterError(ContainerException):
    """基本类型参数无法解析"""
    def __init__(self, parameter_name: str, type_name: str):
        super().__init__(
            f"Cannot resolve primitive parameter '{parameter_name}' of {type_name} - "
            f"no mapping, default value, or nullable type",
            {'parameter_name': parameter_name, 'type_name': type_name},
        )
        self.parameter_name = parameter_name
        self.type_name = type_name


class AutoWireNotAllowedError(ContainerException):
    """类型不在允许自动装配的范围内"""
    def __init__(self, parameter_name: str, type_name: str):
        super().__init__(
            f"Cannot auto-wire type {type_name} for parameter '{parameter_name}' - "
            f"not in auto-wirable modules and no default value available",
            {'parameter_name': parameter_name, 'type_name': type_name},
        )
        self.parameter_name = parameter_name
        self.type_name = type_name


class ServiceResolutionError(ContainerException):
    """映射服务获取失败"""
    def __init__(self, parameter_name: str, type_name: str, service_name: str, cause: BaseException):
        super().__init__(
            f"Cannot resolve container service '{service_name}' for parameter "
            f"'{parameter_name}' ({type_name}): {cause}",
            {
                'parameter_name': parameter_name,
                'type_name': type_name,
                'service_name': service_name,
            },
            cause,
        )
        self.parameter_name = parameter_name
        self.type_name = type_name
        self.service_name = service_name


class InstantiationError(ContainerException):
    """构造函数执行失败"""
    def __init__(self, type_name: str, cause: BaseException):
        super().__init__(
            f"Failed to instantiate {type_name}: {cause}",
            {'type_name': type_name},
            cause,
        )
        self.type_name = type_name


class ServiceUnavailableError(ContainerException):
    """服务不可用（定位器层）"""
    pass


# 配置相关异常
class ConfigException(GCDIException):
    """配置异常"""
    pass


class ConfigParseError(ConfigException):
    """配置解析失败"""
    pass


class ConfigIOError(ConfigException):
    """配置文件读写失败"""
    pass


class ConfigValidationError(ConfigException):
    """配置验证失败"""
    pass


# 数据库相关异常
class DatabaseException(GCDIException):
    """数据库异常"""
    pass


# 元数据相关异常
class MetadataException(GCDIException):
    """元数据异常"""
    pass
