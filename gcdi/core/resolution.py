"""解析上下文

记录正在解析中的类型栈与递归深度，用于检测循环依赖和限制递归。
每个顶层解析请求创建一个新的上下文。
"""

from contextlib import contextmanager
from typing import Iterator, List

from gcdi.core.exceptions import DepthLimitExceededError
from gcdi.core.reflection import short_name

MAX_DEPTH = 10


class ResolutionContext:
    """解析上下文

    stack 中同一类型名最多出现一次；重复即为循环依赖。
    depth 等于栈中类型数量，不超过 max_depth。
    """

    def __init__(self, max_depth: int = MAX_DEPTH):
        self.max_depth = max_depth
        self._stack: List[str] = []

    @property
    def stack(self) -> List[str]:
        return list(self._stack)

    @property
    def depth(self) -> int:
        return len(self._stack)

    def contains(self, type_name: str) -> bool:
        return type_name in self._stack

    def render_chain(self, type_name: str) -> str:
        """渲染依赖链，例如 "A -> B -> A"

        Args:
            type_name: 追加在链末尾的类型名

        Returns:
            使用短类名拼接的依赖链
        """
        return " -> ".join(short_name(name) for name in self._stack + [type_name])

    def render_path(self) -> str:
        """渲染当前栈，例如 "A -> B" """
        return " -> ".join(short_name(name) for name in self._stack)

    def full_chain(self, type_name: str) -> str:
        """使用完整类型名渲染依赖链"""
        return " -> ".join(self._stack + [type_name])

    def check_depth(self, type_name: str) -> None:
        """压栈前检查深度

        Raises:
            DepthLimitExceededError: 压栈后深度将超过上限
        """
        if self.depth + 1 > self.max_depth:
            raise DepthLimitExceededError(type_name, self.depth + 1, self._stack, self.max_depth)

    @contextmanager
    def enter(self, type_name: str) -> Iterator['ResolutionContext']:
        """将类型压栈，退出时（无论成功失败）出栈

        Args:
            type_name: 正在解析的类型名

        Raises:
            DepthLimitExceededError: 压栈后深度将超过上限
        """
        self.check_depth(type_name)
        self._stack.append(type_name)
        try:
            yield self
        finally:
            self._stack.pop()

    def __repr__(self) -> str:
        return f"ResolutionContext(depth={self.depth}, stack={self._stack!r})"
