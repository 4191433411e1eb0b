"""扩展拉取数据模型"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO

# 依赖名中的内核占位符
KERNEL_PLACEHOLDER = "KERNEL"


class ResourceKind(Enum):
    """扩展的三类资源及其文件后缀"""

    PAYLOAD = ".tcz"
    CHECKSUM = ".tcz.md5.txt"
    DEPENDENCY = ".tcz.dep"

    def path_for(self, name: str) -> str:
        return name + self.value


class FetchEvent(Enum):
    """单个资源访问过程中的状态事件"""

    CHECKING = "checking"
    PRESENT = "present"
    KNOWN_ABSENT = "known_absent"
    ABSENT = "absent"
    DOWNLOADING = "downloading"
    OK = "ok"
    FAILED = "failed"


class CacheState(Enum):
    """缓存条目状态

    MISSING:      本地无文件，尚未尝试
    KNOWN_ABSENT: 本地为空文件，远端已确认不存在
    PRESENT:      本地文件非空
    """

    MISSING = "missing"
    KNOWN_ABSENT = "known_absent"
    PRESENT = "present"


@dataclass
class FetchResult:
    """拉取结果: 有内容时 stream 为已打开的文件，已确认缺失时为 None"""

    stream: BinaryIO | None = None

    @classmethod
    def absent(cls) -> FetchResult:
        return cls(stream=None)

    @property
    def present(self) -> bool:
        return self.stream is not None

    def close(self) -> None:
        if self.stream is not None:
            self.stream.close()

    def __enter__(self) -> FetchResult:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


@dataclass
class ResolutionContext:
    """一次运行内的解析上下文

    visited 中的名称已完成拉取与校验；同一上下文内不会重复解析。
    """

    _visited: dict[str, None] = field(default_factory=dict)

    def __contains__(self, name: object) -> bool:
        return name in self._visited

    def __len__(self) -> int:
        return len(self._visited)

    def mark(self, name: str) -> None:
        self._visited[name] = None

    @property
    def visited(self) -> tuple[str, ...]:
        """按完成顺序排列的已解析名称"""
        return tuple(self._visited)
