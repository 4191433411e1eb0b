"""扩展拉取引擎

- models.py:    资源类型、拉取结果、解析上下文
- transport.py: urllib HTTP 传输
- cache.py:     缓存优先的资源拉取
- verifier.py:  MD5 校验
- deps.py:      依赖清单读取
- resolver.py:  递归解析
"""

from tcefetch.core.ext.cache import ExtensionCache
from tcefetch.core.ext.models import (
    CacheState,
    FetchEvent,
    FetchResult,
    ResolutionContext,
    ResourceKind,
)
from tcefetch.core.ext.resolver import ExtensionResolver
from tcefetch.core.ext.transport import UrllibTransport

__all__ = [
    "CacheState",
    "ExtensionCache",
    "ExtensionResolver",
    "FetchEvent",
    "FetchResult",
    "ResolutionContext",
    "ResourceKind",
    "UrllibTransport",
]
