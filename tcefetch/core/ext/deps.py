"""依赖清单读取

<name>.tcz.dep 每行一个依赖，形如 "openssl.tcz"，空行忽略。
"""

from __future__ import annotations

from tcefetch.core.exceptions import FilesystemError
from tcefetch.core.ext.cache import ExtensionCache
from tcefetch.core.ext.models import ResourceKind


def read_dependencies(cache: ExtensionCache, name: str) -> list[str]:
    """按文件顺序返回依赖名（已去掉 .tcz 后缀）；无依赖文件时返回空列表"""
    with cache.fetch_kind(name, ResourceKind.DEPENDENCY) as result:
        if not result.present:
            return []
        try:
            text = result.stream.read().decode("utf-8", errors="replace")
        except OSError as e:
            raise FilesystemError(
                f"读取依赖文件失败: {name} - {e}",
                path=getattr(result.stream, "name", ""),
            ) from e

    deps: list[str] = []
    for line in text.split("\n"):
        line = line.removesuffix("\r")
        if not line:
            continue
        deps.append(line.removesuffix(ResourceKind.PAYLOAD.value))
    return deps
