"""扩展解析器

职责:
- 替换依赖名中的 KERNEL 占位符
- 拉取扩展本体并按发布的 MD5 校验
- 深度优先递归拉取依赖，同一上下文内每个名称只处理一次

任一依赖失败即中止当前扩展的解析，不做部分成功处理。
"""

from __future__ import annotations

import logging

from tcefetch.core.exceptions import PackageNotFoundError
from tcefetch.core.ext.cache import ExtensionCache
from tcefetch.core.ext.deps import read_dependencies
from tcefetch.core.ext.models import KERNEL_PLACEHOLDER, ResolutionContext, ResourceKind
from tcefetch.core.ext.verifier import read_expected_checksum, verify

logger = logging.getLogger(__name__)


class ExtensionResolver:
    """递归解析扩展及其完整依赖闭包"""

    def __init__(self, cache: ExtensionCache, *, kernel: str) -> None:
        self.cache = cache
        self.kernel = kernel

    def substitute(self, name: str) -> str:
        return name.replace(KERNEL_PLACEHOLDER, self.kernel)

    def resolve(self, name: str, context: ResolutionContext) -> None:
        name = self.substitute(name)
        if name in context:
            logger.debug("已解析，跳过: %s", name)
            return

        with self.cache.fetch_kind(name, ResourceKind.PAYLOAD) as payload:
            if not payload.present:
                raise PackageNotFoundError(name)

            expected = read_expected_checksum(self.cache, name)
            if expected:
                verify(name, payload.stream, expected)
            else:
                logger.warning("未发布校验和，跳过校验: %s", name)

        context.mark(name)

        dependencies = read_dependencies(self.cache, name)
        if dependencies:
            logger.info("%s 依赖: %s", name, ", ".join(dependencies))
        for dependency in dependencies:
            self.resolve(dependency, context)
