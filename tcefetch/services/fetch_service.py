"""拉取服务 — CLI 共享的顶层流程

按顺序解析每个请求的扩展。单个扩展失败只记录，不影响后续扩展；
整次运行共享一个解析上下文，前面已解析的扩展不会重复拉取。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from tcefetch.core.config import Config
from tcefetch.core.exceptions import TceFetchError, ValidationError
from tcefetch.core.ext import (
    CacheState,
    ExtensionCache,
    ExtensionResolver,
    ResolutionContext,
    ResourceKind,
    UrllibTransport,
)
from tcefetch.core.protocols import ProgressObserver, Transport

logger = logging.getLogger(__name__)


@dataclass
class ExtensionOutcome:
    """单个请求扩展的结果"""

    name: str
    ok: bool
    error: str = ""
    error_code: str = ""


@dataclass
class FetchReport:
    """一次拉取运行的汇总"""

    base_dir: str
    results: list[ExtensionOutcome] = field(default_factory=list)
    visited: list[str] = field(default_factory=list)
    requests: int = 0

    @property
    def success(self) -> bool:
        return all(r.ok for r in self.results)

    @property
    def failed(self) -> list[ExtensionOutcome]:
        return [r for r in self.results if not r.ok]

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_dir": self.base_dir,
            "success": self.success,
            "requests": self.requests,
            "visited": list(self.visited),
            "results": [
                {"name": r.name, "ok": r.ok, "error": r.error, "error_code": r.error_code}
                for r in self.results
            ],
        }


class FetchService:
    """扩展拉取服务"""

    def __init__(
        self,
        config: Config,
        *,
        transport: Transport | None = None,
        observer: ProgressObserver | None = None,
    ) -> None:
        config.validate()
        self.config = config
        self.cache = ExtensionCache(
            config.base_dir(),
            transport or UrllibTransport(timeout=config.timeout),
            mirror=config.mirror,
            version=config.version,
            arch=config.arch,
            observer=observer,
        )
        self.resolver = ExtensionResolver(self.cache, kernel=config.kernel)

    def fetch(
        self, names: list[str], context: ResolutionContext | None = None,
    ) -> FetchReport:
        """解析并拉取全部请求的扩展及其依赖"""
        if not names:
            raise ValidationError("至少需要指定一个扩展")

        context = context if context is not None else ResolutionContext()
        self.cache.ensure_base_dir()
        report = FetchReport(base_dir=str(self.cache.base_dir))
        logger.info("缓存目录: %s", self.cache.base_dir)

        for name in names:
            try:
                self.resolver.resolve(name, context)
            except TceFetchError as e:
                logger.error("拉取失败: %s - %s", name, e)
                report.results.append(ExtensionOutcome(
                    name=name, ok=False, error=str(e), error_code=e.code,
                ))
            else:
                report.results.append(ExtensionOutcome(name=name, ok=True))

        report.visited = list(context.visited)
        report.requests = self.cache.requests
        if report.failed:
            logger.warning(
                "拉取汇总: %d 成功, %d 失败 (%s)",
                len(report.results) - len(report.failed),
                len(report.failed),
                ", ".join(r.name for r in report.failed),
            )
        return report

    def status(self, names: list[str]) -> dict[str, dict[ResourceKind, CacheState]]:
        """查看扩展各资源的缓存状态，不访问网络"""
        result: dict[str, dict[ResourceKind, CacheState]] = {}
        for name in names:
            resolved = self.resolver.substitute(name)
            result[resolved] = {
                kind: self.cache.state(kind.path_for(resolved))
                for kind in ResourceKind
            }
        return result
