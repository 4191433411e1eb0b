"""缓存优先的资源拉取器

本地磁盘即持久缓存，一个资源文件有三种状态:
  - 不存在: 尚未尝试，发起一次 GET
  - 空文件: 远端曾返回 404，视为已确认缺失，不再请求
  - 非空:   已下载的内容，直接打开返回

本模块是缓存文件的唯一写入方，从不删除已完成的缓存条目。
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from tcefetch.core.exceptions import FilesystemError, TransportError, ValidationError
from tcefetch.core.ext.models import CacheState, FetchEvent, FetchResult, ResourceKind
from tcefetch.core.protocols import ProgressObserver, Transport
from tcefetch.utils.net import build_resource_url

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def _silent(event: FetchEvent, resource: str) -> None:
    pass


class ExtensionCache:
    """本地优先 + 远程回退的资源拉取器"""

    def __init__(
        self,
        base_dir: Path,
        transport: Transport,
        *,
        mirror: str,
        version: str,
        arch: str,
        observer: ProgressObserver | None = None,
    ) -> None:
        self.base_dir = Path(base_dir)
        self.transport = transport
        self.mirror = mirror
        self.version = version
        self.arch = arch
        self.observer = observer or _silent
        # 已发起的网络请求数
        self.requests = 0

    def ensure_base_dir(self) -> None:
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(
                f"无法创建缓存目录: {self.base_dir} - {e}", path=str(self.base_dir),
            ) from e

    def path_for(self, resource: str) -> Path:
        """资源在缓存目录中的路径，不允许越出缓存目录"""
        base = self.base_dir.resolve()
        path = (base / resource).resolve()
        if path == base or not path.is_relative_to(base):
            raise ValidationError(f"资源路径越出缓存目录: {resource}")
        return path

    def url_for(self, resource: str) -> str:
        return build_resource_url(self.mirror, self.version, self.arch, resource)

    def state(self, resource: str) -> CacheState:
        """查看缓存状态，不触发网络请求"""
        path = self.path_for(resource)
        try:
            size = path.stat().st_size
        except FileNotFoundError:
            return CacheState.MISSING
        except OSError as e:
            raise FilesystemError(f"无法读取缓存文件: {path} - {e}", path=str(path)) from e
        return CacheState.PRESENT if size > 0 else CacheState.KNOWN_ABSENT

    def fetch_kind(self, name: str, kind: ResourceKind) -> FetchResult:
        return self.fetch(kind.path_for(name))

    def fetch(self, resource: str) -> FetchResult:
        """拉取资源，返回已打开的内容流或已确认缺失。

        正常返回后本地一定存在对应文件（空文件或完整内容）。
        """
        self.observer(FetchEvent.CHECKING, resource)
        path = self.path_for(resource)

        try:
            f = open(path, "rb")
        except FileNotFoundError:
            pass
        except OSError as e:
            self.observer(FetchEvent.FAILED, resource)
            raise FilesystemError(f"无法打开缓存文件: {path} - {e}", path=str(path)) from e
        else:
            try:
                size = os.fstat(f.fileno()).st_size
            except OSError as e:
                f.close()
                self.observer(FetchEvent.FAILED, resource)
                raise FilesystemError(f"无法读取缓存文件: {path} - {e}", path=str(path)) from e
            if size > 0:
                logger.debug("缓存命中: %s", path)
                self.observer(FetchEvent.PRESENT, resource)
                return FetchResult(f)
            f.close()
            logger.debug("已确认缺失: %s", path)
            self.observer(FetchEvent.KNOWN_ABSENT, resource)
            return FetchResult.absent()

        self.observer(FetchEvent.ABSENT, resource)
        return self._download(resource, path)

    def _download(self, resource: str, path: Path) -> FetchResult:
        self.observer(FetchEvent.DOWNLOADING, resource)
        url = self.url_for(resource)
        logger.info("下载: %s", url)

        self.requests += 1
        try:
            response = self.transport.get(url)
        except TransportError:
            self.observer(FetchEvent.FAILED, resource)
            raise

        with response:
            status = response.status
            if status != 404 and not 200 <= status < 300:
                self.observer(FetchEvent.FAILED, resource)
                raise TransportError(f"服务器返回: {status} ({url})", url=url, status=status)

            try:
                f = open(path, "w+b")
            except OSError as e:
                self.observer(FetchEvent.FAILED, resource)
                raise FilesystemError(f"无法创建缓存文件: {path} - {e}", path=str(path)) from e

            if status == 404:
                f.close()
                logger.info("远端不存在，已记录: %s", path)
                self.observer(FetchEvent.OK, resource)
                return FetchResult.absent()

            try:
                self._copy(response, f)
                f.flush()
                f.seek(0)
            except TransportError:
                self._discard(f, path)
                self.observer(FetchEvent.FAILED, resource)
                raise
            except OSError as e:
                self._discard(f, path)
                self.observer(FetchEvent.FAILED, resource)
                raise FilesystemError(f"写入缓存文件失败: {path} - {e}", path=str(path)) from e

        logger.info("已保存: %s", path)
        self.observer(FetchEvent.OK, resource)
        return FetchResult(f)

    @staticmethod
    def _copy(response, f) -> None:
        while True:
            chunk = response.read(CHUNK_SIZE)
            if not chunk:
                break
            f.write(chunk)

    @staticmethod
    def _discard(f, path: Path) -> None:
        """下载中断时删除半截文件，避免下次被当作完整内容"""
        f.close()
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.warning("无法删除不完整的缓存文件: %s", path)
