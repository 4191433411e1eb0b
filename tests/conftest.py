"""共享 fixture — 内存中的扩展仓库替身

FakeTransport 按 URL 返回预置内容，未发布的 URL 返回 404，
并记录每一次请求，便于断言网络访问次数。
"""

from __future__ import annotations

import hashlib
import io
from collections import Counter
from pathlib import Path

import pytest

from tcefetch.core.exceptions import TransportError
from tcefetch.core.ext import ExtensionCache, ExtensionResolver, FetchEvent

MIRROR = "http://mirror.test"
VERSION = "8.x"
ARCH = "x86"
KERNEL = "4.8.17-tinycore"


def url_for(resource: str) -> str:
    return f"{MIRROR}/{VERSION}/{ARCH}/tcz/{resource}"


class FakeResponse:
    def __init__(self, status: int, body: bytes = b"", fail_after: int | None = None) -> None:
        self.status = status
        self._body = io.BytesIO(body)
        self._fail_after = fail_after
        self.closed = False

    def read(self, size: int = -1) -> bytes:
        if self._fail_after is not None and self._body.tell() >= self._fail_after:
            raise TransportError("连接被重置", status=self.status)
        if self._fail_after is not None:
            size = min(size if size > 0 else self._fail_after, self._fail_after - self._body.tell())
        return self._body.read(size)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class FakeTransport:
    """内存扩展仓库"""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, bytes, int | None]] = {}
        self.broken: set[str] = set()
        self.calls: list[str] = []

    def get(self, url: str) -> FakeResponse:
        self.calls.append(url)
        if url in self.broken:
            raise TransportError(f"请求失败: {url}", url=url)
        status, body, fail_after = self.routes.get(url, (404, b"", None))
        return FakeResponse(status, body, fail_after)

    def serve(self, resource: str, body: bytes, status: int = 200,
              fail_after: int | None = None) -> None:
        self.routes[url_for(resource)] = (status, body, fail_after)

    def publish(
        self, name: str, payload: bytes | None = None, *,
        deps: list[str] | None = None, checksum: str | bool = True,
    ) -> None:
        """发布一个扩展: 本体 + 可选的 md5 与依赖清单"""
        payload = payload if payload is not None else f"payload of {name}".encode()
        self.serve(f"{name}.tcz", payload)
        if checksum is True:
            digest = hashlib.md5(payload).hexdigest()
            self.serve(f"{name}.tcz.md5.txt", f"{digest}  {name}.tcz\n".encode())
        elif checksum:
            self.serve(f"{name}.tcz.md5.txt", f"{checksum}  {name}.tcz\n".encode())
        if deps is not None:
            self.serve(f"{name}.tcz.dep", "".join(f"{d}.tcz\n" for d in deps).encode())

    def count(self, resource: str) -> int:
        return Counter(self.calls)[url_for(resource)]


class EventRecorder:
    def __init__(self) -> None:
        self.events: list[tuple[FetchEvent, str]] = []

    def __call__(self, event: FetchEvent, resource: str) -> None:
        self.events.append((event, resource))

    def for_resource(self, resource: str) -> list[FetchEvent]:
        return [e for e, r in self.events if r == resource]


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture()
def base_dir(tmp_path: Path) -> Path:
    d = tmp_path / "tce" / VERSION / ARCH
    d.mkdir(parents=True)
    return d


@pytest.fixture()
def cache(base_dir: Path, transport: FakeTransport, recorder: EventRecorder) -> ExtensionCache:
    return ExtensionCache(
        base_dir, transport,
        mirror=MIRROR, version=VERSION, arch=ARCH, observer=recorder,
    )


@pytest.fixture()
def resolver(cache: ExtensionCache) -> ExtensionResolver:
    return ExtensionResolver(cache, kernel=KERNEL)
