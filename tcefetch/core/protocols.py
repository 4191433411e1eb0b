"""协议定义

拉取引擎只通过这里的窄接口访问网络与进度上报，
具体实现（urllib、控制台输出、测试替身）可自由替换。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from tcefetch.core.ext.models import FetchEvent


class TransportResponse(Protocol):
    """一次 GET 的响应，使用后必须关闭"""

    status: int

    def read(self, size: int = -1) -> bytes:
        ...

    def close(self) -> None:
        ...

    def __enter__(self) -> TransportResponse:
        ...

    def __exit__(self, *exc: object) -> None:
        ...


class Transport(Protocol):
    """HTTP 传输协议

    404 等状态码作为响应返回；只有连接层失败才抛出 TransportError。
    """

    def get(self, url: str) -> TransportResponse:
        ...


class ProgressObserver(Protocol):
    """进度观察者，接收每个资源的状态事件"""

    def __call__(self, event: FetchEvent, resource: str) -> None:
        ...
