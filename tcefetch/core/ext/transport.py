"""基于 urllib 的 HTTP 传输"""

from __future__ import annotations

import http.client
import logging
import urllib.error
import urllib.request
from typing import BinaryIO

from tcefetch import __version__
from tcefetch.core.exceptions import TransportError
from tcefetch.utils.net import validate_url_scheme

logger = logging.getLogger(__name__)


class HttpResponse:
    """统一包装正常响应与 HTTPError，使状态码成为普通值"""

    def __init__(self, status: int, body: BinaryIO | None) -> None:
        self.status = status
        self._body = body

    def read(self, size: int = -1) -> bytes:
        if self._body is None:
            return b""
        try:
            return self._body.read(size)
        except (http.client.HTTPException, OSError) as e:
            raise TransportError(f"读取响应失败: {e}", status=self.status) from e

    def close(self) -> None:
        if self._body is not None:
            self._body.close()
            self._body = None

    def __enter__(self) -> HttpResponse:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class UrllibTransport:
    """单次阻塞 GET，不做重试"""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    def get(self, url: str) -> HttpResponse:
        validate_url_scheme(url, context="extension download")
        request = urllib.request.Request(
            url, headers={"User-Agent": f"tcefetch/{__version__}"},
        )
        logger.debug("GET %s", url)
        try:
            if self.timeout is None:
                resp = urllib.request.urlopen(request)  # nosec B310
            else:
                resp = urllib.request.urlopen(request, timeout=self.timeout)  # nosec B310
        except urllib.error.HTTPError as e:
            return HttpResponse(e.code, e.fp)
        except (urllib.error.URLError, OSError) as e:
            raise TransportError(f"请求失败: {url} - {e}", url=url) from e
        return HttpResponse(resp.status, resp)
