"""完整性校验

扩展仓库为每个包发布 <name>.tcz.md5.txt，首个字段为 MD5 摘要。
"""

from __future__ import annotations

import hashlib
import logging
from typing import BinaryIO

from tcefetch.core.exceptions import ChecksumMismatchError, FilesystemError
from tcefetch.core.ext.cache import ExtensionCache
from tcefetch.core.ext.models import ResourceKind

logger = logging.getLogger(__name__)


def compute_md5(stream: BinaryIO, chunk_size: int = 8192) -> str:
    """读完整个流并返回十六进制 MD5 摘要"""
    md5 = hashlib.md5()  # nosec B324 - 与仓库发布的摘要算法一致
    try:
        for chunk in iter(lambda: stream.read(chunk_size), b""):
            md5.update(chunk)
    except OSError as e:
        raise FilesystemError(f"读取内容失败: {e}") from e
    return md5.hexdigest()


def read_expected_checksum(cache: ExtensionCache, name: str) -> str | None:
    """读取发布的校验和；没有校验文件或文件无内容时返回 None"""
    with cache.fetch_kind(name, ResourceKind.CHECKSUM) as result:
        if not result.present:
            return None
        try:
            text = result.stream.read().decode("utf-8", errors="replace")
        except OSError as e:
            raise FilesystemError(
                f"读取校验文件失败: {name} - {e}",
                path=getattr(result.stream, "name", ""),
            ) from e
    tokens = text.split()
    return tokens[0] if tokens else None


def verify(name: str, stream: BinaryIO, expected: str) -> None:
    """校验内容摘要，大小写敏感"""
    actual = compute_md5(stream)
    if actual != expected:
        raise ChecksumMismatchError(name, actual, expected)
    logger.info("校验和通过: %s", name)
