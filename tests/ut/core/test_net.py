"""URL 校验与镜像地址拼接测试"""

import pytest

from tcefetch.core.exceptions import ValidationError
from tcefetch.utils.net import build_resource_url, validate_url_scheme


class TestValidateUrlScheme:
    def test_http_ok(self) -> None:
        validate_url_scheme("http://tinycorelinux.net/8.x")

    def test_https_ok(self) -> None:
        validate_url_scheme("https://repo.tinycorelinux.net/8.x")

    @pytest.mark.parametrize("url", ["file:///etc/passwd", "ftp://evil.com/x", "/local/path"])
    def test_rejected(self, url: str) -> None:
        with pytest.raises(ValidationError, match="不允许的 URL 协议"):
            validate_url_scheme(url)

    def test_context_in_error(self) -> None:
        with pytest.raises(ValidationError, match="mirror"):
            validate_url_scheme("file:///x", context="mirror")


class TestBuildResourceUrl:
    def test_layout(self) -> None:
        assert build_resource_url(
            "http://tinycorelinux.net", "8.x", "x86", "nano.tcz",
        ) == "http://tinycorelinux.net/8.x/x86/tcz/nano.tcz"

    def test_trailing_slash_mirror(self) -> None:
        assert build_resource_url(
            "http://mirror.local/tc/", "11.x", "x86_64", "nano.tcz.dep",
        ) == "http://mirror.local/tc/11.x/x86_64/tcz/nano.tcz.dep"
