"""集中配置管理

提供统一的配置入口: 默认值 < YAML 配置文件 < 命令行参数。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from tcefetch.core.exceptions import ConfigError, ValidationError
from tcefetch.utils.net import validate_url_scheme
from tcefetch.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "tcefetch.yml"

# YAML 会把 "14.0" / "64" 之类的值解析为数字，这些字段统一按字符串处理
_STR_FIELDS = ("arch", "version", "kernel", "out", "mirror")


@dataclass
class Config:
    """拉取配置"""

    arch: str = "x86"
    version: str = "8.x"
    # 替换依赖名中 KERNEL 占位符的内核版本
    kernel: str = "4.8.17-tinycore"
    # 输出目录模板: %a -> arch, %v -> version
    out: str = "tce/%v/%a"
    mirror: str = "http://tinycorelinux.net"
    # None 表示不设超时
    timeout: float | None = None

    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str | Path = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, ValueError, OSError) as e:
            raise ConfigError(f"无法加载配置文件 {path}: {e}") from e
        if not data:
            return cls()
        known = {f for f in cls.__dataclass_fields__ if f != "extra"}
        matched = {k: v for k, v in data.items() if k in known}
        for name in _STR_FIELDS:
            value = matched.get(name)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                matched[name] = str(value)
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        logger.info("配置已加载: %s", path)
        return cfg

    def override(self, **values: Any) -> Config:
        """返回以非 None 参数覆盖后的新配置（命令行参数优先）"""
        changes = {k: v for k, v in values.items() if v is not None}
        return replace(self, **changes)

    def base_dir(self) -> Path:
        """展开输出目录模板"""
        return Path(self.out.replace("%a", self.arch).replace("%v", self.version))

    def validate(self) -> None:
        wrong_type = [name for name in _STR_FIELDS
                      if not isinstance(getattr(self, name), str)]
        if wrong_type:
            raise ConfigError(f"配置项必须为字符串: {', '.join(wrong_type)}")
        missing = [name for name in ("arch", "version", "out", "mirror")
                   if not getattr(self, name).strip()]
        if missing:
            raise ConfigError(f"配置项不能为空: {', '.join(missing)}")
        if self.timeout is not None and (
            not isinstance(self.timeout, (int, float)) or self.timeout <= 0
        ):
            raise ConfigError(f"timeout 必须为正数: {self.timeout}")
        try:
            validate_url_scheme(self.mirror, context="mirror")
        except ValidationError as e:
            raise ConfigError(str(e)) from e
