"""CLI — 扩展拉取命令"""

from __future__ import annotations

import json
import sys
from typing import Any, Callable

import click

from tcefetch.core.config import DEFAULT_CONFIG_FILE, Config
from tcefetch.core.exceptions import TceFetchError
from tcefetch.core.ext import CacheState, FetchEvent, ResourceKind
from tcefetch.services.fetch_service import FetchService

# (提示文本, 是否换行)
_EVENT_TEXT: dict[FetchEvent, tuple[str, bool]] = {
    FetchEvent.CHECKING: ("检查 {}... ", False),
    FetchEvent.PRESENT: ("已存在", True),
    FetchEvent.KNOWN_ABSENT: ("已确认缺失", True),
    FetchEvent.ABSENT: ("本地不存在", True),
    FetchEvent.DOWNLOADING: ("下载 {}... ", False),
    FetchEvent.OK: ("完成", True),
    FetchEvent.FAILED: ("失败", True),
}

_STATE_TEXT = {
    CacheState.PRESENT: "已缓存",
    CacheState.KNOWN_ABSENT: "已确认缺失",
    CacheState.MISSING: "未拉取",
}


def register(group: click.Group) -> None:
    group.add_command(fetch)
    group.add_command(status)


def console_observer(event: FetchEvent, resource: str) -> None:
    """以 "检查 x... 已存在" 的形式逐行输出进度"""
    text, newline = _EVENT_TEXT[event]
    click.echo(text.format(resource), nl=newline)


def _config_options(func: Callable[..., Any]) -> Callable[..., Any]:
    options = [
        click.option("--config", "-c", "config_path", default=DEFAULT_CONFIG_FILE,
                     help="配置文件路径"),
        click.option("--arch", default=None, help="目标架构，如 x86 / x86_64"),
        click.option("--version", "tc_version", default=None, help="Tiny Core 版本，如 8.x"),
        click.option("--kernel", default=None, help="替换 KERNEL 占位符的内核版本"),
        click.option("--out", default=None, help="输出目录模板，%a=架构，%v=版本"),
        click.option("--mirror", default=None, help="镜像站地址"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load_config(config_path: str, **overrides: Any) -> Config:
    try:
        cfg = Config.from_file(config_path).override(**overrides)
        cfg.validate()
    except TceFetchError as e:
        raise click.ClickException(str(e)) from e
    return cfg


@click.command()
@click.argument("extensions", nargs=-1, required=True)
@_config_options
@click.option("--timeout", type=float, default=None, help="单次请求超时（秒）")
@click.option("--json", "as_json", is_flag=True, help="以 JSON 输出结果汇总")
def fetch(
    extensions: tuple[str, ...], config_path: str, arch: str | None,
    tc_version: str | None, kernel: str | None, out: str | None,
    mirror: str | None, timeout: float | None, as_json: bool,
) -> None:
    """拉取扩展及其全部依赖到本地目录"""
    cfg = _load_config(
        config_path, arch=arch, version=tc_version, kernel=kernel,
        out=out, mirror=mirror, timeout=timeout,
    )
    svc = FetchService(cfg, observer=None if as_json else console_observer)

    if not as_json:
        click.echo(f"缓存目录: {cfg.base_dir()}")
    try:
        report = svc.fetch(list(extensions))
    except TceFetchError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        for r in report.results:
            if r.ok:
                click.echo(f"已拉取 {r.name}")
            else:
                click.echo(f"拉取 {r.name} 失败! {r.error}")

    if not report.success:
        sys.exit(1)


@click.command()
@click.argument("extensions", nargs=-1, required=True)
@_config_options
def status(
    extensions: tuple[str, ...], config_path: str, arch: str | None,
    tc_version: str | None, kernel: str | None, out: str | None,
    mirror: str | None,
) -> None:
    """查看扩展在本地缓存中的状态（不访问网络）"""
    cfg = _load_config(
        config_path, arch=arch, version=tc_version, kernel=kernel,
        out=out, mirror=mirror,
    )
    svc = FetchService(cfg)
    try:
        states = svc.status(list(extensions))
    except TceFetchError as e:
        raise click.ClickException(str(e)) from e

    for name, kinds in states.items():
        click.echo(name)
        for kind in ResourceKind:
            click.echo(f"  {kind.path_for(name):40s} {_STATE_TEXT[kinds[kind]]}")
