"""命令行端到端测试"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

import tcefetch.cli as cli_pkg
from tcefetch.cli import cmd_fetch, main
from tcefetch.services.fetch_service import FetchService


@pytest.fixture()
def run_cli(tmp_path, transport, monkeypatch):
    monkeypatch.setattr(cli_pkg, "setup_logging", lambda **kw: None)
    monkeypatch.setattr(
        cmd_fetch, "FetchService",
        lambda cfg, **kw: FetchService(cfg, transport=transport, **kw),
    )
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    def _run(*args: str):
        return runner.invoke(main, list(args))

    return _run


class TestFetchCommand:
    def test_fetch_success(self, run_cli, transport, tmp_path) -> None:
        transport.publish("nano", deps=["ncurses"])
        transport.publish("ncurses")
        result = run_cli("fetch", "--mirror", "http://mirror.test", "nano")

        assert result.exit_code == 0, result.output
        assert "缓存目录: tce/8.x/x86" in result.output
        assert "检查 nano.tcz... 本地不存在" in result.output
        assert "下载 nano.tcz... 完成" in result.output
        assert "已拉取 nano" in result.output
        assert (tmp_path / "tce" / "8.x" / "x86" / "ncurses.tcz").exists()

    def test_second_run_reports_cache(self, run_cli, transport) -> None:
        transport.publish("nano")
        run_cli("fetch", "--mirror", "http://mirror.test", "nano")
        result = run_cli("fetch", "--mirror", "http://mirror.test", "nano")
        assert "检查 nano.tcz... 已存在" in result.output
        assert "检查 nano.tcz.dep... 已确认缺失" in result.output

    def test_partial_failure_exit_code(self, run_cli, transport) -> None:
        transport.publish("nano")
        result = run_cli("fetch", "--mirror", "http://mirror.test", "ghost", "nano")
        assert result.exit_code == 1
        assert "拉取 ghost 失败! 扩展不存在: ghost" in result.output
        assert "已拉取 nano" in result.output

    def test_json_output(self, run_cli, transport) -> None:
        transport.publish("nano")
        result = run_cli("fetch", "--json", "--mirror", "http://mirror.test", "nano")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["success"] is True
        assert data["visited"] == ["nano"]

    def test_options_and_config_file(self, run_cli, transport, tmp_path) -> None:
        (tmp_path / "tc.yml").write_text(
            "mirror: http://mirror.test\nkernel: 6.1.2-tinycore\nout: cache/%a-%v\n",
            encoding="utf-8",
        )
        transport.publish("net-modules-6.1.2-tinycore")
        result = run_cli("fetch", "-c", "tc.yml", "net-modules-KERNEL")
        assert result.exit_code == 0, result.output
        assert (tmp_path / "cache" / "x86-8.x" / "net-modules-6.1.2-tinycore.tcz").exists()

    def test_missing_extension_argument(self, run_cli) -> None:
        result = run_cli("fetch")
        assert result.exit_code == 2
        assert "Usage" in result.output

    def test_invalid_mirror(self, run_cli) -> None:
        result = run_cli("fetch", "--mirror", "file:///srv", "nano")
        assert result.exit_code == 1
        assert "不允许的 URL 协议" in result.output

    def test_malformed_config_file(self, run_cli, tmp_path) -> None:
        (tmp_path / "bad.yml").write_text("arch: [x86\n", encoding="utf-8")
        result = run_cli("fetch", "-c", "bad.yml", "nano")
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "无法加载配置文件" in result.output


class TestStatusCommand:
    def test_status(self, run_cli, transport) -> None:
        transport.publish("nano", checksum=False)
        run_cli("fetch", "--mirror", "http://mirror.test", "nano")
        result = run_cli("status", "nano", "vim")
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "nano"
        assert "已缓存" in lines[1]
        assert "已确认缺失" in lines[2]
        assert "vim" in lines
        assert "未拉取" in lines[-1]

    def test_status_with_numeric_version(self, run_cli, tmp_path) -> None:
        (tmp_path / "cfg.yml").write_text("version: 14.0\n", encoding="utf-8")
        result = run_cli("status", "-c", "cfg.yml", "nano")
        assert result.exit_code == 0, result.output
        assert "未拉取" in result.output
