"""tcefetch - Tiny Core Linux 扩展离线拉取工具"""

__version__ = "0.3.0"
