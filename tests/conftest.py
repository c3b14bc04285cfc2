"""测试全局配置与模拟工具。

将 `src` 目录加入 `sys.path`，以便在未打包安装时可直接导入包；
同时提供 `requests_mock` fixture 与常用的注册表样例。
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
import requests_mock as requests_mock_lib

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from prometheus_client import CollectorRegistry, Counter, Gauge  # noqa: E402


@pytest.fixture
def requests_mock():
    """拦截所有 `requests` 会话发出的 HTTP 请求。

    返回值:
        requests_mock.Mocker: 可注册响应并查看 `request_history`。
    """

    with requests_mock_lib.Mocker() as mock:
        yield mock


@pytest.fixture
def registry() -> CollectorRegistry:
    """不带标签的简单注册表。"""

    reg = CollectorRegistry()
    g = Gauge("batch_duration_seconds", "duration of the last batch", registry=reg)
    g.set(12.5)
    return reg


@pytest.fixture
def labelled_registry() -> CollectorRegistry:
    """带 `instance` 标签的注册表，用于冲突检查。"""

    reg = CollectorRegistry()
    c = Counter(
        "batch_rows", "rows processed", labelnames=["instance"], registry=reg
    )
    c.labels(instance="worker-1").inc(3)
    return reg
