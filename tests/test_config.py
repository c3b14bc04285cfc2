"""推送配置加载测试。"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from pushgateway_client.config import (
    DEFAULT_GATEWAY,
    PushConfig,
    load_metrics_file,
    load_push_config,
)


def test_load_push_config(tmp_path: Path):
    p = tmp_path / "push.yaml"
    p.write_text(
        """
job: nightly
gateway: http://pushgw:9091
grouping_key:
  instance: host-1
  path: /var/data
open_timeout: 2
read_timeout: 10
""",
        encoding="utf-8",
    )
    cfg = load_push_config(p)
    assert cfg.job == "nightly"
    assert cfg.grouping_key == {"instance": "host-1", "path": "/var/data"}
    assert cfg.open_timeout == 2.0 and cfg.read_timeout == 10.0


def test_defaults():
    cfg = PushConfig(job="j")
    assert cfg.gateway == DEFAULT_GATEWAY
    assert cfg.grouping_key == {}
    assert cfg.open_timeout is None


def test_unknown_keys_forbidden(tmp_path: Path):
    p = tmp_path / "push.yaml"
    p.write_text("job: j\nretries: 3\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_push_config(p)


def test_empty_job_rejected():
    with pytest.raises(ValidationError):
        PushConfig(job="")


def test_load_metrics_file(tmp_path: Path):
    p = tmp_path / "metrics.yaml"
    p.write_text("rows: 3\nduration_seconds: 1.25\n", encoding="utf-8")
    assert load_metrics_file(p) == {"rows": 3.0, "duration_seconds": 1.25}
