"""推送配置模型与 YAML 加载。

配置文件示例::

    job: nightly-batch
    gateway: http://pushgw:9091
    grouping_key:
      instance: host-1
    open_timeout: 2
    read_timeout: 10

参数:
    无显式入参，模块函数各自接收文件路径。

返回值:
    见各函数 Docstring 说明。

副作用:
    仅进行文件读取与反序列化，无外部系统交互。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_GATEWAY = "http://localhost:9091"


def _read_yaml(path: Path) -> Dict[str, Any]:
    """读取 YAML 文件为字典。

    参数:
        path: YAML 文件路径。

    返回值:
        dict: 解析后的字典（空文件返回空字典）。

    副作用:
        文件 IO；错误由调用方处理。
    """

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    return dict(data or {})


class PushConfig(BaseModel):
    """推送配置（禁止未知键）。

    参数:
        job: Job 名称。
        gateway: Pushgateway 地址。
        grouping_key: 分组标签。
        open_timeout: 连接超时（秒）。
        read_timeout: 读取超时（秒）。
    """

    model_config = ConfigDict(extra="forbid")

    job: str = Field(min_length=1)
    gateway: str = DEFAULT_GATEWAY
    grouping_key: Dict[str, str] = Field(default_factory=dict)
    open_timeout: Optional[float] = Field(default=None, gt=0)
    read_timeout: Optional[float] = Field(default=None, gt=0)


def load_push_config(path: Path) -> PushConfig:
    """加载并校验推送配置文件。

    参数:
        path: YAML 文件路径。

    返回值:
        PushConfig: 校验通过的配置。

    副作用:
        文件 IO；校验失败抛出 `pydantic.ValidationError`。
    """

    return PushConfig(**_read_yaml(path))


def load_metrics_file(path: Path) -> Dict[str, float]:
    """读取指标文件（YAML/JSON 映射：指标名 -> 数值）。"""

    data = _read_yaml(path)
    return {str(k): float(v) for k, v in data.items()}
