"""Pushgateway 请求路径构建。"""

from __future__ import annotations

import base64
from typing import Mapping
from urllib.parse import quote

PATH_TEMPLATE = "/metrics/job/{job}"


def url_encode(value: str) -> str:
    """按 URL 组件规则百分号编码，仅保留 `[A-Za-z0-9_.~-]`。"""

    return quote(value, safe="")


def base64_encode(value: str) -> str:
    """URL 安全的 base64 编码（保留 `=` 填充）。"""

    return base64.urlsafe_b64encode(value.encode("utf-8")).decode("ascii")


def build_path(job: str, grouping_key: Mapping[str, str]) -> str:
    """由 job 与 grouping key 生成推送路径。

    参数:
        job: Job 名称，百分号编码后写入 `/metrics/job/<job>`。
        grouping_key: 标签名到标签值的映射，按迭代顺序追加路径段。

    返回值:
        str: 例如 `/metrics/job/batch/instance/host-1`。

    副作用:
        无；相同输入总是得到相同输出。

    含 `/` 的值无法直接放入单个路径段，改用 `<label>@base64/<b64>` 形式。
    空字符串同样走 base64 形式并写作 `=`，避免出现 `//` 被代理或
    HTTP 库规范化掉。
    """

    path = PATH_TEMPLATE.format(job=url_encode(job))
    for label, value in grouping_key.items():
        if "/" in value:
            path += f"/{label}@base64/{base64_encode(value)}"
        elif value == "":
            path += f"/{label}@base64/="
        else:
            path += f"/{label}/{url_encode(value)}"
    return path
