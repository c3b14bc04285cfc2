"""Pushgateway 客户端异常体系。

所有异常均携带 `kind`（`ErrorKind` 枚举），便于调用方按类别处理；
HTTP 相关异常继承自 `requests.HTTPError`，保留原始响应对象。
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

import requests  # type: ignore[import-untyped]


class ErrorKind(str, Enum):
    """错误类别枚举。"""

    INVALID_ARGUMENT = "invalid_argument"
    INVALID_LABEL_SET = "invalid_label_set"
    LABEL_COLLISION = "label_collision"
    HTTP_REDIRECT = "http_redirect"
    HTTP_CLIENT_ERROR = "http_client_error"
    HTTP_SERVER_ERROR = "http_server_error"


class InvalidArgumentError(ValueError):
    """构造参数非法：job 为空、网关 URL 无法解析或协议不受支持。"""

    kind = ErrorKind.INVALID_ARGUMENT


class InvalidLabelSetError(ValueError):
    """grouping key 的标签名不合法或为保留名。"""

    kind = ErrorKind.INVALID_LABEL_SET


class LabelCollisionError(InvalidLabelSetError):
    """grouping key 标签与指标自身标签同名，推送后会覆盖指标标签值。"""

    kind = ErrorKind.LABEL_COLLISION

    def __init__(self, label: str, metric: str) -> None:
        self.label = label
        self.metric = metric
        super().__init__(
            f"label {label!r} from grouping key collides with label of the "
            f"same name from metric {metric!r} and would overwrite it"
        )


class HttpError(requests.HTTPError):
    """网关返回非 2xx 状态码时的基类异常。

    属性:
        status_code: HTTP 状态码。
        reason: 状态描述（如 `Not Found`）。
        body: 响应体文本。
        response: 原始 `requests.Response`。
    """

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str, *, response: Any = None) -> None:
        super().__init__(message, response=response)
        self.status_code = int(getattr(response, "status_code", 0) or 0)
        self.reason = getattr(response, "reason", None)
        self.body = getattr(response, "text", None)


class HttpRedirectError(HttpError):
    """3xx 响应。"""

    kind = ErrorKind.HTTP_REDIRECT


class HttpClientError(HttpError):
    """4xx 响应。"""

    kind = ErrorKind.HTTP_CLIENT_ERROR


class HttpServerError(HttpError):
    """5xx 响应。"""

    kind = ErrorKind.HTTP_SERVER_ERROR
