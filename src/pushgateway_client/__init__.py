"""Pushgateway 推送客户端包。

按 job 与 grouping key 构建推送路径，将 Prometheus 注册表以
add/replace/delete 方式推送至 Pushgateway，并将响应归类为结构化异常。
"""

from .config import DEFAULT_GATEWAY, PushConfig, load_push_config
from .errors import (
    ErrorKind,
    HttpClientError,
    HttpError,
    HttpRedirectError,
    HttpServerError,
    InvalidArgumentError,
    InvalidLabelSetError,
    LabelCollisionError,
)
from .labels import LabelSetValidator, validate_no_label_clashes
from .path import build_path
from .push import PushClient
from .registry import (
    MetricEntry,
    MetricsSource,
    Serializer,
    TextSerializer,
    build_registry,
)
from .response import classify_response

__all__ = [
    "__version__",
    "get_version",
    "DEFAULT_GATEWAY",
    "ErrorKind",
    "HttpClientError",
    "HttpError",
    "HttpRedirectError",
    "HttpServerError",
    "InvalidArgumentError",
    "InvalidLabelSetError",
    "LabelCollisionError",
    "LabelSetValidator",
    "MetricEntry",
    "MetricsSource",
    "PushClient",
    "PushConfig",
    "Serializer",
    "TextSerializer",
    "build_path",
    "build_registry",
    "classify_response",
    "load_push_config",
    "validate_no_label_clashes",
]

__version__ = "0.1.0"


def get_version() -> str:
    """返回当前包版本号。

    返回值:
        str: 版本号字符串，例如 "0.1.0"。
    副作用:
        无副作用，仅读取内置常量。
    """

    return __version__
