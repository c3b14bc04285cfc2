"""Pushgateway 推送客户端。

`PushClient` 按 job 与 grouping key 将注册表推送到 Pushgateway：
- `add`：POST，合并到网关已有数据；
- `replace`：PUT，覆盖同一分组下的数据；
- `delete`：DELETE，删除该分组。

每个实例持有一个长连接会话与一把互斥锁，同一实例上的请求严格串行；
不同实例之间互不阻塞。失败不重试，错误直接抛给调用方。
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import SplitResult, unquote, urlsplit, urlunsplit

import requests  # type: ignore[import-untyped]
from requests.auth import HTTPBasicAuth  # type: ignore[import-untyped]

from .config import DEFAULT_GATEWAY, PushConfig
from .errors import InvalidArgumentError
from .labels import LabelSetValidator, validate_no_label_clashes
from .path import build_path
from .registry import Serializer, TextSerializer
from .response import classify_response

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("http", "https")
# 未显式指定时连接与读取各自的超时（秒）
DEFAULT_TIMEOUT = 60.0


def parse_gateway_url(url: str) -> SplitResult:
    """解析并校验网关 URL。

    参数:
        url: 完整 URL（网关地址 + 推送路径）。

    返回值:
        SplitResult: 解析结果。

    副作用:
        无；URL 无法解析、缺少主机或协议不是 http/https 时抛出
        `InvalidArgumentError`。
    """

    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        # 端口非法时访问 `port` 才会抛错
        _ = parts.port
    except ValueError as exc:
        raise InvalidArgumentError(f"{url} is not a valid URL: {exc}") from exc

    if parts.scheme not in SUPPORTED_SCHEMES:
        raise InvalidArgumentError(
            f"only HTTP gateway URLs are supported currently, got {url}"
        )
    if not hostname:
        raise InvalidArgumentError(f"{url} is not a valid URL: missing host")
    if any(ch.isspace() for ch in parts.netloc):
        raise InvalidArgumentError(f"{url} is not a valid URL: whitespace in host")
    return parts


def _strip_credentials(parts: SplitResult) -> str:
    netloc = parts.netloc.rpartition("@")[2]
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


class PushClient:
    """Pushgateway 推送客户端。

    参数:
        job: Job 名称，不可为空。
        gateway: 网关地址，缺省为 `http://localhost:9091`；可携带
            `user:password@` 凭据，用于 HTTP Basic 认证。
        grouping_key: 分组标签（例如 {"instance": "host-1"}）。
        open_timeout: 建立连接超时（秒），缺省 60。
        read_timeout: 读取响应超时（秒），缺省 60。
        serializer: 注册表序列化器，缺省为文本暴露格式。

    副作用:
        仅创建 `requests.Session`，构造时不发起网络请求。
    """

    def __init__(
        self,
        job: Optional[str],
        gateway: Optional[str] = DEFAULT_GATEWAY,
        grouping_key: Optional[Mapping[str, str]] = None,
        *,
        open_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        serializer: Optional[Serializer] = None,
    ) -> None:
        if job is None:
            raise InvalidArgumentError("job cannot be None")
        if not job:
            raise InvalidArgumentError("job cannot be empty")

        grouping = dict(grouping_key or {})
        self._validator = LabelSetValidator()
        self._validator.validate_symbols(grouping)

        self._lock = threading.Lock()
        self._job = job
        self._gateway = (gateway or DEFAULT_GATEWAY).rstrip("/")
        self._grouping_key = grouping
        self._path = build_path(job, grouping)

        parts = parse_gateway_url(f"{self._gateway}{self._path}")
        self._url = _strip_credentials(parts)
        self._auth: Optional[HTTPBasicAuth] = None
        if parts.username:
            self._auth = HTTPBasicAuth(
                unquote(parts.username), unquote(parts.password or "")
            )

        self._timeout: Tuple[float, float] = (
            DEFAULT_TIMEOUT if open_timeout is None else open_timeout,
            DEFAULT_TIMEOUT if read_timeout is None else read_timeout,
        )

        self._serializer: Serializer = serializer or TextSerializer()
        self._session = requests.Session()

    @classmethod
    def from_config(
        cls, config: PushConfig, *, serializer: Optional[Serializer] = None
    ) -> "PushClient":
        """由 `PushConfig` 构建客户端。"""

        return cls(
            config.job,
            config.gateway,
            config.grouping_key,
            open_timeout=config.open_timeout,
            read_timeout=config.read_timeout,
            serializer=serializer,
        )

    @property
    def job(self) -> str:
        return self._job

    @property
    def gateway(self) -> str:
        return self._gateway

    @property
    def path(self) -> str:
        return self._path

    @property
    def url(self) -> str:
        """请求 URL（已去除凭据）。"""

        return self._url

    @property
    def grouping_key(self) -> Dict[str, str]:
        return dict(self._grouping_key)

    def add(self, registry: Any) -> requests.Response:
        """POST 推送，合并到网关中该分组已有的指标。"""

        return self._send("POST", registry)

    def replace(self, registry: Any) -> requests.Response:
        """PUT 推送，覆盖网关中该分组的全部指标。"""

        return self._send("PUT", registry)

    def delete(self) -> requests.Response:
        """DELETE 删除网关中该分组的全部指标。"""

        return self._send("DELETE")

    def close(self) -> None:
        """关闭底层会话。"""

        self._session.close()

    def __enter__(self) -> "PushClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _send(self, method: str, registry: Any = None) -> requests.Response:
        """发送一次请求并分类响应。

        参数:
            method: HTTP 方法（POST/PUT/DELETE）。
            registry: 待推送的注册表；为 None 时不带请求体。

        返回值:
            requests.Response: 状态码 < 300 的响应。

        副作用:
            持有实例锁直到响应分类完成；发起网络请求。标签冲突时在
            发送前抛出 `LabelCollisionError`；传输层异常原样抛出。
        """

        with self._lock:
            headers: Dict[str, str] = {}
            data: Optional[bytes] = None
            if registry is not None:
                validate_no_label_clashes(self._grouping_key, registry)
                data = self._serializer.marshal(registry)
                headers["Content-Type"] = self._serializer.content_type()

            logger.debug("pushgateway request: %s %s", method, self._url)
            response = self._session.request(
                method,
                self._url,
                data=data,
                headers=headers,
                auth=self._auth,
                timeout=self._timeout,
                allow_redirects=False,
            )
            logger.debug(
                "pushgateway response: %s %s -> %s",
                method,
                self._url,
                response.status_code,
            )
            return classify_response(response)
