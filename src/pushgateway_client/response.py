"""网关响应分类。"""

from __future__ import annotations

from typing import Any

from .errors import HttpClientError, HttpRedirectError, HttpServerError


def classify_response(response: Any) -> Any:
    """按状态码将响应归类为成功或三类 HTTP 错误之一。

    参数:
        response: `requests.Response`（或具有 status_code/reason/text 的对象）。

    返回值:
        状态码 < 300 时原样返回响应。

    副作用:
        无；3xx/4xx/5xx 分别抛出 `HttpRedirectError`/`HttpClientError`/
        `HttpServerError`，不做任何重试。
    """

    status = int(response.status_code)
    if status < 300:
        return response

    message = f"status: {status}, message: {response.reason}, body: {response.text}"
    if status <= 399:
        raise HttpRedirectError(message, response=response)
    if status <= 499:
        raise HttpClientError(message, response=response)
    raise HttpServerError(message, response=response)
