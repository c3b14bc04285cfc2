"""命令行入口。

子命令:
- `path`：打印 job/grouping key 对应的推送路径；
- `add` / `replace`：从 YAML 指标文件构建 Gauge 并推送；
- `delete`：删除该分组。

示例:
    pushgw add --job nightly --label instance=host-1 --metrics metrics.yaml
"""

from __future__ import annotations

import json as _json
from pathlib import Path
from typing import Dict, List, Optional

import typer
import yaml
from pydantic import ValidationError

from .config import PushConfig, load_metrics_file, load_push_config
from .errors import HttpError, InvalidArgumentError, InvalidLabelSetError
from .labels import LabelSetValidator
from .path import build_path
from .push import PushClient
from .registry import build_registry

app = typer.Typer(help="Pushgateway 推送 CLI")

JOB_OPT = typer.Option(None, "--job", help="Job 名称")
GATEWAY_OPT = typer.Option(
    None, "--gateway", envvar="PROM_PUSHGATEWAY_URL", help="Pushgateway 地址"
)
LABEL_OPT = typer.Option(None, "--label", "-l", help="grouping key，形如 key=value，可重复")
CONFIG_OPT = typer.Option(None, "--config", help="推送配置 YAML 路径")
OPEN_TIMEOUT_OPT = typer.Option(None, "--open-timeout", help="连接超时（秒）")
READ_TIMEOUT_OPT = typer.Option(None, "--read-timeout", help="读取超时（秒）")
METRICS_OPT = typer.Option(
    ...,
    "--metrics",
    exists=True,
    dir_okay=False,
    help="指标文件（YAML 映射：指标名 -> 数值）",
)


def _parse_labels(items: Optional[List[str]]) -> Dict[str, str]:
    """解析 `key=value` 形式的标签列表。"""

    out: Dict[str, str] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"标签格式应为 key=value: {item}")
        out[key] = value
    return out


def _resolve_config(
    config: Optional[Path],
    job: Optional[str],
    gateway: Optional[str],
    labels: Optional[List[str]],
    open_timeout: Optional[float],
    read_timeout: Optional[float],
) -> PushConfig:
    """合并配置文件与命令行参数，命令行优先。

    参数:
        config: 配置文件路径（可选）。
        job/gateway/labels/open_timeout/read_timeout: 命令行覆盖项。

    返回值:
        PushConfig: 校验后的配置。

    副作用:
        可能读取配置文件；校验失败抛出 `typer.BadParameter`。
    """

    base: Dict[str, object] = {}
    if config is not None:
        try:
            base = load_push_config(config).model_dump()
        except (OSError, TypeError, ValueError, ValidationError, yaml.YAMLError) as exc:
            raise typer.BadParameter(f"配置文件无效: {config}: {exc}")

    overrides = {
        "job": job,
        "gateway": gateway,
        "open_timeout": open_timeout,
        "read_timeout": read_timeout,
    }
    base.update({k: v for k, v in overrides.items() if v is not None})
    grouping = dict(base.get("grouping_key") or {})  # type: ignore[call-overload]
    grouping.update(_parse_labels(labels))
    base["grouping_key"] = grouping

    if not base.get("job"):
        raise typer.BadParameter("未提供 --job，或配置文件中缺少 job")
    try:
        return PushConfig(**base)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc))


def _make_client(cfg: PushConfig) -> PushClient:
    try:
        return PushClient.from_config(cfg)
    except (InvalidArgumentError, InvalidLabelSetError) as exc:
        raise typer.BadParameter(str(exc))


def _execute(client: PushClient, method: str, metrics: Optional[Path]) -> None:
    """执行一次推送/删除并以 JSON 打印结果；HTTP 错误时退出码为 1。"""

    registry = None
    if metrics is not None:
        try:
            registry = build_registry(load_metrics_file(metrics))
        except (OSError, ValueError, TypeError, yaml.YAMLError) as exc:
            client.close()
            raise typer.BadParameter(f"指标文件无效: {metrics}: {exc}")

    with client:
        try:
            if registry is None:
                resp = client.delete()
            else:
                if method == "POST":
                    resp = client.add(registry)
                else:
                    resp = client.replace(registry)
        except InvalidLabelSetError as exc:
            raise typer.BadParameter(str(exc))
        except HttpError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1)

    typer.echo(
        _json.dumps(
            {"method": method, "url": client.url, "status": resp.status_code},
            ensure_ascii=False,
        )
    )


@app.command()
def path(
    job: str = typer.Option(..., "--job", help="Job 名称"),
    label: Optional[List[str]] = LABEL_OPT,
) -> None:
    """打印推送路径（不发起请求）。"""

    if not job:
        raise typer.BadParameter("job 不能为空")
    grouping = _parse_labels(label)
    try:
        LabelSetValidator().validate_symbols(grouping)
    except InvalidLabelSetError as exc:
        raise typer.BadParameter(str(exc))
    typer.echo(build_path(job, grouping))


@app.command()
def add(
    metrics: Path = METRICS_OPT,
    job: Optional[str] = JOB_OPT,
    gateway: Optional[str] = GATEWAY_OPT,
    label: Optional[List[str]] = LABEL_OPT,
    config: Optional[Path] = CONFIG_OPT,
    open_timeout: Optional[float] = OPEN_TIMEOUT_OPT,
    read_timeout: Optional[float] = READ_TIMEOUT_OPT,
) -> None:
    """POST 推送指标，合并到网关已有数据。

    参数:
        metrics: 指标文件路径。
        job: Job 名称。
        gateway: 网关地址，缺省读取环境变量 `PROM_PUSHGATEWAY_URL`。
        label: grouping key 列表。
        config: 推送配置文件。

    返回值:
        无；以 JSON 打印请求结果。

    副作用:
        读取文件并发起网络请求。
    """

    cfg = _resolve_config(config, job, gateway, label, open_timeout, read_timeout)
    _execute(_make_client(cfg), "POST", metrics)


@app.command()
def replace(
    metrics: Path = METRICS_OPT,
    job: Optional[str] = JOB_OPT,
    gateway: Optional[str] = GATEWAY_OPT,
    label: Optional[List[str]] = LABEL_OPT,
    config: Optional[Path] = CONFIG_OPT,
    open_timeout: Optional[float] = OPEN_TIMEOUT_OPT,
    read_timeout: Optional[float] = READ_TIMEOUT_OPT,
) -> None:
    """PUT 推送指标，覆盖该分组下的全部指标。"""

    cfg = _resolve_config(config, job, gateway, label, open_timeout, read_timeout)
    _execute(_make_client(cfg), "PUT", metrics)


@app.command()
def delete(
    job: Optional[str] = JOB_OPT,
    gateway: Optional[str] = GATEWAY_OPT,
    label: Optional[List[str]] = LABEL_OPT,
    config: Optional[Path] = CONFIG_OPT,
    open_timeout: Optional[float] = OPEN_TIMEOUT_OPT,
    read_timeout: Optional[float] = READ_TIMEOUT_OPT,
) -> None:
    """DELETE 删除该分组下的全部指标。"""

    cfg = _resolve_config(config, job, gateway, label, open_timeout, read_timeout)
    _execute(_make_client(cfg), "DELETE", None)


def main() -> None:
    """CLI 入口包装。

    副作用:
        调用 Typer 应用进行命令行解析与执行。
    """

    app()


if __name__ == "__main__":
    main()
