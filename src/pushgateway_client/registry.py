"""指标来源与序列化器。

定义推送核心依赖的两个窄接口：
- `MetricsSource`：枚举指标名及其使用的标签名；
- `Serializer`：给出 Content-Type 并将注册表序列化为字节串。

默认实现基于 `prometheus_client` 的 `CollectorRegistry` 与文本暴露格式。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Iterator, Mapping, Protocol, runtime_checkable

from prometheus_client import CollectorRegistry, Gauge  # type: ignore[import-not-found]
from prometheus_client.exposition import (  # type: ignore[import-not-found]
    CONTENT_TYPE_LATEST,
    generate_latest,
)


@dataclass(frozen=True)
class MetricEntry:
    """单个指标的名称与其样本使用到的标签名集合。"""

    name: str
    labels: FrozenSet[str] = field(default_factory=frozenset)


@runtime_checkable
class MetricsSource(Protocol):
    """可枚举指标条目的注册表接口。"""

    def metrics(self) -> Iterable[MetricEntry]:  # pragma: no cover
        ...


@runtime_checkable
class Serializer(Protocol):
    """注册表序列化接口。"""

    def content_type(self) -> str:  # pragma: no cover
        ...

    def marshal(self, registry: Any) -> bytes:  # pragma: no cover
        ...


class TextSerializer:
    """Prometheus 文本暴露格式序列化器。"""

    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST

    def marshal(self, registry: Any) -> bytes:
        return generate_latest(registry)


def collector_entries(registry: Any) -> Iterator[MetricEntry]:
    """从带 `collect()` 的注册表中提取指标条目。

    参数:
        registry: `CollectorRegistry` 或任意实现 `collect()` 的收集器。

    返回值:
        Iterator[MetricEntry]: 每个指标族一个条目，标签名取自其全部样本。

    副作用:
        调用 `collect()`，会触发自定义收集器的采集逻辑。
    """

    for family in registry.collect():
        labels = set()
        for sample in family.samples:
            labels.update(sample.labels)
        yield MetricEntry(name=family.name, labels=frozenset(labels))


def metric_entries(registry: Any) -> Iterable[MetricEntry]:
    """将注册表统一适配为 `MetricEntry` 序列。"""

    if isinstance(registry, MetricsSource):
        return registry.metrics()
    if hasattr(registry, "collect"):
        return collector_entries(registry)
    raise TypeError(f"unsupported registry type: {type(registry)!r}")


def build_registry(
    metrics: Mapping[str, float], labels: Mapping[str, str] | None = None
) -> CollectorRegistry:
    """构建 Prometheus `CollectorRegistry` 并写入 Gauge 指标。

    参数:
        metrics: 指标名到数值的映射，例如 {"batch_duration_seconds": 12.3}。
        labels: 附加在每个指标上的常量标签（可选）。

    返回值:
        CollectorRegistry: 已填充数据的注册表，可用于推送。

    副作用:
        无。
    """

    reg = CollectorRegistry()
    label_names = list(labels or {})
    for name, val in metrics.items():
        g = Gauge(name, f"{name}", labelnames=label_names, registry=reg)
        if label_names:
            g.labels(**dict(labels or {})).set(float(val))
        else:
            g.set(float(val))
    return reg
