"""标签集合校验。

提供 grouping key 标签名的语法/保留名校验，以及推送前的
grouping key 与指标标签冲突检查。
"""

from __future__ import annotations

import re
from typing import Any, FrozenSet, Iterable, Mapping, Optional

from .errors import InvalidLabelSetError, LabelCollisionError
from .registry import metric_entries

LABEL_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
BASE_RESERVED_LABELS: FrozenSet[str] = frozenset({"pid"})


class LabelSetValidator:
    """校验标签名合法性。

    参数:
        reserved_labels: 额外的保留标签名，会与 `BASE_RESERVED_LABELS` 合并。
    """

    def __init__(self, reserved_labels: Optional[Iterable[str]] = None) -> None:
        self.reserved_labels = BASE_RESERVED_LABELS | frozenset(reserved_labels or ())

    def validate_symbols(self, labels: Mapping[Any, Any]) -> bool:
        """校验标签集合中的每个标签名与标签值。

        参数:
            labels: 标签名到标签值的映射。

        返回值:
            bool: 全部合法时返回 True。

        副作用:
            无；不合法时抛出 `InvalidLabelSetError`。
        """

        if not isinstance(labels, Mapping):
            raise InvalidLabelSetError(f"{labels!r} is not a valid label set")
        for key, value in labels.items():
            self.validate_symbol(key)
            if not isinstance(value, str):
                raise InvalidLabelSetError(
                    f"value of label {key!r} must be a string, got {type(value).__name__}"
                )
        return True

    def validate_symbol(self, key: Any) -> bool:
        """校验单个标签名。"""

        if not isinstance(key, str):
            raise InvalidLabelSetError(f"label {key!r} is not a string")
        if not LABEL_NAME_RE.fullmatch(key):
            raise InvalidLabelSetError(
                f"label name {key!r} must match {LABEL_NAME_RE.pattern}"
            )
        if key.startswith("__"):
            raise InvalidLabelSetError(f"label {key!r} must not start with __")
        if key in self.reserved_labels:
            raise InvalidLabelSetError(f"label {key!r} is reserved")
        return True


def validate_no_label_clashes(grouping_key: Mapping[str, str], registry: Any) -> None:
    """检查 grouping key 标签名是否与注册表中任一指标的标签重名。

    参数:
        grouping_key: 推送使用的 grouping key。
        registry: `MetricsSource` 或带 `collect()` 的 Prometheus 注册表。

    返回值:
        None。

    副作用:
        无；发现冲突时抛出 `LabelCollisionError`，此时不会发起任何请求。
    """

    if not grouping_key:
        return

    grouping_labels = frozenset(grouping_key)
    for entry in metric_entries(registry):
        for label in sorted(entry.labels):
            if label in grouping_labels:
                raise LabelCollisionError(label, entry.name)
