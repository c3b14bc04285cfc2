"""标签校验与冲突检查测试。"""

from __future__ import annotations

from typing import Iterable

import pytest

from pushgateway_client.errors import (
    ErrorKind,
    InvalidLabelSetError,
    LabelCollisionError,
)
from pushgateway_client.labels import LabelSetValidator, validate_no_label_clashes
from pushgateway_client.registry import MetricEntry


def test_valid_labels():
    assert LabelSetValidator().validate_symbols({"instance": "x", "_zone": "a"}) is True


@pytest.mark.parametrize(
    "labels",
    [
        {"1abc": "x"},
        {"bad-name": "x"},
        {"__internal": "x"},
        {"pid": "1"},
        {1: "x"},
        {"instance": 1},
    ],
)
def test_invalid_labels(labels):
    with pytest.raises(InvalidLabelSetError) as ei:
        LabelSetValidator().validate_symbols(labels)
    assert ei.value.kind is ErrorKind.INVALID_LABEL_SET


def test_not_a_mapping():
    with pytest.raises(InvalidLabelSetError):
        LabelSetValidator().validate_symbols(["instance"])  # type: ignore[arg-type]


def test_extra_reserved_labels():
    validator = LabelSetValidator(reserved_labels=["le"])
    with pytest.raises(InvalidLabelSetError):
        validator.validate_symbols({"le": "0.5"})


def test_no_clash_check_without_grouping_key(labelled_registry):
    validate_no_label_clashes({}, labelled_registry)


def test_clash_with_collector_registry(labelled_registry):
    with pytest.raises(LabelCollisionError) as ei:
        validate_no_label_clashes({"instance": "x"}, labelled_registry)
    err = ei.value
    assert err.label == "instance"
    assert err.metric == "batch_rows"
    assert err.kind is ErrorKind.LABEL_COLLISION
    assert "instance" in str(err) and "batch_rows" in str(err)


def test_no_clash_on_distinct_labels(labelled_registry):
    validate_no_label_clashes({"zone": "eu"}, labelled_registry)


class StaticSource:
    def __init__(self, entries: Iterable[MetricEntry]):
        self._entries = list(entries)

    def metrics(self) -> Iterable[MetricEntry]:
        return self._entries


def test_clash_with_metrics_source():
    source = StaticSource(
        [
            MetricEntry("up", frozenset()),
            MetricEntry("jobs_total", frozenset({"env", "queue"})),
        ]
    )
    validate_no_label_clashes({"instance": "x"}, source)
    with pytest.raises(LabelCollisionError) as ei:
        validate_no_label_clashes({"queue": "q1"}, source)
    assert ei.value.metric == "jobs_total"
