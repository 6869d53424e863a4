from dataclasses import dataclass

import pytest

from kubestate.common import (
    ConditionStatus,
    ObjectMeta,
    add_condition_metrics,
    bool_float,
    condition_family,
    create_label_keys_values,
    resource_version_metric,
    sanitize_label_name,
    wrap_object_func,
)
from kubestate.metric import Family, Metric


@dataclass
class _Condition:
    type: str
    status: object


def test_bool_float():
    assert bool_float(True) == 1
    assert bool_float(False) == 0


@pytest.mark.parametrize(
    "name, expected",
    [
        ("nvidia.com/gpu", "nvidia_com_gpu"),
        ("ephemeral-storage", "ephemeral_storage"),
        ("memory", "memory"),
    ],
)
def test_sanitize_label_name(name, expected):
    assert sanitize_label_name(name) == expected


@pytest.mark.parametrize(
    "status, expected",
    [
        (ConditionStatus.TRUE, [("true", 1), ("false", 0), ("unknown", 0)]),
        ("False", [("true", 0), ("false", 1), ("unknown", 0)]),
        (ConditionStatus.UNKNOWN, [("true", 0), ("false", 0), ("unknown", 1)]),
    ],
)
def test_add_condition_metrics(status, expected):
    metrics = add_condition_metrics(status)
    assert [(m.label_values[0], m.value) for m in metrics] == expected


def test_condition_family_labels_each_condition():
    family = condition_family(
        [_Condition("Ready", ConditionStatus.TRUE), _Condition("CustomizedType", "Unknown")]
    )
    assert len(family.metrics) == 6
    assert all(m.label_keys == ["condition", "status"] for m in family.metrics)
    ready = {m.label_values[1]: m.value for m in family.metrics if m.label_values[0] == "Ready"}
    assert ready == {"true": 1, "false": 0, "unknown": 0}
    custom = {
        m.label_values[1]: m.value for m in family.metrics if m.label_values[0] == "CustomizedType"
    }
    assert custom == {"true": 0, "false": 0, "unknown": 1}


def test_labels_dropped_without_allow_list():
    assert create_label_keys_values({"app": "example1"}, None) == ([], [])
    assert create_label_keys_values({"app": "example1"}, []) == ([], [])


def test_allowed_labels_are_kept():
    assert create_label_keys_values({"app": "example1", "l2": "x"}, ["app"]) == (
        ["label_app"],
        ["example1"],
    )


def test_allowed_labels_are_sorted_and_sanitized():
    labels = {"z.key": "1", "a-key": "2", "m": "3"}
    keys, values = create_label_keys_values(labels, ["z.key", "missing", "a-key", "m"])
    assert len(keys) == len(values) == 3
    assert keys == sorted(keys)
    assert all(sanitize_label_name(k) == k for k in keys)
    assert values == ["2", "3", "1"]


def test_resource_version_metric():
    metrics = resource_version_metric("123456")
    assert [m.value for m in metrics] == [123456]
    assert resource_version_metric("abcdef") == []
    assert resource_version_metric("") == []


def test_wrap_object_func_prefixes_labels():
    def build(meta):
        return Family(metrics=[Metric(["phase"], ["Active"], 1)])

    wrapped = wrap_object_func(["namespace"], lambda meta: [meta.name], build)
    family = wrapped(ObjectMeta(name="ns1"))
    assert family.metrics[0].label_keys == ["namespace", "phase"]
    assert family.metrics[0].label_values == ["ns1", "Active"]


def test_wrap_object_func_does_not_share_key_lists():
    wrapped = wrap_object_func(
        ["lease"],
        lambda meta: [meta.name],
        lambda meta: Family(metrics=[Metric(), Metric(["a"], ["b"])]),
    )
    family = wrapped(ObjectMeta(name="x"))
    family.metrics[0].label_keys.append("extra")
    assert family.metrics[1].label_keys == ["lease", "a"]
    assert wrapped(ObjectMeta(name="y")).metrics[0].label_keys == ["lease"]