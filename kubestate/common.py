"""Object metadata and helpers shared by the metric family definitions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Sequence

from kubestate.metric import Family, Metric

_INVALID_LABEL_CHAR = re.compile(r"[^a-zA-Z0-9_]")


@dataclass
class OwnerReference:
    """Reference to the object that owns another."""

    kind: str = ""
    name: str = ""


@dataclass
class ObjectMeta:
    """Metadata common to all objects."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    creation_timestamp: datetime | None = None
    resource_version: str = ""
    generation: int = 0
    owner_references: list[OwnerReference] = field(default_factory=list)


class ConditionStatus(str, Enum):
    """Status of a condition."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


def _text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def bool_float(value: Any) -> float:
    """Return 1.0 for a truthy value and 0.0 otherwise."""
    return float(bool(value))


def add_condition_metrics(status: ConditionStatus | str) -> list[Metric]:
    """Return one metric per possible status, set to 1 for the given one."""
    current = _text(status)
    return [
        Metric(label_values=[s.value.lower()], value=bool_float(current == s.value))
        for s in ConditionStatus
    ]


def condition_family(conditions: Iterable[Any]) -> Family:
    """Build condition/status metrics from objects with ``type`` and ``status``."""
    metrics = []
    for condition in conditions:
        for m in add_condition_metrics(condition.status):
            m.label_keys = ["condition", "status"]
            m.label_values = [_text(condition.type), *m.label_values]
            metrics.append(m)
    return Family(metrics=metrics)


def sanitize_label_name(name: str) -> str:
    """Replace every character not allowed in a label name with ``_``."""
    return _INVALID_LABEL_CHAR.sub("_", name)


def create_label_keys_values(
    labels: Mapping[str, str], allow_labels_list: Sequence[str] | None
) -> tuple[list[str], list[str]]:
    """Turn the allowed object labels into sorted label keys and values."""
    allowed = {key: labels[key] for key in allow_labels_list or () if key in labels}
    keys = sorted(allowed)
    return (
        [f"label_{sanitize_label_name(key)}" for key in keys],
        [allowed[key] for key in keys],
    )


def resource_version_metric(resource_version: str) -> list[Metric]:
    """Return a metric holding the resource version if it is numeric."""
    text = resource_version
    if not text or text != text.strip() or "_" in text:
        return []
    try:
        value = float(text)
    except ValueError:
        return []
    return [Metric(value=value)]


def wrap_object_func(
    default_keys: Sequence[str],
    default_values: Callable[[Any], Sequence[str]],
    func: Callable[[Any], Family],
) -> Callable[[Any], Family]:
    """Prefix every metric built by ``func`` with the object's identifying labels."""
    keys = list(default_keys)

    def wrapped(obj: Any) -> Family:
        family = func(obj)
        values = list(default_values(obj))
        for m in family.metrics:
            m.label_keys = keys + list(m.label_keys)
            m.label_values = values + list(m.label_values)
        return family

    return wrapped