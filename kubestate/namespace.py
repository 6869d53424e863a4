"""Metric families describing namespaces."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from kubestate.common import (
    ConditionStatus,
    ObjectMeta,
    bool_float,
    condition_family,
    create_label_keys_values,
    wrap_object_func,
)
from kubestate.metric import Family, FamilyGenerator, Metric, MetricType

_DEFAULT_LABELS = ["namespace"]

NAMESPACE_ACTIVE = "Active"
NAMESPACE_TERMINATING = "Terminating"


@dataclass
class NamespaceCondition:
    """One condition reported in a namespace's status."""

    type: str = ""
    status: ConditionStatus | str = ConditionStatus.UNKNOWN


@dataclass
class Namespace:
    """A namespace object."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    finalizers: list[str] = field(default_factory=list)
    phase: str = ""
    conditions: list[NamespaceCondition] = field(default_factory=list)


def _wrap(func):
    return wrap_object_func(_DEFAULT_LABELS, lambda n: [n.metadata.name], func)


def _created(ns: Namespace) -> Family:
    created = ns.metadata.creation_timestamp
    if created is None:
        return Family()
    return Family(metrics=[Metric(value=float(math.floor(created.timestamp())))])


def _phase(ns: Namespace) -> Family:
    return Family(
        metrics=[
            Metric(["phase"], [phase], bool_float(ns.phase == phase))
            for phase in (NAMESPACE_ACTIVE, NAMESPACE_TERMINATING)
        ]
    )


def _conditions(ns: Namespace) -> Family:
    return condition_family(ns.conditions)


def namespace_metric_families(
    allow_labels_list: Sequence[str] | None,
) -> list[FamilyGenerator]:
    """Return the generators of all namespace metric families."""

    def labels(ns: Namespace) -> Family:
        keys, values = create_label_keys_values(ns.metadata.labels, allow_labels_list)
        return Family(metrics=[Metric(keys, values, 1)])

    return [
        FamilyGenerator(
            "kube_namespace_created",
            "Unix creation timestamp",
            MetricType.GAUGE,
            _wrap(_created),
        ),
        FamilyGenerator(
            "kube_namespace_labels",
            "Kubernetes labels converted to Prometheus labels.",
            MetricType.GAUGE,
            _wrap(labels),
        ),
        FamilyGenerator(
            "kube_namespace_status_phase",
            "kubernetes namespace status phase.",
            MetricType.GAUGE,
            _wrap(_phase),
        ),
        FamilyGenerator(
            "kube_namespace_status_condition",
            "The condition of a namespace.",
            MetricType.GAUGE,
            _wrap(_conditions),
        ),
    ]