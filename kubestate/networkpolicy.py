"""Metric families describing network policies."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence

from kubestate.common import ObjectMeta, create_label_keys_values, wrap_object_func
from kubestate.metric import Family, FamilyGenerator, Metric, MetricType

_DEFAULT_LABELS = ["namespace", "networkpolicy"]

# Seconds since the epoch of the zero time (year 1, January 1st, UTC).
_ZERO_TIME_UNIX = math.floor(
    (datetime(1, 1, 1, tzinfo=timezone.utc) - datetime(1970, 1, 1, tzinfo=timezone.utc))
    .total_seconds()
)


@dataclass
class NetworkPolicy:
    """A network policy object; rules are kept as opaque values."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    ingress: list[Any] = field(default_factory=list)
    egress: list[Any] = field(default_factory=list)


def _wrap(func):
    return wrap_object_func(
        _DEFAULT_LABELS,
        lambda n: [n.metadata.namespace, n.metadata.name],
        func,
    )


def _created(policy: NetworkPolicy) -> Family:
    created = policy.metadata.creation_timestamp
    seconds = _ZERO_TIME_UNIX if created is None else math.floor(created.timestamp())
    return Family(metrics=[Metric(value=float(seconds))])


def _ingress(policy: NetworkPolicy) -> Family:
    return Family(metrics=[Metric(value=float(len(policy.ingress)))])


def _egress(policy: NetworkPolicy) -> Family:
    return Family(metrics=[Metric(value=float(len(policy.egress)))])


def network_policy_metric_families(
    allow_labels_list: Sequence[str] | None,
) -> list[FamilyGenerator]:
    """Return the generators of all network policy metric families."""

    def labels(policy: NetworkPolicy) -> Family:
        keys, values = create_label_keys_values(
            policy.metadata.labels, allow_labels_list
        )
        return Family(metrics=[Metric(keys, values, 1)])

    return [
        FamilyGenerator(
            "kube_networkpolicy_created",
            "Unix creation timestamp of network policy",
            MetricType.GAUGE,
            _wrap(_created),
        ),
        FamilyGenerator(
            "kube_networkpolicy_labels",
            "Kubernetes labels converted to Prometheus labels",
            MetricType.GAUGE,
            _wrap(labels),
        ),
        FamilyGenerator(
            "kube_networkpolicy_spec_ingress_rules",
            "Number of ingress rules on the networkpolicy",
            MetricType.GAUGE,
            _wrap(_ingress),
        ),
        FamilyGenerator(
            "kube_networkpolicy_spec_egress_rules",
            "Number of egress rules on the networkpolicy",
            MetricType.GAUGE,
            _wrap(_egress),
        ),
    ]