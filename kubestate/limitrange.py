"""Metric families describing limit ranges."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from kubestate.common import ObjectMeta, wrap_object_func
from kubestate.metric import Family, FamilyGenerator, Metric, MetricType
from kubestate.quantity import Quantity

_DEFAULT_LABELS = ["namespace", "limitrange"]


@dataclass
class LimitRangeItem:
    """Constraints on one kind of resource within a limit range."""

    type: str = ""
    min: dict[str, Quantity] = field(default_factory=dict)
    max: dict[str, Quantity] = field(default_factory=dict)
    default: dict[str, Quantity] = field(default_factory=dict)
    default_request: dict[str, Quantity] = field(default_factory=dict)
    max_limit_request_ratio: dict[str, Quantity] = field(default_factory=dict)


@dataclass
class LimitRange:
    """A limit range object."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    limits: list[LimitRangeItem] = field(default_factory=list)


def _wrap(func):
    return wrap_object_func(
        _DEFAULT_LABELS,
        lambda r: [r.metadata.namespace, r.metadata.name],
        func,
    )


def _limits(limit_range: LimitRange) -> Family:
    metrics = []
    for item in limit_range.limits:
        constraints = (
            ("min", item.min),
            ("max", item.max),
            ("default", item.default),
            ("defaultRequest", item.default_request),
            ("maxLimitRequestRatio", item.max_limit_request_ratio),
        )
        for constraint, resources in constraints:
            metrics.extend(
                Metric(
                    ["resource", "type", "constraint"],
                    [resource, item.type, constraint],
                    quantity.milli_value() / 1000,
                )
                for resource, quantity in resources.items()
            )
    return Family(metrics=metrics)


def _created(limit_range: LimitRange) -> Family:
    created = limit_range.metadata.creation_timestamp
    if created is None:
        return Family()
    return Family(metrics=[Metric(value=float(math.floor(created.timestamp())))])


def limit_range_metric_families() -> list[FamilyGenerator]:
    """Return the generators of all limit range metric families."""
    return [
        FamilyGenerator(
            "kube_limitrange",
            "Information about limit range.",
            MetricType.GAUGE,
            _wrap(_limits),
        ),
        FamilyGenerator(
            "kube_limitrange_created",
            "Unix creation timestamp",
            MetricType.GAUGE,
            _wrap(_created),
        ),
    ]