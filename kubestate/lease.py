"""Metric families describing leases."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime

from kubestate.common import ObjectMeta, wrap_object_func
from kubestate.metric import Family, FamilyGenerator, Metric, MetricType

_DEFAULT_LABELS = ["lease"]


@dataclass
class LeaseSpec:
    """Specification of a lease."""

    renew_time: datetime | None = None


@dataclass
class Lease:
    """A lease object."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: LeaseSpec = field(default_factory=LeaseSpec)


def _wrap(func):
    return wrap_object_func(_DEFAULT_LABELS, lambda lease: [lease.metadata.name], func)


def _owner(lease: Lease) -> Family:
    keys = ["owner_kind", "owner_name"]
    owners = lease.metadata.owner_references
    if not owners:
        return Family(metrics=[Metric(list(keys), ["<none>", "<none>"], 1)])
    return Family(metrics=[Metric(list(keys), [o.kind, o.name], 1) for o in owners])


def _renew_time(lease: Lease) -> Family:
    renew = lease.spec.renew_time
    if renew is None:
        return Family()
    return Family(metrics=[Metric(value=float(math.floor(renew.timestamp())))])


def lease_metric_families() -> list[FamilyGenerator]:
    """Return the generators of all lease metric families."""
    return [
        FamilyGenerator(
            "kube_lease_owner",
            "Information about the Lease's owner.",
            MetricType.GAUGE,
            _wrap(_owner),
        ),
        FamilyGenerator(
            "kube_lease_renew_time",
            "Kube lease renew time.",
            MetricType.GAUGE,
            _wrap(_renew_time),
        ),
    ]