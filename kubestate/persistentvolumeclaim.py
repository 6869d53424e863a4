"""Metric families describing persistent volume claims."""

from __future__ import annotations

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
from kubestate.quantity import Quantity

_DEFAULT_LABELS = ["namespace", "persistentvolumeclaim"]

BETA_STORAGE_CLASS_ANNOTATION = "volume.beta.kubernetes.io/storage-class"
RESOURCE_STORAGE = "storage"

CLAIM_LOST = "Lost"
CLAIM_BOUND = "Bound"
CLAIM_PENDING = "Pending"

_PHASES = (CLAIM_LOST, CLAIM_BOUND, CLAIM_PENDING)


@dataclass
class PersistentVolumeClaimCondition:
    """One condition reported in a claim's status."""

    type: str = ""
    status: ConditionStatus | str = ConditionStatus.UNKNOWN


@dataclass
class PersistentVolumeClaim:
    """A persistent volume claim object."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    access_modes: list[str] = field(default_factory=list)
    storage_class_name: str | None = None
    requests: dict[str, Quantity] = field(default_factory=dict)
    volume_name: str = ""
    phase: str = ""
    conditions: list[PersistentVolumeClaimCondition] = field(default_factory=list)


def get_persistent_volume_claim_class(claim: PersistentVolumeClaim) -> str:
    """Return the storage class of a claim, or ``<none>`` if none was requested."""
    annotations = claim.metadata.annotations
    if BETA_STORAGE_CLASS_ANNOTATION in annotations:
        return annotations[BETA_STORAGE_CLASS_ANNOTATION]
    if claim.storage_class_name is not None:
        return claim.storage_class_name
    return "<none>"


def _wrap(func):
    return wrap_object_func(
        _DEFAULT_LABELS,
        lambda p: [p.metadata.namespace, p.metadata.name],
        func,
    )


def _info(claim: PersistentVolumeClaim) -> Family:
    return Family(
        metrics=[
            Metric(
                ["storageclass", "volumename"],
                [get_persistent_volume_claim_class(claim), claim.volume_name],
                1,
            )
        ]
    )


def _phase(claim: PersistentVolumeClaim) -> Family:
    if not claim.phase:
        return Family()
    return Family(
        metrics=[
            Metric(["phase"], [phase], bool_float(claim.phase == phase))
            for phase in _PHASES
        ]
    )


def _storage_requests(claim: PersistentVolumeClaim) -> Family:
    storage = claim.requests.get(RESOURCE_STORAGE)
    if storage is None:
        return Family()
    return Family(metrics=[Metric(value=float(storage.value()))])


def _access_modes(claim: PersistentVolumeClaim) -> Family:
    return Family(
        metrics=[Metric(["access_mode"], [str(mode)], 1) for mode in claim.access_modes]
    )


def _conditions(claim: PersistentVolumeClaim) -> Family:
    return condition_family(claim.conditions)


def persistent_volume_claim_metric_families(
    allow_labels_list: Sequence[str] | None,
) -> list[FamilyGenerator]:
    """Return the generators of all persistent volume claim metric families."""

    def labels(claim: PersistentVolumeClaim) -> Family:
        keys, values = create_label_keys_values(
            claim.metadata.labels, allow_labels_list
        )
        return Family(metrics=[Metric(keys, values, 1)])

    return [
        FamilyGenerator(
            "kube_persistentvolumeclaim_labels",
            "Kubernetes labels converted to Prometheus labels.",
            MetricType.GAUGE,
            _wrap(labels),
        ),
        FamilyGenerator(
            "kube_persistentvolumeclaim_info",
            "Information about persistent volume claim.",
            MetricType.GAUGE,
            _wrap(_info),
        ),
        FamilyGenerator(
            "kube_persistentvolumeclaim_status_phase",
            "The phase the persistent volume claim is currently in.",
            MetricType.GAUGE,
            _wrap(_phase),
        ),
        FamilyGenerator(
            "kube_persistentvolumeclaim_resource_requests_storage_bytes",
            "The capacity of storage requested by the persistent volume claim.",
            MetricType.GAUGE,
            _wrap(_storage_requests),
        ),
        FamilyGenerator(
            "kube_persistentvolumeclaim_access_mode",
            "The access mode(s) specified by the persistent volume claim.",
            MetricType.GAUGE,
            _wrap(_access_modes),
        ),
        FamilyGenerator(
            "kube_persistentvolumeclaim_status_condition",
            "Information about status of different conditions of persistent "
            "volume claim.",
            MetricType.GAUGE,
            _wrap(_conditions),
        ),
    ]