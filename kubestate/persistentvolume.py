"""Metric families describing persistent volumes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from kubestate.common import (
    ObjectMeta,
    bool_float,
    create_label_keys_values,
    wrap_object_func,
)
from kubestate.metric import Family, FamilyGenerator, Metric, MetricType
from kubestate.quantity import Quantity

_DEFAULT_LABELS = ["persistentvolume"]

RESOURCE_STORAGE = "storage"

VOLUME_PENDING = "Pending"
VOLUME_AVAILABLE = "Available"
VOLUME_BOUND = "Bound"
VOLUME_RELEASED = "Released"
VOLUME_FAILED = "Failed"

_PHASES = (VOLUME_PENDING, VOLUME_AVAILABLE, VOLUME_BOUND, VOLUME_RELEASED, VOLUME_FAILED)

_INFO_KEYS = [
    "storageclass",
    "gce_persistent_disk_name",
    "ebs_volume_id",
    "azure_disk_name",
    "fc_wwids",
    "fc_lun",
    "fc_target_wwns",
    "iscsi_target_portal",
    "iscsi_iqn",
    "iscsi_lun",
    "iscsi_initiator_name",
    "nfs_server",
    "nfs_path",
]


@dataclass
class ClaimReference:
    """Reference to the claim bound to a volume."""

    name: str = ""
    namespace: str = ""
    kind: str = ""
    api_version: str = ""


@dataclass
class GCEPersistentDiskSource:
    """A GCE persistent disk backing a volume."""

    pd_name: str = ""


@dataclass
class AWSElasticBlockStoreSource:
    """An AWS elastic block store volume backing a volume."""

    volume_id: str = ""


@dataclass
class AzureDiskSource:
    """An Azure disk backing a volume."""

    disk_name: str = ""


@dataclass
class FCSource:
    """A fibre channel volume backing a volume."""

    lun: int | None = None
    target_wwns: list[str] = field(default_factory=list)
    wwids: list[str] = field(default_factory=list)


@dataclass
class ISCSISource:
    """An iSCSI volume backing a volume."""

    target_portal: str = ""
    iqn: str = ""
    lun: int = 0
    initiator_name: str | None = None


@dataclass
class NFSSource:
    """An NFS export backing a volume."""

    server: str = ""
    path: str = ""


@dataclass
class PersistentVolume:
    """A persistent volume object."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    storage_class_name: str = ""
    claim_ref: ClaimReference | None = None
    capacity: dict[str, Quantity] = field(default_factory=dict)
    phase: str = ""
    gce_persistent_disk: GCEPersistentDiskSource | None = None
    aws_elastic_block_store: AWSElasticBlockStoreSource | None = None
    azure_disk: AzureDiskSource | None = None
    fc: FCSource | None = None
    iscsi: ISCSISource | None = None
    nfs: NFSSource | None = None


def _wrap(func):
    return wrap_object_func(_DEFAULT_LABELS, lambda p: [p.metadata.name], func)


def _claim_ref(pv: PersistentVolume) -> Family:
    ref = pv.claim_ref
    if ref is None:
        return Family()
    return Family(
        metrics=[Metric(["name", "claim_namespace"], [ref.name, ref.namespace], 1)]
    )


def _phase(pv: PersistentVolume) -> Family:
    if not pv.phase:
        return Family()
    return Family(
        metrics=[
            Metric(["phase"], [phase], bool_float(pv.phase == phase))
            for phase in _PHASES
        ]
    )


def _source_labels(pv: PersistentVolume) -> dict[str, str]:
    if pv.gce_persistent_disk is not None:
        return {"gce_persistent_disk_name": pv.gce_persistent_disk.pd_name}
    if pv.aws_elastic_block_store is not None:
        return {"ebs_volume_id": pv.aws_elastic_block_store.volume_id}
    if pv.azure_disk is not None:
        return {"azure_disk_name": pv.azure_disk.disk_name}
    if pv.fc is not None:
        fc = pv.fc
        return {
            "fc_lun": "" if fc.lun is None else str(fc.lun),
            "fc_target_wwns": ",".join(fc.target_wwns),
            "fc_wwids": ",".join(fc.wwids),
        }
    if pv.iscsi is not None:
        iscsi = pv.iscsi
        return {
            "iscsi_target_portal": iscsi.target_portal,
            "iscsi_iqn": iscsi.iqn,
            "iscsi_lun": str(iscsi.lun),
            "iscsi_initiator_name": iscsi.initiator_name or "",
        }
    if pv.nfs is not None:
        return {"nfs_server": pv.nfs.server, "nfs_path": pv.nfs.path}
    return {}


def _info(pv: PersistentVolume) -> Family:
    labels = {"storageclass": pv.storage_class_name, **_source_labels(pv)}
    values = [labels.get(key, "") for key in _INFO_KEYS]
    return Family(metrics=[Metric(list(_INFO_KEYS), values, 1)])


def _capacity(pv: PersistentVolume) -> Family:
    storage = pv.capacity.get(RESOURCE_STORAGE)
    value = 0 if storage is None else storage.value()
    return Family(metrics=[Metric(value=float(value))])


def persistent_volume_metric_families(
    allow_labels_list: Sequence[str] | None,
) -> list[FamilyGenerator]:
    """Return the generators of all persistent volume metric families."""

    def labels(pv: PersistentVolume) -> Family:
        keys, values = create_label_keys_values(pv.metadata.labels, allow_labels_list)
        return Family(metrics=[Metric(keys, values, 1)])

    return [
        FamilyGenerator(
            "kube_persistentvolume_claim_ref",
            "Information about the Persitant Volume Claim Reference.",
            MetricType.GAUGE,
            _wrap(_claim_ref),
        ),
        FamilyGenerator(
            "kube_persistentvolume_labels",
            "Kubernetes labels converted to Prometheus labels.",
            MetricType.GAUGE,
            _wrap(labels),
        ),
        FamilyGenerator(
            "kube_persistentvolume_status_phase",
            "The phase indicates if a volume is available, bound to a claim, "
            "or released by a claim.",
            MetricType.GAUGE,
            _wrap(_phase),
        ),
        FamilyGenerator(
            "kube_persistentvolume_info",
            "Information about persistentvolume.",
            MetricType.GAUGE,
            _wrap(_info),
        ),
        FamilyGenerator(
            "kube_persistentvolume_capacity_bytes",
            "Persistentvolume capacity in bytes.",
            MetricType.GAUGE,
            _wrap(_capacity),
        ),
    ]