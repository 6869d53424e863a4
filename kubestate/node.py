"""Metric families describing cluster nodes."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Sequence

from kubestate.common import (
    ConditionStatus,
    ObjectMeta,
    bool_float,
    condition_family,
    create_label_keys_values,
    sanitize_label_name,
    wrap_object_func,
)
from kubestate.metric import Family, FamilyGenerator, Metric, MetricType
from kubestate.quantity import Quantity

_DEFAULT_LABELS = ["node"]
_ROLE_PREFIX = "node-role.kubernetes.io/"

RESOURCE_CPU = "cpu"
RESOURCE_MEMORY = "memory"
RESOURCE_PODS = "pods"
RESOURCE_STORAGE = "storage"
RESOURCE_EPHEMERAL_STORAGE = "ephemeral-storage"

UNIT_CORE = "core"
UNIT_BYTE = "byte"
UNIT_INTEGER = "integer"

_HUGE_PAGES_PREFIX = "hugepages-"
_ATTACHABLE_VOLUMES_PREFIX = "attachable-volumes-"
_DEFAULT_NAMESPACE_PREFIX = "kubernetes.io/"
_REQUESTS_PREFIX = "requests."

_QUALIFIED_NAME = re.compile(r"([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9]", re.ASCII)
_DNS_SUBDOMAIN = re.compile(
    r"[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*", re.ASCII
)


@dataclass
class NodeSystemInfo:
    """Version information reported by a node."""

    kernel_version: str = ""
    os_image: str = ""
    container_runtime_version: str = ""
    kubelet_version: str = ""
    kube_proxy_version: str = ""


@dataclass
class NodeAddress:
    """One address of a node."""

    type: str = ""
    address: str = ""


@dataclass
class Taint:
    """A taint applied to a node."""

    key: str = ""
    value: str = ""
    effect: str = ""


@dataclass
class NodeCondition:
    """One condition reported in a node's status."""

    type: str = ""
    status: ConditionStatus | str = ConditionStatus.UNKNOWN


@dataclass
class Node:
    """A cluster node object."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    unschedulable: bool = False
    provider_id: str = ""
    pod_cidr: str = ""
    taints: list[Taint] = field(default_factory=list)
    node_info: NodeSystemInfo = field(default_factory=NodeSystemInfo)
    addresses: list[NodeAddress] = field(default_factory=list)
    capacity: dict[str, Quantity] = field(default_factory=dict)
    allocatable: dict[str, Quantity] = field(default_factory=dict)
    conditions: list[NodeCondition] = field(default_factory=list)


def is_huge_page_resource_name(name: str) -> bool:
    """Tell whether the resource name denotes huge pages."""
    return name.startswith(_HUGE_PAGES_PREFIX)


def is_attachable_volume_resource_name(name: str) -> bool:
    """Tell whether the resource name denotes attachable volumes."""
    return name.startswith(_ATTACHABLE_VOLUMES_PREFIX)


def _is_native_resource(name: str) -> bool:
    return "/" not in name or _DEFAULT_NAMESPACE_PREFIX in name


def _is_qualified_name(value: str) -> bool:
    parts = value.split("/")
    if len(parts) == 1:
        name = parts[0]
    elif len(parts) == 2:
        prefix, name = parts
        if not prefix or len(prefix) > 253 or not _DNS_SUBDOMAIN.fullmatch(prefix):
            return False
    else:
        return False
    return bool(name) and len(name) <= 63 and bool(_QUALIFIED_NAME.fullmatch(name))


def is_extended_resource_name(name: str) -> bool:
    """Tell whether the resource name is a vendor-defined extended resource."""
    if _is_native_resource(name) or name.startswith(_REQUESTS_PREFIX):
        return False
    return _is_qualified_name(_REQUESTS_PREFIX + name)


def _wrap(func):
    return wrap_object_func(_DEFAULT_LABELS, lambda n: [n.metadata.name], func)


def _created(node: Node) -> Family:
    created = node.metadata.creation_timestamp
    if created is None:
        return Family()
    return Family(metrics=[Metric(value=float(math.floor(created.timestamp())))])


def _info(node: Node) -> Family:
    info = node.node_info
    internal_ip = ""
    for address in node.addresses:
        if address.type == "InternalIP":
            internal_ip = address.address
    keys = [
        "kernel_version",
        "os_image",
        "container_runtime_version",
        "kubelet_version",
        "kubeproxy_version",
        "provider_id",
        "pod_cidr",
        "internal_ip",
    ]
    values = [
        info.kernel_version,
        info.os_image,
        info.container_runtime_version,
        info.kubelet_version,
        info.kube_proxy_version,
        node.provider_id,
        node.pod_cidr,
        internal_ip,
    ]
    return Family(metrics=[Metric(keys, values, 1)])


def _role(node: Node) -> Family:
    return Family(
        metrics=[
            Metric(["role"], [label[len(_ROLE_PREFIX):]], 1.0)
            for label in node.metadata.labels
            if label.startswith(_ROLE_PREFIX)
        ]
    )


def _taints(node: Node) -> Family:
    return Family(
        metrics=[
            Metric(["key", "value", "effect"], [t.key, t.value, str(t.effect)], 1)
            for t in node.taints
        ]
    )


def _unschedulable(node: Node) -> Family:
    return Family(metrics=[Metric(value=bool_float(node.unschedulable))])


def _resource_units(name: str) -> list[str]:
    if name == RESOURCE_CPU:
        return [UNIT_CORE]
    if name in (RESOURCE_STORAGE, RESOURCE_EPHEMERAL_STORAGE, RESOURCE_MEMORY):
        return [UNIT_BYTE]
    if name == RESOURCE_PODS:
        return [UNIT_INTEGER]
    units = []
    if is_huge_page_resource_name(name):
        units.append(UNIT_BYTE)
    if is_attachable_volume_resource_name(name):
        units.append(UNIT_BYTE)
    if is_extended_resource_name(name):
        units.append(UNIT_INTEGER)
    return units


def _resource_family(resources: dict[str, Quantity]) -> Family:
    return Family(
        metrics=[
            Metric(
                ["resource", "unit"],
                [sanitize_label_name(name), unit],
                quantity.milli_value() / 1000,
            )
            for name, quantity in resources.items()
            for unit in _resource_units(name)
        ]
    )


def _allocatable(node: Node) -> Family:
    return _resource_family(node.allocatable)


def _capacity(node: Node) -> Family:
    return _resource_family(node.capacity)


def _conditions(node: Node) -> Family:
    return condition_family(node.conditions)


def node_metric_families(
    allow_labels_list: Sequence[str] | None,
) -> list[FamilyGenerator]:
    """Return the generators of all node metric families."""

    def labels(node: Node) -> Family:
        keys, values = create_label_keys_values(node.metadata.labels, allow_labels_list)
        return Family(metrics=[Metric(keys, values, 1)])

    return [
        FamilyGenerator(
            "kube_node_created",
            "Unix creation timestamp",
            MetricType.GAUGE,
            _wrap(_created),
        ),
        FamilyGenerator(
            "kube_node_info",
            "Information about a cluster node.",
            MetricType.GAUGE,
            _wrap(_info),
        ),
        FamilyGenerator(
            "kube_node_labels",
            "Kubernetes labels converted to Prometheus labels.",
            MetricType.GAUGE,
            _wrap(labels),
        ),
        FamilyGenerator(
            "kube_node_role",
            "The role of a cluster node.",
            MetricType.GAUGE,
            _wrap(_role),
        ),
        FamilyGenerator(
            "kube_node_spec_taint",
            "The taint of a cluster node.",
            MetricType.GAUGE,
            _wrap(_taints),
        ),
        FamilyGenerator(
            "kube_node_spec_unschedulable",
            "Whether a node can schedule new pods.",
            MetricType.GAUGE,
            _wrap(_unschedulable),
        ),
        FamilyGenerator(
            "kube_node_status_allocatable",
            "The allocatable for different resources of a node that are "
            "available for scheduling.",
            MetricType.GAUGE,
            _wrap(_allocatable),
        ),
        FamilyGenerator(
            "kube_node_status_capacity",
            "The capacity for different resources of a node.",
            MetricType.GAUGE,
            _wrap(_capacity),
        ),
        FamilyGenerator(
            "kube_node_status_condition",
            "The condition of a cluster node.",
            MetricType.GAUGE,
            _wrap(_conditions),
        ),
    ]