"""Metric families describing mutating webhook configurations."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from kubestate.common import ObjectMeta, resource_version_metric, wrap_object_func
from kubestate.metric import Family, FamilyGenerator, Metric, MetricType

_DEFAULT_LABELS = ["namespace", "mutatingwebhookconfiguration"]


@dataclass
class MutatingWebhookConfiguration:
    """A mutating webhook configuration object."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)


def _wrap(func):
    return wrap_object_func(
        _DEFAULT_LABELS,
        lambda mwc: [mwc.metadata.namespace, mwc.metadata.name],
        func,
    )


def _info(_: MutatingWebhookConfiguration) -> Family:
    return Family(metrics=[Metric(value=1)])


def _created(mwc: MutatingWebhookConfiguration) -> Family:
    created = mwc.metadata.creation_timestamp
    if created is None:
        return Family()
    return Family(metrics=[Metric(value=float(math.floor(created.timestamp())))])


def _resource_version(mwc: MutatingWebhookConfiguration) -> Family:
    return Family(metrics=resource_version_metric(mwc.metadata.resource_version))


def mutating_webhook_configuration_metric_families() -> list[FamilyGenerator]:
    """Return the generators of all mutating webhook configuration families."""
    return [
        FamilyGenerator(
            "kube_mutatingwebhookconfiguration_info",
            "Information about the MutatingWebhookConfiguration.",
            MetricType.GAUGE,
            _wrap(_info),
        ),
        FamilyGenerator(
            "kube_mutatingwebhookconfiguration_created",
            "Unix creation timestamp.",
            MetricType.GAUGE,
            _wrap(_created),
        ),
        FamilyGenerator(
            "kube_mutatingwebhookconfiguration_metadata_resource_version",
            "Resource version representing a specific version of the "
            "MutatingWebhookConfiguration.",
            MetricType.GAUGE,
            _wrap(_resource_version),
        ),
    ]