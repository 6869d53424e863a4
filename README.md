# kubestate

`kubestate` turns the state of Kubernetes objects into Prometheus metric
families in the text exposition format. You describe an object with plain
Python dataclasses and pass it to a set of family generators. They return the
`kube_*` metrics that describe the object.

The package covers these objects:

- leases (`kubestate.lease`)
- limit ranges (`kubestate.limitrange`)
- mutating webhook configurations (`kubestate.mutatingwebhookconfiguration`)
- namespaces (`kubestate.namespace`)
- network policies (`kubestate.networkpolicy`)
- nodes (`kubestate.node`)
- persistent volumes (`kubestate.persistentvolume`)
- persistent volume claims (`kubestate.persistentvolumeclaim`)

## Installation

```
pip install .
```

To install the test tools as well:

```
pip install ".[test]"
```

## Usage

Each resource module has a function that returns a list of
`FamilyGenerator` objects:

- `lease_metric_families()`
- `limit_range_metric_families()`
- `mutating_webhook_configuration_metric_families()`
- `namespace_metric_families(allow_labels_list)`
- `network_policy_metric_families(allow_labels_list)`
- `node_metric_families(allow_labels_list)`
- `persistent_volume_metric_families(allow_labels_list)`
- `persistent_volume_claim_metric_families(allow_labels_list)`

`kubestate.metric.compose_metric_gen_funcs` joins a list of generators into a
single callable. That callable takes an object and returns one `Family` per
generator. `extract_metric_family_headers` returns the matching
`# HELP` / `# TYPE` lines. `Family.to_text()` renders the samples of a family,
one line for each.

```python
from datetime import datetime, timezone

from kubestate.common import ObjectMeta, OwnerReference
from kubestate.lease import Lease, LeaseSpec, lease_metric_families
from kubestate.metric import compose_metric_gen_funcs, extract_metric_family_headers

generators = lease_metric_families()
generate = compose_metric_gen_funcs(generators)

lease = Lease(
    metadata=ObjectMeta(
        name="kube-master",
        owner_references=[OwnerReference(kind="Node", name="kube-master")],
    ),
    spec=LeaseSpec(renew_time=datetime.fromtimestamp(1500000000, tz=timezone.utc)),
)

for header in extract_metric_family_headers(generators):
    print(header)
for family in generate(lease):
    print(family.to_text(), end="")
```

The output contains these lines:

```
kube_lease_owner{lease="kube-master",owner_kind="Node",owner_name="kube-master"} 1
kube_lease_renew_time{lease="kube-master"} 1.5e+09
```

Sample values go through `kubestate.metric.format_value`. It writes the
shortest form that round-trips. It switches to exponent notation when the
decimal exponent is below -4 or at least 6, as with `1.5e+09` above.

### Quantities

Resource amounts are Kubernetes quantities. Create them with
`kubestate.quantity.parse_quantity`, for example `parse_quantity("2.1G")`,
`parse_quantity("5Gi")` or `parse_quantity("4.3")`. The parser accepts:

- decimal suffixes `n u m k M G T P E`
- binary suffixes `Ki Mi Gi Ti Pi Ei`
- exponents such as `1e3`

A malformed quantity raises `QuantityError`, which is a subclass of
`ValueError`. `Quantity.value()` and `Quantity.milli_value()` round up to an
integer.

### Object labels

Generators that export object labels take an `allow_labels_list`. Only labels
named in that list become metric labels. Each one is named `label_<name>`:
characters that are not allowed in a label name become `_`, and the labels are
sorted by name. Pass `None` or an empty list to export no object labels.

### Helpers

`kubestate.common` holds the pieces the resource modules share:

- `ObjectMeta`, `OwnerReference` and `ConditionStatus`
- `add_condition_metrics` and `condition_family`: one metric for each of
  `true`, `false` and `unknown`, set to 1 for the current status
- `sanitize_label_name`
- `create_label_keys_values`
- `resource_version_metric`: emits a sample only when the resource version
  is numeric
- `wrap_object_func`: prefixes every metric with the object's identifying
  labels

A `Metric` whose label keys and label values differ in number raises
`ValueError` when it is rendered.

## What the package does not do

`kubestate` only computes metric families from objects that you build
yourself. It does not:

- connect to a Kubernetes API server
- list or watch objects
- keep a store of objects
- serve a `/metrics` HTTP endpoint

The caller fetches objects and exposes the resulting text.

## Running the tests

```
pytest
```