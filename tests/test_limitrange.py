import re
from datetime import datetime, timezone

from kubestate.common import ObjectMeta
from kubestate.limitrange import LimitRange, LimitRangeItem, limit_range_metric_families
from kubestate.metric import compose_metric_gen_funcs, extract_metric_family_headers
from kubestate.quantity import parse_quantity

_SAMPLE = re.compile(r"^([a-zA-Z_:][a-zA-Z0-9_:]*)(?:\{(.*)\})?\s+(\S+)$")
_LABEL = re.compile(r'([a-zA-Z_][a-zA-Z0-9_]*)="((?:[^"\\]|\\.)*)"')


def _samples(text, names=None):
    out = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        name, labels, value = _SAMPLE.match(line).groups()
        if names and name not in names:
            continue
        out.append((name, tuple(sorted(_LABEL.findall(labels or ""))), value))
    return sorted(out)


def _render(obj):
    families = compose_metric_gen_funcs(limit_range_metric_families())(obj)
    return "".join(f.to_text() for f in families)


def test_limit_range_store():
    memory = parse_quantity("2.1G")
    limit_range = LimitRange(
        metadata=ObjectMeta(
            name="quotaTest",
            namespace="testNS",
            creation_timestamp=datetime.fromtimestamp(1500000000, tz=timezone.utc),
        ),
        limits=[
            LimitRangeItem(
                type="Pod",
                max={"memory": memory},
                min={"memory": memory},
                default={"memory": memory},
                default_request={"memory": memory},
                max_limit_request_ratio={"memory": memory},
            )
        ],
    )
    want = """
        kube_limitrange_created{limitrange="quotaTest",namespace="testNS"} 1.5e+09
        kube_limitrange{constraint="default",limitrange="quotaTest",namespace="testNS",resource="memory",type="Pod"} 2.1e+09
        kube_limitrange{constraint="defaultRequest",limitrange="quotaTest",namespace="testNS",resource="memory",type="Pod"} 2.1e+09
        kube_limitrange{constraint="max",limitrange="quotaTest",namespace="testNS",resource="memory",type="Pod"} 2.1e+09
        kube_limitrange{constraint="maxLimitRequestRatio",limitrange="quotaTest",namespace="testNS",resource="memory",type="Pod"} 2.1e+09
        kube_limitrange{constraint="min",limitrange="quotaTest",namespace="testNS",resource="memory",type="Pod"} 2.1e+09
    """
    assert _samples(_render(limit_range)) == _samples(want)


def test_limit_range_without_creation_time_or_limits():
    limit_range = LimitRange(metadata=ObjectMeta(name="quotaTest", namespace="testNS"))
    assert _render(limit_range) == ""


def test_limit_range_constraint_order():
    item = LimitRangeItem(
        type="Container",
        min={"cpu": parse_quantity("4.3")},
        max={"cpu": parse_quantity("3")},
    )
    family = limit_range_metric_families()[0].generate(LimitRange(limits=[item]))
    assert [m.label_values[-1] for m in family.metrics] == ["min", "max"]
    assert [m.value for m in family.metrics] == [4.3, 3]
    assert family.metrics[0].label_keys == [
        "namespace",
        "limitrange",
        "resource",
        "type",
        "constraint",
    ]


def test_limit_range_headers():
    headers = extract_metric_family_headers(limit_range_metric_families())
    assert set(headers) == {
        "# HELP kube_limitrange_created Unix creation timestamp\n"
        "# TYPE kube_limitrange_created gauge",
        "# HELP kube_limitrange Information about limit range.\n"
        "# TYPE kube_limitrange gauge",
    }