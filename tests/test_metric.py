import math

import pytest

from kubestate.metric import (
    Family,
    FamilyGenerator,
    Metric,
    MetricType,
    compose_metric_gen_funcs,
    extract_metric_family_headers,
    format_value,
)


@pytest.mark.parametrize(
    "value, text",
    [
        (1500000000.0, "1.5e+09"),
        (2100000000.0, "2.1e+09"),
        (5368709120.0, "5.36870912e+09"),
        (1073741824.0, "1.073741824e+09"),
        (1501569018.0, "1.501569018e+09"),
        (4.3, "4.3"),
        (555.0, "555"),
        (1000.0, "1000"),
        (123456.0, "123456"),
        (1.0, "1"),
        (0.0, "0"),
        (3.0, "3"),
    ],
)
def test_format_value_matches_source_outputs(value, text):
    assert format_value(value) == text


@pytest.mark.parametrize(
    "value",
    [0.1, 1e-5, 12345.678, 1e21, 2.5e-300, 7.0, 999999.0, 1000000.0, -42.125, 3e6],
)
def test_format_value_round_trips(value):
    assert float(format_value(value)) == value


def test_format_value_special_values():
    assert format_value(math.nan) == "NaN"
    assert format_value(math.inf) == "+Inf"
    assert format_value(-math.inf).startswith("-")


def test_family_to_text_renders_labels():
    family = Family(
        name="kube_lease_owner",
        metrics=[
            Metric(
                label_keys=["lease", "owner_kind", "owner_name"],
                label_values=["kube-master", "Node", "kube-master"],
                value=1,
            )
        ],
    )
    assert family.to_text() == (
        'kube_lease_owner{lease="kube-master",owner_kind="Node",owner_name="kube-master"} 1\n'
    )


def test_family_without_labels_has_no_braces():
    family = Family(name="kube_lease_renew_time", metrics=[Metric(value=1.5e9)])
    text = family.to_text()
    assert "{" not in text
    assert text.endswith(" 1.5e+09\n")


def test_label_values_are_escaped():
    family = Family(name="m", metrics=[Metric(["k"], ['a"b'], 1)])
    assert family.to_text() == 'm{k="a\\"b"} 1\n'


def test_mismatched_labels_raise():
    family = Family(name="m", metrics=[Metric(["a", "b"], ["x"], 1)])
    with pytest.raises(ValueError):
        family.to_text()


def test_empty_family_renders_nothing():
    assert Family(name="m").to_text() == ""


def _generator():
    return FamilyGenerator(
        "kube_lease_owner",
        "Information about the Lease's owner.",
        MetricType.GAUGE,
        lambda obj: Family(metrics=[Metric(["x"], [obj], 1)]),
    )


def test_generate_sets_family_name():
    family = _generator().generate("v")
    assert family.name == "kube_lease_owner"
    assert family.metrics[0].label_values == ["v"]


def test_header_has_help_and_type():
    assert _generator().header() == (
        "# HELP kube_lease_owner Information about the Lease's owner.\n"
        "# TYPE kube_lease_owner gauge"
    )


def test_compose_and_extract_keep_order():
    second = FamilyGenerator(
        "kube_lease_renew_time",
        "Kube lease renew time.",
        MetricType.GAUGE,
        lambda obj: Family(),
    )
    gens = [_generator(), second]
    families = compose_metric_gen_funcs(gens)("v")
    assert [f.name for f in families] == ["kube_lease_owner", "kube_lease_renew_time"]
    headers = extract_metric_family_headers(gens)
    assert len(headers) == 2
    assert headers[1].startswith("# HELP kube_lease_renew_time Kube lease renew time.")