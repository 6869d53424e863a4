"""Metric families, their generators and the text exposition format."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Iterable


class MetricType(str, Enum):
    """Kind of a metric family as announced in its TYPE line."""

    GAUGE = "gauge"
    COUNTER = "counter"
    INFO = "info"
    STATESET = "stateset"


def format_value(value: float) -> str:
    """Render a sample value the way the exposition format expects.

    Uses the shortest representation that round-trips, switching to
    exponent notation when the decimal exponent is below -4 or at least 6.
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    if value == 0:
        return sign + "0"

    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    point = len(digits) + exponent
    exp = point - 1

    if exp < -4 or exp >= 6:
        mantissa = digits[0] + (f".{digits[1:]}" if len(digits) > 1 else "")
        return f"{sign}{mantissa}e{'-' if exp < 0 else '+'}{abs(exp):02d}"
    if point <= 0:
        body = "0." + "0" * (-point) + digits
    elif point >= len(digits):
        body = digits + "0" * (point - len(digits))
    else:
        body = f"{digits[:point]}.{digits[point:]}"
    return sign + body


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


@dataclass
class Metric:
    """One sample: label keys, matching label values and a value."""

    label_keys: list[str] = field(default_factory=list)
    label_values: list[str] = field(default_factory=list)
    value: float = 0.0

    def _render(self, name: str) -> str:
        if len(self.label_keys) != len(self.label_values):
            raise ValueError(
                f"metric {name!r} has {len(self.label_keys)} label keys "
                f"but {len(self.label_values)} label values"
            )
        labels = ""
        if self.label_keys:
            pairs = ",".join(
                f'{key}="{_escape(val)}"'
                for key, val in zip(self.label_keys, self.label_values)
            )
            labels = "{" + pairs + "}"
        return f"{name}{labels} {format_value(self.value)}\n"


@dataclass
class Family:
    """A named group of metrics."""

    name: str = ""
    metrics: list[Metric] = field(default_factory=list)

    def to_text(self) -> str:
        """Return the samples of this family, one line each."""
        return "".join(m._render(self.name) for m in self.metrics)


@dataclass
class FamilyGenerator:
    """Describes a metric family and produces it from an object."""

    name: str
    help: str
    type: MetricType
    generate_func: Callable[[Any], Family]

    def generate(self, obj: Any) -> Family:
        """Build the family for ``obj`` and stamp it with this generator's name."""
        family = self.generate_func(obj)
        family.name = self.name
        return family

    def header(self) -> str:
        """Return the HELP and TYPE lines of the family."""
        return (
            f"# HELP {self.name} {self.help}\n"
            f"# TYPE {self.name} {MetricType(self.type).value}"
        )


def compose_metric_gen_funcs(
    generators: Iterable[FamilyGenerator],
) -> Callable[[Any], list[Family]]:
    """Combine generators into one function returning all families for an object."""
    gens = list(generators)

    def generate_all(obj: Any) -> list[Family]:
        return [g.generate(obj) for g in gens]

    return generate_all


def extract_metric_family_headers(generators: Iterable[FamilyGenerator]) -> list[str]:
    """Return the header of every generator, in order."""
    return [g.header() for g in generators]