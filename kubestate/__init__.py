"""Prometheus metric families generated from Kubernetes object state."""

__version__ = "0.1.0"