"""
Metric registry for state restoration.

Maps the "name" field of a metric configuration (see Metric.to_config)
to the class able to rebuild it.
"""

from typing import Any, Callable, Dict

from bkmap.metrics.base import Metric
from bkmap.metrics.levenshtein import Levenshtein

_REGISTRY: Dict[str, Callable[[Dict[str, Any]], Metric]] = {
    Levenshtein.name: Levenshtein.from_config,
}


def register_metric(name: str, builder: Callable[[Dict[str, Any]], Metric]) -> None:
    """
    Register a builder for metric configurations with the given name.

    Args:
        name: Value of the "name" field in the configuration.
        builder: Callable taking the configuration and returning a Metric.
    """
    _REGISTRY[name] = builder


def metric_from_config(cfg: Dict[str, Any]) -> Metric:
    """
    Build a live metric from its configuration.

    Raises:
        ValueError: If the configuration names no registered metric.
    """
    name = cfg.get("name")
    builder = _REGISTRY.get(name)
    if builder is None:
        raise ValueError(f"Unknown metric configuration: {name!r}")
    return builder(cfg)
