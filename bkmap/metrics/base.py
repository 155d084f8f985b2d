"""
Abstract base class for distance metrics.

Defines the interface every metric plugged into a BKMap must follow,
plus two small adapters around it.

Metric Contract:
    distance(a, b) returns a non-negative integer and behaves as a
    mathematical metric: zero iff the arguments are equal (under the
    metric), symmetric where both sides share a type, and obeying the
    triangle inequality. The BK-map's pruning relies on this contract;
    a metric that violates it makes searches silently miss entries.
    The contract is a precondition and is never checked at runtime.

Metrics may keep scratch state between calls (see Levenshtein), so a
single instance must not serve two distance computations at once.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional


class Metric(ABC):
    """
    Abstract base class for an integer-valued distance metric.

    Subclasses implement distance(). Metrics that can be rebuilt from a
    plain configuration (for state restoration) also override
    to_config().
    """

    @abstractmethod
    def distance(self, a: Any, b: Any) -> int:
        """
        Compute the distance between two values.

        Args:
            a: First value (the query or the key being inserted).
            b: Second value (a stored key).

        Returns:
            Non-negative integer distance.
        """
        pass

    def to_config(self) -> Optional[Dict[str, Any]]:
        """
        Describe this metric as a plain dictionary.

        Returns:
            Configuration dictionary, or None if the metric cannot be
            rebuilt from configuration alone.
        """
        return None

    def __call__(self, a: Any, b: Any) -> int:
        return self.distance(a, b)


class FunctionMetric(Metric):
    """Adapts a plain two-argument distance function to the Metric interface."""

    def __init__(self, func: Callable[[Any, Any], int]):
        if not callable(func):
            raise TypeError(f"Distance function must be callable, got {type(func).__name__}")
        self._func = func

    @property
    def func(self) -> Callable[[Any, Any], int]:
        return self._func

    def distance(self, a: Any, b: Any) -> int:
        return self._func(a, b)

    def __repr__(self) -> str:
        name = getattr(self._func, "__name__", repr(self._func))
        return f"FunctionMetric({name})"


class CountingMetric(Metric):
    """
    Delegating metric that counts distance evaluations.

    Used to measure how much work the tree's pruning saves compared to
    a linear scan.

    Attributes:
        calls: Number of distance() calls since creation or last reset().
    """

    def __init__(self, inner: Metric):
        self._inner = inner
        self.calls = 0

    @property
    def inner(self) -> Metric:
        return self._inner

    def distance(self, a: Any, b: Any) -> int:
        self.calls += 1
        return self._inner.distance(a, b)

    def reset(self) -> int:
        """Reset the counter and return the value it held."""
        calls = self.calls
        self.calls = 0
        return calls

    def to_config(self) -> Optional[Dict[str, Any]]:
        return self._inner.to_config()

    def __repr__(self) -> str:
        return f"CountingMetric({self._inner!r}, calls={self.calls})"


def as_metric(metric: Any) -> Metric:
    """
    Coerce a metric-like object to a Metric.

    Args:
        metric: A Metric instance or a plain callable distance function.

    Returns:
        The metric itself, or a FunctionMetric wrapping the callable.

    Raises:
        TypeError: If the object is neither a Metric nor callable.
    """
    if isinstance(metric, Metric):
        return metric
    if callable(metric):
        return FunctionMetric(metric)
    raise TypeError(f"Expected a Metric or a callable, got {type(metric).__name__}")
