"""
BK-tree (Burkhard-Keller tree) map for approximate key lookup.

Stores key-value pairs under an integer metric and answers fuzzy
queries (all entries within a radius, or the k nearest entries) while
skipping whole subtrees the triangle inequality rules out.

Layout:
    Every node keeps its children in a list sorted by edge distance
    (the metric distance between the child's key and the node's key),
    with a parallel list of those distances. Edge distances are unique
    among siblings: an insertion landing on an existing edge distance
    descends into that child instead. The root has no edge distance.

Keys at distance 0 from a stored key are treated as the same entry:
the incoming value is combined with the stored one and the stored key
is kept.

The tree only grows. There is no per-entry deletion and no rebalancing;
its shape follows from insertion order.
"""

import struct
import sys
from bisect import bisect_left, bisect_right
from typing import (
    Any,
    Callable,
    Generator,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
)

from bkmap.common.logger import get_logger
from bkmap.metrics.base import Metric, as_metric
from bkmap.metrics.levenshtein import Levenshtein

logger = get_logger(__name__)

# (distance, key, value)
Match = Tuple[int, Any, Any]

MetricFactory = Callable[[], Metric]

_EMPTY_LIST_SIZE = sys.getsizeof([])
_POINTER_SIZE = struct.calcsize("P")


class _Absent:
    """Marker passed to combine callbacks when no stored entry collided."""

    _instance: Optional["_Absent"] = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


def _list_capacity(items: list) -> int:
    """Number of slots the interpreter has allocated for a list."""
    return (sys.getsizeof(items) - _EMPTY_LIST_SIZE) // _POINTER_SIZE


class BKNode:
    """A stored entry with its children sorted by edge distance."""

    __slots__ = ("key", "value", "edges", "children")

    def __init__(self, key: Any, value: Any) -> None:
        self.key = key
        self.value = value
        self.edges: List[int] = []
        self.children: List["BKNode"] = []

    def child_at(self, dist: int) -> Optional["BKNode"]:
        """Return the child whose edge distance is exactly dist, if any."""
        idx = bisect_left(self.edges, dist)
        if idx < len(self.edges) and self.edges[idx] == dist:
            return self.children[idx]
        return None

    def children_around(self, dist: int, radius: int) -> List["BKNode"]:
        """
        Children whose edge distance lies in [dist - radius, dist + radius].

        Any child outside that window differs from dist by more than radius,
        so by the triangle inequality neither it nor its subtree can be
        within radius of a query at distance dist from this node.
        """
        lo = bisect_left(self.edges, dist - radius)
        hi = bisect_right(self.edges, dist + radius)
        return self.children[lo:hi]

    def add_child(self, dist: int, child: "BKNode") -> None:
        idx = bisect_left(self.edges, dist)
        self.edges.insert(idx, dist)
        self.children.insert(idx, child)

    def size(self) -> int:
        return sum(child.size() for child in self.children) + 1

    def capacity(self) -> int:
        return sum(child.capacity() for child in self.children) + _list_capacity(self.children)

    def shrink_to_fit(self) -> None:
        # Slicing allocates exactly len() slots.
        self.edges = self.edges[:]
        self.children = self.children[:]
        for child in self.children:
            child.shrink_to_fit()

    def depth(self) -> int:
        return max((child.depth() for child in self.children), default=0) + 1

    def __repr__(self) -> str:
        return f"BKNode(key={self.key!r}, children={len(self.children)})"


class FuzzySearch:
    """
    Lazy radius search over a BK-map.

    Yields (distance, key, value) for every stored entry within radius of
    the query, in no particular order. Owns its traversal stack and its
    metric, so each next() resumes the depth-first walk where it stopped.
    Not restartable: start a new search to traverse again.
    """

    __slots__ = ("_metric", "_stack", "_query", "_radius")

    def __init__(self, root: Optional[BKNode], metric: Metric, query: Any, radius: int) -> None:
        self._metric = metric
        self._stack: List[BKNode] = [root] if root is not None else []
        self._query = query
        self._radius = radius

    @property
    def query(self) -> Any:
        return self._query

    @property
    def radius(self) -> int:
        return self._radius

    def __iter__(self) -> "FuzzySearch":
        return self

    def __next__(self) -> Match:
        stack = self._stack
        while stack:
            node = stack.pop()
            dist = self._metric.distance(self._query, node.key)

            stack.extend(node.children_around(dist, self._radius))

            if dist <= self._radius:
                return dist, node.key, node.value
        raise StopIteration

    def __repr__(self) -> str:
        return f"FuzzySearch(query={self._query!r}, radius={self._radius}, pending={len(self._stack)})"


class BKMap:
    """
    BK-tree map with fuzzy search.

    Args:
        metric: Metric instance (or plain distance function) used for
                insertion, and for searches when no factory is given.
        metric_factory: Zero-argument callable producing fresh metrics.
                        When set, every search gets its own metric so the
                        map's stateful metric is never shared.

    With neither argument, Levenshtein is used as the factory.
    """

    def __init__(
        self,
        metric: Optional[Any] = None,
        metric_factory: Optional[MetricFactory] = None,
    ) -> None:
        if metric_factory is not None and not callable(metric_factory):
            raise TypeError("metric_factory must be callable")
        if metric is None and metric_factory is None:
            metric_factory = Levenshtein
        if metric is None:
            metric = metric_factory()

        self._metric: Metric = as_metric(metric)
        self._metric_factory = metric_factory
        self._root: Optional[BKNode] = None

    @classmethod
    def from_items(
        cls,
        items: Iterable[Tuple[Any, Any]],
        metric: Optional[Any] = None,
        metric_factory: Optional[MetricFactory] = None,
    ) -> "BKMap":
        """Build a map by inserting (key, value) pairs in order."""
        bk_map = cls(metric=metric, metric_factory=metric_factory)
        bk_map.update(items)
        return bk_map

    @classmethod
    def from_root(
        cls,
        root: Optional[BKNode],
        metric: Optional[Any] = None,
        metric_factory: Optional[MetricFactory] = None,
    ) -> "BKMap":
        """
        Wrap an already built tree without re-inserting its entries.

        The tree must have been laid out under the same metric; this is
        not checked.
        """
        bk_map = cls(metric=metric, metric_factory=metric_factory)
        bk_map._root = root
        return bk_map

    @property
    def root(self) -> Optional[BKNode]:
        return self._root

    @property
    def metric(self) -> Metric:
        return self._metric

    @property
    def metric_factory(self) -> Optional[MetricFactory]:
        return self._metric_factory

    # =========================================================================
    # Insertion
    # =========================================================================

    def insert(self, key: Any, value: Any) -> None:
        """Insert an entry, overwriting the value of a colliding entry."""
        self.insert_and_transform(
            key, value, lambda stored, incoming: stored if incoming is ABSENT else incoming
        )

    def insert_or_merge(self, key: Any, value: Any, merge_fn: Callable[[Any, Any], Any]) -> None:
        """
        Insert an entry, merging into a colliding entry instead of overwriting.

        Args:
            key: Key to insert.
            value: Value to insert.
            merge_fn: Called as merge_fn(stored, incoming) only when a stored
                      key is at distance 0; its return value is stored.
        """
        self.insert_and_transform(
            key, value, lambda stored, incoming: stored if incoming is ABSENT else merge_fn(stored, incoming)
        )

    def insert_and_transform(self, key: Any, value: Any, combine_fn: Callable[[Any, Any], Any]) -> None:
        """
        Insert an entry through a custom combine callback.

        combine_fn is called exactly once:
            - combine_fn(value, ABSENT) when the key lands in a new node;
            - combine_fn(stored_value, value) when a stored key is at
              distance 0 from key.
        Its return value is what gets stored.
        """
        if self._root is None:
            self._root = BKNode(key, combine_fn(value, ABSENT))
            logger.debug(f"Created root node for key {key!r}")
            return

        node = self._root
        while True:
            dist = self._metric.distance(key, node.key)
            if dist == 0:
                node.value = combine_fn(node.value, value)
                return

            child = node.child_at(dist)
            if child is None:
                node.add_child(dist, BKNode(key, combine_fn(value, ABSENT)))
                return

            node = child

    def update(self, items: Iterable[Tuple[Any, Any]]) -> None:
        """Insert every (key, value) pair, overwriting on collision."""
        for key, value in items:
            self.insert(key, value)

    # =========================================================================
    # Search
    # =========================================================================

    def search_within(self, query: Any, radius: int) -> FuzzySearch:
        """
        Lazily find every entry within radius of query.

        Returns:
            Iterator of (distance, key, value), order unspecified.

        Raises:
            ValueError: If radius is negative.
        """
        if radius < 0:
            raise ValueError(f"radius must be >= 0, got {radius}")
        return FuzzySearch(self._root, self._search_metric(), query, radius)

    def search_nearest(self, query: Any, count: int) -> List[Match]:
        """
        Find the count entries closest to query.

        Entries tied with the count-th closest distance are all returned,
        so the result may hold more than count entries. With fewer than
        count entries stored, all of them are returned.

        Returns:
            List of (distance, key, value) sorted by ascending distance.

        Raises:
            ValueError: If count is negative.
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        if count == 0 or self._root is None:
            return []

        metric = self._search_metric()
        results: List[Match] = []
        dists: List[int] = []

        # Each entry carries a lower bound on the node's distance to the
        # query, |edge - parent_distance|, known before the metric runs.
        stack: List[Tuple[int, BKNode]] = [(0, self._root)]

        while stack:
            lower_bound, node = stack.pop()
            bound = dists[count - 1] if len(dists) >= count else None

            if bound is not None and lower_bound > bound:
                continue

            dist = metric.distance(query, node.key)

            if bound is None:
                stack.extend(
                    (abs(edge - dist), child) for edge, child in zip(node.edges, node.children)
                )
            else:
                lo = bisect_left(node.edges, dist - bound)
                hi = bisect_right(node.edges, dist + bound)
                stack.extend(
                    (abs(node.edges[i] - dist), node.children[i]) for i in range(lo, hi)
                )

            if bound is None or dist <= bound:
                idx = bisect_right(dists, dist)
                dists.insert(idx, dist)
                results.insert(idx, (dist, node.key, node.value))

                # Drop the tail only when it does not split a group of ties.
                if len(dists) > count and dists[count] > dists[count - 1]:
                    del dists[count:]
                    del results[count:]

        return results

    def _search_metric(self) -> Metric:
        if self._metric_factory is not None:
            return as_metric(self._metric_factory())
        return self._metric

    # =========================================================================
    # Size and Memory
    # =========================================================================

    def is_empty(self) -> bool:
        return self._root is None

    def allocated_capacity(self) -> int:
        """Total number of child slots allocated across all nodes."""
        return self._root.capacity() if self._root is not None else 0

    def compact(self) -> None:
        """Shrink every child list to its exact length."""
        if self._root is not None:
            before = self._root.capacity()
            self._root.shrink_to_fit()
            logger.debug(f"Compacted child lists: {before} -> {self._root.capacity()} slots")

    def depth(self) -> int:
        """Height of the tree (0 when empty)."""
        return self._root.depth() if self._root is not None else 0

    def clear(self) -> None:
        """Remove all entries."""
        self._root = None

    # =========================================================================
    # Dict-like Interface
    # =========================================================================

    def _find(self, key: Any) -> Optional[BKNode]:
        """Follow the insertion path of key to the node at distance 0, if any."""
        node = self._root
        while node is not None:
            dist = self._metric.distance(key, node.key)
            if dist == 0:
                return node
            node = node.child_at(dist)
        return None

    def __setitem__(self, key: Any, value: Any) -> None:
        self.insert(key, value)

    def __getitem__(self, key: Any) -> Any:
        node = self._find(key)
        if node is None:
            raise KeyError(key)
        return node.value

    def __contains__(self, key: Any) -> bool:
        return self._find(key) is not None

    def __len__(self) -> int:
        return self._root.size() if self._root is not None else 0

    def __bool__(self) -> bool:
        return self._root is not None

    def __iter__(self) -> Iterator[Any]:
        return self.keys()

    def __repr__(self) -> str:
        return f"BKMap(metric={self._metric!r}, size={len(self)})"

    def get(self, key: Any, default: Any = None) -> Any:
        """Get the value stored at distance 0 from key, or default."""
        node = self._find(key)
        if node is None:
            return default
        return node.value

    def _walk(self) -> Generator[BKNode, None, None]:
        """Yield every node in pre-order, children by ascending edge distance."""
        if self._root is None:
            return
        stack = [self._root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def keys(self) -> Generator[Any, None, None]:
        """Yield all keys in depth-first order."""
        for node in self._walk():
            yield node.key

    def values(self) -> Generator[Any, None, None]:
        """Yield all values in depth-first order."""
        for node in self._walk():
            yield node.value

    def items(self) -> Generator[Tuple[Any, Any], None, None]:
        """Yield all (key, value) pairs in depth-first order."""
        for node in self._walk():
            yield node.key, node.value
