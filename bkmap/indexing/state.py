"""
State export and restoration for BK-maps.

This is the boundary towards persistence: it turns a map into plain
nested dictionaries and lists, and rebuilds a live map from them. Writing
that structure to bytes or text (JSON, pickle, ...) is left to the caller.

State layout:
    {
        "metric": <metric.to_config() or None>,
        "root": None or {"key": ..., "value": ..., "children": [[edge, node], ...]},
    }

The tree is restored verbatim, without re-inserting entries, so the
metric is not evaluated during restoration. Metric scratch state is
never exported; restore_state() builds a fresh metric instead.
"""

from typing import Any, Dict, List, Optional, Tuple

from bkmap.common.logger import get_logger
from bkmap.indexing.bk_map import BKMap, BKNode, MetricFactory
from bkmap.metrics.registry import metric_from_config

logger = get_logger(__name__)


def export_state(bk_map: BKMap) -> Dict[str, Any]:
    """
    Describe a map as plain nested data.

    Args:
        bk_map: Map to export. Keys and values are referenced, not copied.

    Returns:
        State dictionary (see module docstring).
    """
    return {
        "metric": bk_map.metric.to_config(),
        "root": _export_node(bk_map.root) if bk_map.root is not None else None,
    }


def _export_node(root: BKNode) -> Dict[str, Any]:
    exported = {"key": root.key, "value": root.value, "children": []}
    stack: List[Tuple[BKNode, Dict[str, Any]]] = [(root, exported)]

    while stack:
        node, out = stack.pop()
        for edge, child in zip(node.edges, node.children):
            child_out = {"key": child.key, "value": child.value, "children": []}
            out["children"].append([edge, child_out])
            stack.append((child, child_out))

    return exported


def restore_state(state: Dict[str, Any], metric_factory: Optional[MetricFactory] = None) -> BKMap:
    """
    Rebuild a live map from exported state.

    Args:
        state: Dictionary produced by export_state() (possibly after a
               round trip through some storage format).
        metric_factory: Factory for the restored map's metrics. If None,
                        the metric is rebuilt from state["metric"].

    Returns:
        A usable BKMap holding the same tree.

    Raises:
        ValueError: If no factory is given and the state carries no usable
                    metric configuration, or if the tree violates the
                    sorted, unique edge distance layout.
    """
    root_state = state.get("root")
    root = _restore_node(root_state) if root_state is not None else None

    if metric_factory is not None:
        bk_map = BKMap.from_root(root, metric_factory=metric_factory)
    else:
        metric_config = state.get("metric")
        if metric_config is None:
            raise ValueError("State has no metric configuration; a metric_factory is required")
        metric = metric_from_config(metric_config)
        bk_map = BKMap.from_root(
            root, metric=metric, metric_factory=lambda: metric_from_config(metric_config)
        )

    logger.debug(f"Restored map with {len(bk_map)} entries")
    return bk_map


def _restore_node(root_state: Dict[str, Any]) -> BKNode:
    root = BKNode(root_state["key"], root_state["value"])
    stack: List[Tuple[BKNode, Dict[str, Any]]] = [(root, root_state)]

    while stack:
        node, node_state = stack.pop()
        for edge, child_state in node_state.get("children", []):
            edge = int(edge)
            if edge <= 0 or (node.edges and edge <= node.edges[-1]):
                raise ValueError(
                    f"Children of {node.key!r} must have strictly ascending positive "
                    f"edge distances, got {edge} after {node.edges}"
                )
            child = BKNode(child_state["key"], child_state["value"])
            node.edges.append(edge)
            node.children.append(child)
            stack.append((child, child_state))

    return root
