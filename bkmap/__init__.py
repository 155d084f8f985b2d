"""
bkmap: BK-tree map for fuzzy lookup under any integer metric.

    from bkmap import BKMap

    words = BKMap()
    words.insert("kitten", 1)
    words.insert("sitting", 2)

    list(words.search_within("mitten", 1))    # [(1, "kitten", 1)]
    words.search_nearest("sittin", 1)         # [(1, "sitting", 2)]
"""

from bkmap.indexing.bk_map import ABSENT, BKMap, BKNode, FuzzySearch
from bkmap.indexing.state import export_state, restore_state
from bkmap.metrics.base import CountingMetric, FunctionMetric, Metric
from bkmap.metrics.levenshtein import Levenshtein
from bkmap.metrics.registry import metric_from_config, register_metric

__version__ = "0.1.0"
__all__ = [
    "ABSENT", "BKMap", "BKNode", "FuzzySearch",
    "export_state", "restore_state",
    "Metric", "FunctionMetric", "CountingMetric", "Levenshtein",
    "metric_from_config", "register_metric",
]
