"""
Data loader for term datasets.

Handles loading, caching, and sampling the terms indexed by the demo and
the benchmark, and generating synthetic terms when no dataset is around.
"""

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from bkmap import config
from bkmap.common.logger import get_logger

logger = get_logger(__name__)

# Cache for the loaded dataset
_dataset_cache: Optional[pd.DataFrame] = None
_dataset_cache_path: Optional[str] = None


@dataclass
class TermRecord:
    """
    A single row of the term dataset.

    Attributes:
        term: The term itself (used as the map key).
        attributes: Remaining columns of the row (used as the map value).
    """
    term: str
    attributes: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the record to a dictionary."""
        return {config.DATASET_KEY_COLUMN: self.term, **self.attributes}

    @classmethod
    def from_series(cls, series: pd.Series) -> "TermRecord":
        """Create a TermRecord from a pandas Series (DataFrame row)."""
        columns = config.DATASET_VALUE_COLUMNS
        if columns is None:
            columns = [c for c in series.index if c != config.DATASET_KEY_COLUMN]
        attributes = {}
        for column in columns:
            value = series[column]
            # numpy scalars -> plain Python values
            attributes[column] = value.item() if hasattr(value, "item") else value
        return cls(term=str(series[config.DATASET_KEY_COLUMN]), attributes=attributes)


def load_dataset(path: Optional[str] = None, force_reload: bool = False) -> pd.DataFrame:
    """
    Load the term dataset from CSV.

    The dataset is cached in memory after first load.

    Args:
        path: CSV file to read. If None, uses config.DATASET_PATH.
        force_reload: If True, reload from disk even if cached.

    Returns:
        pandas DataFrame containing the terms.

    Raises:
        FileNotFoundError: If the dataset file does not exist.
    """
    global _dataset_cache, _dataset_cache_path

    path = path or config.DATASET_PATH

    if _dataset_cache is not None and _dataset_cache_path == path and not force_reload:
        logger.debug("Returning cached dataset")
        return _dataset_cache

    logger.info(f"Loading dataset from {path}")

    df = pd.read_csv(path, low_memory=False)

    if config.DATASET_KEY_COLUMN not in df.columns:
        raise ValueError(
            f"Dataset {path} has no '{config.DATASET_KEY_COLUMN}' column "
            f"(columns: {list(df.columns)})"
        )

    # Filter out rows with null terms
    null_term_count = df[config.DATASET_KEY_COLUMN].isnull().sum()
    if null_term_count > 0:
        logger.warning(f"Filtering out {null_term_count} rows with null terms")
        df = df[df[config.DATASET_KEY_COLUMN].notnull()].copy()

    df[config.DATASET_KEY_COLUMN] = df[config.DATASET_KEY_COLUMN].astype(str)

    # Reset index after filtering
    df = df.reset_index(drop=True)

    logger.info(f"Dataset loaded: {len(df):,} rows, {len(df.columns)} columns")

    _dataset_cache = df
    _dataset_cache_path = path
    return df


def get_all_terms(path: Optional[str] = None) -> List[str]:
    """
    Get a list of all terms in the dataset.

    Returns:
        List of term strings, in file order.
    """
    df = load_dataset(path)
    return df[config.DATASET_KEY_COLUMN].tolist()


def get_all_records(path: Optional[str] = None) -> List[TermRecord]:
    """Get every row of the dataset as a TermRecord."""
    df = load_dataset(path)
    return [TermRecord.from_series(row) for _, row in df.iterrows()]


def get_sample_terms(n: int, seed: Optional[int] = None, path: Optional[str] = None) -> List[str]:
    """
    Get a random sample of terms from the dataset.

    Args:
        n: Number of terms to sample.
        seed: Random seed for reproducibility. If None, results vary.
        path: CSV file to read. If None, uses config.DATASET_PATH.

    Returns:
        List of term strings.
    """
    terms = get_all_terms(path)

    if n > len(terms):
        logger.warning(f"Requested {n} samples but only {len(terms)} available")
        n = len(terms)

    rng = random.Random(seed)
    return rng.sample(terms, n)


def generate_terms(
    n: int,
    seed: Optional[int] = None,
    alphabet: Optional[str] = None,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
) -> List[str]:
    """
    Generate random synthetic terms.

    Used by the benchmark when no dataset is available or when the index
    must be larger than the dataset.

    Args:
        n: Number of terms to generate (duplicates are possible).
        seed: Random seed for reproducibility.
        alphabet: Characters to draw from. Defaults to config.SYNTHETIC_ALPHABET.
        min_length: Shortest term. Defaults to config.SYNTHETIC_MIN_LENGTH.
        max_length: Longest term. Defaults to config.SYNTHETIC_MAX_LENGTH.

    Returns:
        List of n terms.
    """
    alphabet = alphabet or config.SYNTHETIC_ALPHABET
    min_length = min_length if min_length is not None else config.SYNTHETIC_MIN_LENGTH
    max_length = max_length if max_length is not None else config.SYNTHETIC_MAX_LENGTH

    if min_length < 0 or max_length < min_length:
        raise ValueError(f"Invalid term length bounds: [{min_length}, {max_length}]")

    rng = random.Random(seed)
    return [
        "".join(rng.choice(alphabet) for _ in range(rng.randint(min_length, max_length)))
        for _ in range(n)
    ]


def get_dataset_stats(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Get statistics about the dataset.

    Returns:
        Dictionary containing dataset statistics.
    """
    df = load_dataset(path)
    lengths = df[config.DATASET_KEY_COLUMN].str.len()

    return {
        "total_rows": len(df),
        "total_columns": len(df.columns),
        "columns": list(df.columns),
        "unique_terms": df[config.DATASET_KEY_COLUMN].nunique(),
        "mean_term_length": float(lengths.mean()) if len(df) else 0.0,
        "max_term_length": int(lengths.max()) if len(df) else 0,
        "memory_usage_mb": df.memory_usage(deep=True).sum() / (1024 * 1024),
        "null_counts": df.isnull().sum().to_dict(),
    }


def clear_cache() -> None:
    """Clear the cached dataset to free memory."""
    global _dataset_cache, _dataset_cache_path
    _dataset_cache = None
    _dataset_cache_path = None
    logger.info("Dataset cache cleared")
