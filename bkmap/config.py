"""
Project configuration and constants.

Centralizes all configurable parameters for the BK-map implementation.
"""

import os

# -----------------------------------------------------------------------------
# Directory Paths
# -----------------------------------------------------------------------------

# Project root directory (one level above the package)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Data directory
DATA_DIR = os.path.join(PROJECT_ROOT, "data")

# Results directory (for plots and experiment outputs)
RESULTS_DIR = os.path.join(PROJECT_ROOT, "results")

# -----------------------------------------------------------------------------
# Dataset Configuration
# -----------------------------------------------------------------------------

# Dataset filename
DATASET_FILENAME = "terms.csv"

# Full path to dataset
DATASET_PATH = os.path.join(DATA_DIR, DATASET_FILENAME)

# Column to use as the map key
DATASET_KEY_COLUMN = "term"

# Columns to include as value (None means all columns)
DATASET_VALUE_COLUMNS = None

# -----------------------------------------------------------------------------
# Edit Distance Configuration
# -----------------------------------------------------------------------------

# Unit costs recover the classic (unweighted) Levenshtein distance.
DEFAULT_INSERTION_COST = 1
DEFAULT_DELETION_COST = 1
DEFAULT_SUBSTITUTION_COST = 1

# -----------------------------------------------------------------------------
# Search Configuration
# -----------------------------------------------------------------------------

# Radius used by the demo and benchmark when none is given.
DEFAULT_SEARCH_RADIUS = 2

# Number of neighbours requested by the demo and benchmark when none is given.
DEFAULT_NEAREST_COUNT = 5

# -----------------------------------------------------------------------------
# Synthetic Term Generation
# -----------------------------------------------------------------------------

# Alphabet and length bounds for generated benchmark terms.
SYNTHETIC_ALPHABET = "abcdefghijklmnopqrstuvwxyz"
SYNTHETIC_MIN_LENGTH = 3
SYNTHETIC_MAX_LENGTH = 10

# -----------------------------------------------------------------------------
# Logging Configuration
# -----------------------------------------------------------------------------

# Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_LEVEL = "INFO"

# Log to file (in addition to console)
LOG_TO_FILE = False

# Log file path (only used if LOG_TO_FILE is True)
LOG_FILE_PATH = os.path.join(PROJECT_ROOT, "bkmap.log")
