"""
Settings and configuration for fenci.

Paths can be overridden through environment variables.
"""

import os
from pathlib import Path

# Data directory paths
PACKAGE_DIR = Path(__file__).parent
DATA_DIR = PACKAGE_DIR / "data"

# Database path - defaults to data/cedict.sqlite
DEFAULT_DB_PATH = DATA_DIR / "cedict.sqlite"

# Environment variable for custom database path
DB_PATH = Path(os.environ.get("FENCI_DB_PATH", DEFAULT_DB_PATH))

# CC-CEDICT source text (user must download this for a full dictionary)
CEDICT_PATH = Path(os.environ.get("CEDICT_PATH", DATA_DIR / "cedict_ts.u8"))

# Small bundled sample of CC-CEDICT, enough for demos and tests
SAMPLE_CEDICT_PATH = DATA_DIR / "cedict_sample.u8"

# Debug mode
DEBUG = os.environ.get("FENCI_DEBUG", "").lower() in ("1", "true", "yes")

# Maximum candidate word length (in characters) for segmentation
MAX_WORD_LENGTH = 6

# Edge scores for the segmentation DP
SINGLE_CHAR_WORD_SCORE = -0.5
SINGLE_CHAR_OOV_SCORE = -2.0
MULTI_CHAR_WORD_WEIGHT = 1.5

# Prefix marking a classifier (measure word) sense
CLASSIFIER_PREFIX = "CL:"
