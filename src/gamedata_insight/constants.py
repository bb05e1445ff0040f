#!/usr/bin/env python3
"""Constants for gamedata-insight operations.

This module centralizes all magic numbers, thresholds and default values
used throughout the gamedata-insight codebase.
"""
from __future__ import annotations

# ──────────────────────────────────────────────────────────────────────────────
# Relationship Index
# ──────────────────────────────────────────────────────────────────────────────

# Prefix removed from file keys when deriving table names
CLIENT_FILE_PREFIX = "client_"

# Suffix removed from file keys when deriving table names
XML_FILE_SUFFIX = ".xml"

# ──────────────────────────────────────────────────────────────────────────────
# Impact Analysis
# ──────────────────────────────────────────────────────────────────────────────

# Highest number of impacted tables still reported as WARNING (more is CRITICAL)
WARNING_TABLE_LIMIT = 3

# Default traversal depth for dependency graphs
DEFAULT_GRAPH_MAX_DEPTH = 3

# Width of the rule lines in rendered impact reports
REPORT_RULE_WIDTH = 60

# ──────────────────────────────────────────────────────────────────────────────
# Attribute Aggregation
# ──────────────────────────────────────────────────────────────────────────────

# Distinct values tracked per field before new values stop being counted
MAX_TRACKED_UNIQUE_VALUES = 500

# Number of most frequent values kept in a field distribution
TOP_VALUE_LIMIT = 12

# Number of sample records kept in a designer insight
SAMPLE_RECORD_LIMIT = 24

# Minimum coverage ratio for a primary key candidate
PRIMARY_KEY_MIN_COVERAGE = 0.95

# Pattern for values counted in numeric statistics
NUMERIC_VALUE_PATTERN = r"^-?\d+(\.\d+)?$"

# Label used for blank values in distributions
EMPTY_VALUE_LABEL = "(empty)"

# Label used for the synthetic bucket of untracked values
TRUNCATED_VALUES_LABEL = "Remaining Values (truncated)"

# ──────────────────────────────────────────────────────────────────────────────
# Suggestions
# ──────────────────────────────────────────────────────────────────────────────

# Coverage (percent) below which a field is reported as low coverage
LOW_COVERAGE_PERCENT = 60.0

# Coverage (percent) below which a field is reported as moderate coverage
MODERATE_COVERAGE_PERCENT = 90.0

# Entry count above which a record volume suggestion is emitted
LARGE_RECORD_VOLUME = 5000

# Database sync check: minimum entries for the strict comparison
SYNC_CHECK_MIN_ENTRIES = 10

# Database sync check: relative difference for the strict comparison
SYNC_CHECK_RATIO = 0.3

# Database sync check: absolute difference for the strict comparison
SYNC_CHECK_STRICT_DIFF = 50

# Database sync check: absolute difference for the lenient comparison
SYNC_CHECK_LENIENT_DIFF = 20

# ──────────────────────────────────────────────────────────────────────────────
# Statistical Analysis
# ──────────────────────────────────────────────────────────────────────────────

# Minimum numeric values for a field to take part in advanced analysis
MIN_NUMERIC_VALUES = 3

# Numeric fields (in discovery order) used for pairwise correlation
MAX_CORRELATION_FIELDS = 10

# Numeric fields (in discovery order) profiled for distribution shape
MAX_DISTRIBUTION_FIELDS = 15

# Absolute correlation below which fields are considered unrelated
WEAK_CORRELATION_THRESHOLD = 0.3

# Correlation above which the growth pattern is examined
STRONG_CORRELATION_THRESHOLD = 0.7

# Power growth heuristic limits
POWER_GROWTH_MIN_POINTS = 5
POWER_GROWTH_WINDOW = 10
POWER_GROWTH_MIN_RATES = 3
POWER_GROWTH_RATE_STEP = 1.1
POWER_GROWTH_INCREASING_SHARE = 0.6

# Distribution shape limits
EVENNESS_BUCKETS = 10
UNIFORM_SKEW_LIMIT = 0.5
UNIFORM_EVENNESS_MIN = 0.7
STRONG_SKEW_LIMIT = 1.0
GAP_FACTOR = 3.0
GAP_MIN_ABSOLUTE = 1.0
POWER_LAW_MIN_VALUES = 10
POWER_LAW_TOP_SHARE = 0.5

# Outlier detection limits
MIN_OUTLIER_VALUES = 5
OUTLIER_IQR_MULTIPLIER = 3.0
MAX_REPORTED_OUTLIERS = 5
MAX_OUTLIER_EXAMPLES = 3

# ──────────────────────────────────────────────────────────────────────────────
# Output and Formatting
# ──────────────────────────────────────────────────────────────────────────────

# Supported report formats
OUTPUT_FORMATS = ("text", "json", "markdown")

# Default report format
DEFAULT_OUTPUT_FORMAT = "text"

# ──────────────────────────────────────────────────────────────────────────────
# Logging and Debugging
# ──────────────────────────────────────────────────────────────────────────────

# Default log level
DEFAULT_LOG_LEVEL = "WARNING"

# Maximum log file size in MB
MAX_LOG_FILE_SIZE = 50

# Number of log files to keep in rotation
LOG_FILE_BACKUP_COUNT = 5

# Log format string
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

__all__ = [
    "CLIENT_FILE_PREFIX",
    "XML_FILE_SUFFIX",
    "WARNING_TABLE_LIMIT",
    "DEFAULT_GRAPH_MAX_DEPTH",
    "REPORT_RULE_WIDTH",
    "MAX_TRACKED_UNIQUE_VALUES",
    "TOP_VALUE_LIMIT",
    "SAMPLE_RECORD_LIMIT",
    "PRIMARY_KEY_MIN_COVERAGE",
    "NUMERIC_VALUE_PATTERN",
    "EMPTY_VALUE_LABEL",
    "TRUNCATED_VALUES_LABEL",
    "LOW_COVERAGE_PERCENT",
    "MODERATE_COVERAGE_PERCENT",
    "LARGE_RECORD_VOLUME",
    "SYNC_CHECK_MIN_ENTRIES",
    "SYNC_CHECK_RATIO",
    "SYNC_CHECK_STRICT_DIFF",
    "SYNC_CHECK_LENIENT_DIFF",
    "MIN_NUMERIC_VALUES",
    "MAX_CORRELATION_FIELDS",
    "MAX_DISTRIBUTION_FIELDS",
    "WEAK_CORRELATION_THRESHOLD",
    "STRONG_CORRELATION_THRESHOLD",
    "POWER_GROWTH_MIN_POINTS",
    "POWER_GROWTH_WINDOW",
    "POWER_GROWTH_MIN_RATES",
    "POWER_GROWTH_RATE_STEP",
    "POWER_GROWTH_INCREASING_SHARE",
    "EVENNESS_BUCKETS",
    "UNIFORM_SKEW_LIMIT",
    "UNIFORM_EVENNESS_MIN",
    "STRONG_SKEW_LIMIT",
    "GAP_FACTOR",
    "GAP_MIN_ABSOLUTE",
    "POWER_LAW_MIN_VALUES",
    "POWER_LAW_TOP_SHARE",
    "MIN_OUTLIER_VALUES",
    "OUTLIER_IQR_MULTIPLIER",
    "MAX_REPORTED_OUTLIERS",
    "MAX_OUTLIER_EXAMPLES",
    "OUTPUT_FORMATS",
    "DEFAULT_OUTPUT_FORMAT",
    "DEFAULT_LOG_LEVEL",
    "MAX_LOG_FILE_SIZE",
    "LOG_FILE_BACKUP_COUNT",
    "DEFAULT_LOG_FORMAT",
]
