"""
Utilities package for the Oneiro project.

This package provides the text-level building blocks of the parser:
- txt: Sanitizing, length limits and word counts
- callouts: Callout scanning and marker helpers
- dates: Date resolution
- metrics: Metric extraction
- md: Title extraction and content cleaning

Import commonly-used utilities directly from this package:
    from oneiro.utils import sanitize_content, scan_callouts, resolve_date

Or import specific modules:
    from oneiro.utils import txt, callouts, dates, metrics, md
"""

# Text utilities
from .txt import (
    sanitize_content,
    enforce_max_length,
    count_words,
)

# Callout scanning
from .callouts import (
    CalloutBlock,
    CalloutScanner,
    scan_callouts,
    is_callout,
    extract_callout_type,
    strip_callout_header,
    parse_callout_structure,
    extract_callout_properties,
    parse_marker_properties,
    generate_callout_id,
    find_block_id,
    callout_types,
)

# Dates
from .dates import (
    resolve_date,
    resolve_date_or_fallback,
    canonical_date,
    is_canonical_date,
)

# Metrics
from .metrics import (
    extract_metrics,
    extract_metrics_text,
    find_metrics_section,
    parse_metric_pairs,
    parse_metric_value,
    extract_metrics_from_callouts,
)

# Markdown helpers
from .md import (
    extract_title,
    clean_content,
    truncate_title,
)

__all__ = [
    # txt
    "sanitize_content",
    "enforce_max_length",
    "count_words",
    # callouts
    "CalloutBlock",
    "CalloutScanner",
    "scan_callouts",
    "is_callout",
    "extract_callout_type",
    "strip_callout_header",
    "parse_callout_structure",
    "extract_callout_properties",
    "parse_marker_properties",
    "generate_callout_id",
    "find_block_id",
    "callout_types",
    # dates
    "resolve_date",
    "resolve_date_or_fallback",
    "canonical_date",
    "is_canonical_date",
    # metrics
    "extract_metrics",
    "extract_metrics_text",
    "find_metrics_section",
    "parse_metric_pairs",
    "parse_metric_value",
    "extract_metrics_from_callouts",
    # md
    "extract_title",
    "clean_content",
    "truncate_title",
]
