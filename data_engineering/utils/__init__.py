"""
Data engineering utilities: schema validation and data quality checks
"""

from .validation import (
    CRASH_FORBIDDEN_COLS,
    clean_crash_schema,
    check_for_leakage,
    validate_clean_crashes,
    check_data_quality,
    compare_splits
)

__all__ = [
    'CRASH_FORBIDDEN_COLS',
    'clean_crash_schema',
    'check_for_leakage',
    'validate_clean_crashes',
    'check_data_quality',
    'compare_splits',
]
