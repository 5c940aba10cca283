"""
Data Cleaning Module

Bronze → silver transformation of raw crash downloads
"""

from .clean_crashes import (
    CLEAN_COLUMNS,
    clean_crashes,
    derive_injury_label,
    normalize_report_type,
    load_raw_crashes,
    load_clean_crashes,
    save_clean_crashes
)

__all__ = [
    'CLEAN_COLUMNS',
    'clean_crashes',
    'derive_injury_label',
    'normalize_report_type',
    'load_raw_crashes',
    'load_clean_crashes',
    'save_clean_crashes',
]
